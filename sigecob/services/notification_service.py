# sigecob/services/notification_service.py
from decimal import Decimal
from html import escape
from typing import Iterable, Dict, Any

from sigecob.celery_worker import celery_app
from sigecob.services.email_sender import EmailSender
from sigecob.utils.logging import get_logger

logger = get_logger(__name__)

SIGNATURE = "<p>Saludos,</p><p>El equipo de SIGECOB</p>"


class NotificationService:
    """
    Customer emails about orders.

    Messages are rendered here and handed to a Celery task; a broker that is
    down costs the email, never the caller's request.
    """

    def send_order_confirmation(
        self,
        to: str,
        customer_name: str | None,
        order_id: int,
        total_amount: Decimal,
        shipping_address: str,
        lines: Iterable[Dict[str, Any]],
    ) -> None:
        greeting = escape(customer_name or to)
        items_html = "".join(
            f"<li>{line['quantity']} x {escape(line['name'])} - ${Decimal(line['price']):.2f} c/u</li>"
            for line in lines
        )
        subject = f"Confirmación de tu Orden #{order_id} - SIGECOB"
        text = (
            f"Gracias por tu compra. Tu orden #{order_id} ha sido recibida. "
            f"Monto Total: ${total_amount:.2f}."
        )
        html = (
            f"<p>Hola {greeting},</p>"
            f"<p>¡Gracias por tu compra! Tu orden <strong>#{order_id}</strong> ha sido recibida y está siendo procesada.</p>"
            f"<p><strong>Detalles de tu orden:</strong></p><ul>{items_html}</ul>"
            f"<p><strong>Monto Total:</strong> ${total_amount:.2f}</p>"
            f"<p><strong>Dirección de Envío:</strong> {escape(shipping_address)}</p>"
            f"<p>Te notificaremos cuando el estado de tu orden cambie.</p>"
            f"{SIGNATURE}"
        )
        self._dispatch(to, subject, text, html)

    def send_status_update(
        self,
        to: str,
        customer_name: str | None,
        order_id: int,
        changes: Dict[str, Any],
    ) -> None:
        greeting = escape(customer_name or to)
        body = [
            f"<p>Hola {greeting},</p>",
            f"<p>Tu orden <strong>#{order_id}</strong> ha sido actualizada.</p>",
        ]
        if "new_order_status" in changes:
            body.append(
                f"<p>El estado de tu orden ha cambiado de <strong>{changes['old_order_status']}</strong> "
                f"a <strong>{changes['new_order_status']}</strong>.</p>"
            )
        if "new_payment_status" in changes:
            body.append(
                f"<p>El estado de tu pago ha cambiado de <strong>{changes['old_payment_status']}</strong> "
                f"a <strong>{changes['new_payment_status']}</strong>.</p>"
            )
        body.append("<p>Puedes revisar los detalles completos de tu orden en tu cuenta de SIGECOB.</p>")
        body.append(SIGNATURE)

        self._dispatch(
            to,
            f"Actualización de tu Orden #{order_id} - SIGECOB",
            "Se actualizó tu orden.",
            "".join(body),
        )

    @staticmethod
    def _dispatch(to: str, subject: str, text: str, html: str) -> None:
        try:
            send_email_task.delay(to, subject, text, html)
        except Exception as e:
            logger.warning(f"Could not queue email '{subject}' for {to}: {e}")


@celery_app.task(name="sigecob.services.notification_service.send_email_task")
def send_email_task(to: str, subject: str, text: str, html: str) -> bool:
    return EmailSender().send(to, subject, text, html)
