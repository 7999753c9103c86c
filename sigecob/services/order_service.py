# sigecob/services/order_service.py
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from sigecob.data.models.order import OrderModel
from sigecob.data.models.payment import PaymentModel
from sigecob.domain.enums import (
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProductStatus,
    UserRole,
    ensure_transition,
    parse_status,
)
from sigecob.domain.errors import (
    Conflict,
    EmptyCart,
    Forbidden,
    InsufficientStock,
    InvalidPaymentMethod,
    MissingField,
    NotFound,
    PersistenceFailure,
    ProductUnavailable,
    ShopError,
)
from sigecob.domain.records import CartSnapshot
from sigecob.repos.cart_repo import CartRepo
from sigecob.repos.order_repo import OrderRepo
from sigecob.repos.product_repo import ProductRepo
from sigecob.services.audit_service import AuditService
from sigecob.services.cart_service import CartService
from sigecob.services.notification_service import NotificationService
from sigecob.services.user_service import UserService
from sigecob.utils.logging import get_logger

logger = get_logger(__name__)

ALL_STATUSES = "Todos"


@dataclass(frozen=True)
class CheckoutResult:
    order: OrderModel
    payment: PaymentModel


def new_transaction_id() -> str:
    return f"TXN-{int(time.time() * 1000)}-{uuid.uuid4().hex[:12].upper()}"


class OrderService:
    """
    Orders: checkout (cart -> order + payment), history and admin status changes.
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        audit_service: AuditService | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.cart_service = CartService(db)
        self.users = UserService(db)
        self.notification_service = notification_service or NotificationService()
        self.audit = audit_service or AuditService(db)

    def place_order(
        self,
        user_id: int,
        shipping_address: str | None,
        payment_method: str | None,
        source_ip: str | None = None,
    ) -> CheckoutResult:
        """
        Use case: checkout.

        1. validates input, cart contents and stock (nothing written yet)
        2. in one transaction: cart items taken, order, order items, conditional stock
           decrement, confirmed payment, order -> Processing
        3. after commit: audit entry and confirmation email, best-effort

        Any failure in 2 rolls the whole unit back.
        """
        try:
            method, address, snapshot = self._check_preconditions(user_id, shipping_address, payment_method)
        except ShopError as e:
            self.db.rollback()
            logger.info(f"Checkout rejected for user {user_id}: {e.kind}")
            self._audit_failure(user_id, e, source_ip)
            raise

        try:
            order, payment = self._execute(snapshot, address, method)
            self.db.commit()
        except ShopError as e:
            self.db.rollback()
            logger.warning(f"Checkout for user {user_id} lost a race: {e.kind}")
            self._audit_failure(user_id, e, source_ip)
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Checkout for user {user_id} rolled back")
            failure = PersistenceFailure("Error interno del servidor al procesar la orden o el pago.")
            self._audit_failure(user_id, failure, source_ip, cause=str(e))
            raise failure from e
        except Exception:
            self.db.rollback()
            logger.exception(f"Checkout for user {user_id} rolled back")
            raise

        logger.info(
            f"Order {order.id} placed by user {user_id}: total {snapshot.total}, "
            f"payment {payment.transaction_id}"
        )

        order = self.repo.get_order(order.id)
        self._after_checkout(order, payment, snapshot, source_ip)
        return CheckoutResult(order=order, payment=payment)

    def _check_preconditions(self, user_id: int, shipping_address, payment_method):
        address = (shipping_address or "").strip()
        method_raw = (payment_method or "").strip()
        if not address or not method_raw:
            raise MissingField(
                "La dirección de envío y el método de pago son obligatorios.",
                fields=[name for name, value in (("shippingAddress", address), ("paymentMethod", method_raw)) if not value],
            )

        try:
            method = PaymentMethod(method_raw)
        except ValueError:
            raise InvalidPaymentMethod(
                f"Método de pago '{method_raw}' no válido.",
                allowed=[m.value for m in PaymentMethod],
            )

        #read once; the rest of the unit of work uses this snapshot only
        snapshot = self.cart_service.find_snapshot(user_id)
        if snapshot is None or snapshot.is_empty:
            raise EmptyCart(
                "El carrito está vacío. No se puede crear una orden.",
                cart_id=snapshot.cart_id if snapshot else None,
            )

        for line in snapshot.lines:
            product = line.product
            if product.status == ProductStatus.DISCONTINUED:
                raise ProductUnavailable(
                    f"El producto {product.name} ya no está disponible.",
                    product_id=product.id,
                )
            if product.stock < line.quantity:
                raise InsufficientStock(
                    f"Stock insuficiente para {product.name}. Solo hay {product.stock} unidades disponibles.",
                    product_id=product.id,
                    available=product.stock,
                    requested=line.quantity,
                )

        return method, address, snapshot

    def _execute(self, snapshot: CartSnapshot, address: str, method: PaymentMethod):
        total = snapshot.total

        #first write: a second checkout of the same cart waits here, then finds nothing to take
        removed = self.carts.delete_items(snapshot.cart_id, snapshot.item_ids)
        if removed != len(snapshot.item_ids):
            raise Conflict(
                "El carrito fue modificado o ya se procesó en otra operación. Revisa tu carrito.",
                cart_id=snapshot.cart_id,
            )

        order = self.repo.create_order(
            OrderModel(
                user_id=snapshot.user_id,
                total_amount=total,
                shipping_address=address,
                order_status=OrderStatus.PENDING.value,
            )
        )

        self.repo.add_items(
            {
                "order_id": order.id,
                "product_id": line.product.id,
                "quantity": line.quantity,
                "price": line.unit_price,
            }
            for line in snapshot.lines
        )

        for line in snapshot.lines:
            self._reserve_stock(line.product.id, line.product.name, line.quantity)

        payment = self.repo.create_payment(
            PaymentModel(
                order_id=order.id,
                user_id=snapshot.user_id,
                amount=total,
                payment_method=method.value,
                transaction_id=new_transaction_id(),
                #simulated gateway: always confirms once preconditions hold
                payment_status=PaymentStatus.CONFIRMED.value,
                paid_at=datetime.now(timezone.utc),
            )
        )

        ensure_transition(OrderStatus(order.order_status), OrderStatus.PROCESSING)
        order.payment_id = payment.id
        order.order_status = OrderStatus.PROCESSING.value
        self.db.flush()
        return order, payment

    def _reserve_stock(self, product_id: int, name: str, quantity: int) -> None:
        try:
            reserved = self.products.decrement_stock(product_id, quantity)
        except IntegrityError as e:
            raise InsufficientStock(
                f"Stock insuficiente para {name}.",
                product_id=product_id,
                available=0,
                requested=quantity,
            ) from e

        if not reserved:
            available = self.products.current_stock(product_id)
            raise InsufficientStock(
                f"Stock insuficiente para {name}. Solo hay {available} unidades disponibles.",
                product_id=product_id,
                available=available,
                requested=quantity,
            )

    def _after_checkout(self, order: OrderModel, payment: PaymentModel, snapshot: CartSnapshot, source_ip) -> None:
        self.audit.record(
            "ORDER_CREATED_AND_PAYMENT_PROCESSED",
            user_id=order.user_id,
            entity="Order",
            entity_id=order.id,
            details={
                "totalAmount": order.total_amount,
                "paymentStatus": payment.payment_status,
                "transactionId": payment.transaction_id,
            },
            source_ip=source_ip,
        )

        customer = order.user
        if customer and customer.email:
            self.notification_service.send_order_confirmation(
                to=customer.email,
                customer_name=customer.name,
                order_id=order.id,
                total_amount=order.total_amount,
                shipping_address=order.shipping_address,
                lines=[
                    {"name": line.product.name, "quantity": line.quantity, "price": line.unit_price}
                    for line in snapshot.lines
                ],
            )

    def _audit_failure(self, user_id: int, error: ShopError, source_ip, **details) -> None:
        self.audit.record(
            "ORDER_CREATION_FAILED",
            user_id=user_id,
            details={**error.to_dict(), **details},
            source_ip=source_ip,
        )

    #queries
    def list_user_orders(self, user_id: int) -> List[OrderModel]:
        self.users.get_actor(user_id)
        return self.repo.list_by_user(user_id)

    def get_order(self, order_id: int, user_id: int, source_ip: str | None = None) -> OrderModel:
        requester = self.users.get_actor(user_id)
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFound("Orden no encontrada.")

        if requester.role != UserRole.ADMIN.value and order.user_id != user_id:
            self.audit.record(
                "GET_ORDER_BY_ID_UNAUTHORIZED",
                user_id=user_id,
                entity="Order",
                entity_id=order_id,
                source_ip=source_ip,
            )
            raise Forbidden("No tienes permiso para ver esta orden.")

        return order

    def list_all_orders(self, admin_id: int, status: str | None = None) -> List[OrderModel]:
        self.users.require_role(admin_id, UserRole.ADMIN)

        if status and status != ALL_STATUSES:
            status = parse_status(OrderStatus, status).value
        else:
            status = None
        return self.repo.list_all(status)

    #admin commands
    def update_status(
        self,
        order_id: int,
        admin_id: int,
        order_status: str | None = None,
        payment_status: str | None = None,
        source_ip: str | None = None,
    ) -> OrderModel:
        """
        Admin use case: move the order and/or its payment along their state machines.

        Unchanged or absent statuses are ignored; every requested change must be
        an edge of the transition table.
        """
        self.users.require_role(admin_id, UserRole.ADMIN)

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Orden no encontrada para actualizar.")

        changes: Dict[str, Any] = {}

        if order_status and order_status != order.order_status:
            target = parse_status(OrderStatus, order_status)
            ensure_transition(OrderStatus(order.order_status), target)
            changes["old_order_status"] = order.order_status
            changes["new_order_status"] = target.value

        if payment_status and order.payment and payment_status != order.payment.payment_status:
            target = parse_status(PaymentStatus, payment_status)
            ensure_transition(PaymentStatus(order.payment.payment_status), target)
            changes["old_payment_status"] = order.payment.payment_status
            changes["new_payment_status"] = target.value

        if not changes:
            logger.info(f"Order {order_id}: no status changes to apply")
            return order

        if "new_order_status" in changes:
            order.order_status = changes["new_order_status"]
        if "new_payment_status" in changes:
            order.payment.payment_status = changes["new_payment_status"]

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Status update for order {order_id} rolled back")
            raise PersistenceFailure("Error interno del servidor al actualizar el estado de la orden.") from e

        logger.info(f"Order {order_id} updated by admin {admin_id}: {changes}")

        order = self.repo.get_order(order_id)
        self.audit.record(
            "ORDER_AND_PAYMENT_STATUS_UPDATED",
            user_id=admin_id,
            entity="Order",
            entity_id=order_id,
            details=changes,
            source_ip=source_ip,
        )
        if order.user and order.user.email:
            self.notification_service.send_status_update(
                to=order.user.email,
                customer_name=order.user.name,
                order_id=order.id,
                changes=changes,
            )
        return order
