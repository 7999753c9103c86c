# sigecob/services/email_sender.py
import requests

from sigecob.utils.retry import http_retry
from sigecob.utils.settings import (
    EMAIL_API_URL,
    EMAIL_API_KEY,
    EMAIL_FROM,
    EMAIL_FROM_NAME,
    EMAIL_TIMEOUT,
)
from sigecob.utils.logging import get_logger

logger = get_logger(__name__)


class EmailSender:
    """
    Transactional email over a SendGrid-compatible HTTP API.

    ``send`` never raises: delivery problems are logged and reported as False.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: int = EMAIL_TIMEOUT,
    ):
        self.base_url = (base_url or EMAIL_API_URL).rstrip("/")
        self.api_key = EMAIL_API_KEY if api_key is None else api_key
        self.timeout = timeout

    def send(self, to: str, subject: str, text: str, html: str | None = None) -> bool:
        if not self.api_key:
            logger.warning(f"Email API key not configured, skipping '{subject}' to {to}")
            return False

        try:
            self._post(to, subject, text, html or text)
        except requests.RequestException as e:
            logger.error(f"Email '{subject}' to {to} failed: {e}")
            return False

        logger.info(f"Email '{subject}' sent to {to}")
        return True

    @http_retry()
    def _post(self, to: str, subject: str, text: str, html: str) -> None:
        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": EMAIL_FROM, "name": EMAIL_FROM_NAME},
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": text},
                {"type": "text/html", "value": html},
            ],
        }
        resp = requests.post(
            f"{self.base_url}/mail/send",
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
