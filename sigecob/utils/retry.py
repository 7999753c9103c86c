# sigecob/utils/retry.py
import logging

import requests
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from sigecob.utils.logging import get_logger
from sigecob.utils.settings import HTTP_RETRY_ATTEMPTS

logger = get_logger(__name__)


def http_retry(attempts: int = HTTP_RETRY_ATTEMPTS):
    """Retry outbound HTTP calls on transport and non-2xx errors, then re-raise the last one."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.RequestException),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
