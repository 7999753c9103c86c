# sigecob/celery_worker.py
from celery import Celery

from sigecob.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND, CELERY_TASK_ALWAYS_EAGER

celery_app = Celery(
    "sigecob",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

#explicit imports so the worker registers the tasks
celery_app.conf.imports = (
    "sigecob.services.notification_service",
    "sigecob.services.audit_service",
)

celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
celery_app.conf.task_ignore_result = True
celery_app.conf.timezone = "UTC"
