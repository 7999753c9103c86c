# sigecob/services/audit_service.py
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sigecob.celery_worker import celery_app
from sigecob.data.database import SessionLocal
from sigecob.data.models.audit_log import AuditLogModel
from sigecob.domain.enums import UserRole
from sigecob.repos.audit_repo import AuditRepo
from sigecob.services.user_service import UserService
from sigecob.utils.logging import get_logger

logger = get_logger(__name__)


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(v) for v in value]
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class AuditService:
    """
    Append-only audit trail.

    ``record`` is fire-and-forget: entries are written by a Celery task in
    their own session, so they never share a transaction with the action
    they describe and a failed write never reaches the caller.
    """

    def __init__(self, db: Session | None = None):
        self.db = db

    @staticmethod
    def record(
        action: str,
        user_id: int | None = None,
        entity: str | None = None,
        entity_id: int | None = None,
        details: Dict[str, Any] | None = None,
        source_ip: str | None = None,
    ) -> None:
        try:
            record_audit_task.delay(
                action,
                user_id,
                entity,
                entity_id,
                _jsonable(details) if details is not None else None,
                source_ip,
            )
        except Exception as e:
            logger.warning(f"Could not queue audit entry {action}: {e}")

    def list_entries(
        self,
        auditor_id: int,
        action: str | None = None,
        user_id: int | None = None,
        entity: str | None = None,
        ip_address: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        limit: int = 100,
    ) -> List[AuditLogModel]:
        UserService(self.db).require_role(auditor_id, UserRole.ADMIN, UserRole.AUDITOR)
        return AuditRepo(self.db).list_entries(
            action=action,
            user_id=user_id,
            entity=entity,
            ip_address=ip_address,
            start=start_date,
            end=end_date,
            limit=max(1, min(limit, 500)),
        )


@celery_app.task(name="sigecob.services.audit_service.record_audit_task")
def record_audit_task(
    action: str,
    user_id: int | None,
    entity: str | None,
    entity_id: int | None,
    details: Dict[str, Any] | None,
    source_ip: str | None,
) -> None:
    db = SessionLocal()
    try:
        AuditRepo(db).add(
            AuditLogModel(
                action=action,
                user_id=user_id,
                entity=entity,
                entity_id=entity_id,
                details=details,
                ip_address=source_ip,
            )
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Audit entry {action} not stored: {e}")
    finally:
        db.close()
