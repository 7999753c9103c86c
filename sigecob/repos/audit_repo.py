from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from sigecob.data.models.audit_log import AuditLogModel


class AuditRepo:
    def __init__(self, db: Session):
        self.db = db

    def add(self, entry: AuditLogModel) -> AuditLogModel:
        self.db.add(entry)
        self.db.commit()
        return entry

    def list_entries(
        self,
        action: str | None = None,
        user_id: int | None = None,
        entity: str | None = None,
        ip_address: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 100,
    ) -> List[AuditLogModel]:
        """Newest first. ``action`` and ``ip_address`` match partially, the rest exactly."""
        stmt = select(AuditLogModel)
        if action:
            stmt = stmt.where(AuditLogModel.action.contains(action, autoescape=True))
        if user_id is not None:
            stmt = stmt.where(AuditLogModel.user_id == user_id)
        if entity:
            stmt = stmt.where(AuditLogModel.entity == entity)
        if ip_address:
            stmt = stmt.where(AuditLogModel.ip_address.contains(ip_address, autoescape=True))
        if start:
            stmt = stmt.where(AuditLogModel.created_at >= start)
        if end:
            stmt = stmt.where(AuditLogModel.created_at <= end)
        stmt = stmt.order_by(AuditLogModel.created_at.desc(), AuditLogModel.id.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars())
