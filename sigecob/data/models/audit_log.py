from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON

from sigecob.data.database import Base


class AuditLogModel(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    action = Column(String(100), nullable=False, index=True)
    #no FK: entries outlive the rows they describe
    user_id = Column(Integer, nullable=True, index=True)
    entity = Column(String(50), nullable=True)
    entity_id = Column(Integer, nullable=True)
    details = Column(JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
