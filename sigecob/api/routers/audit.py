# sigecob/api/routers/audit.py
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sigecob.api.errors import http_error
from sigecob.data.database import get_db
from sigecob.domain.errors import ShopError
from sigecob.domain.schemas import AuditEntryOut
from sigecob.services.audit_service import AuditService

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/", response_model=List[AuditEntryOut])
def list_entries(
    user_id: int = Query(...),
    action: str | None = Query(None, description="Coincidencia parcial"),
    actor_id: int | None = Query(None, description="Usuario que realizó la acción"),
    entity: str | None = Query(None),
    ip_address: str | None = Query(None, description="Coincidencia parcial"),
    start_date: datetime | None = Query(None),
    end_date: datetime | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    try:
        return AuditService(db).list_entries(
            auditor_id=user_id,
            action=action,
            user_id=actor_id,
            entity=entity,
            ip_address=ip_address,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
        )
    except ShopError as e:
        raise http_error(e)
