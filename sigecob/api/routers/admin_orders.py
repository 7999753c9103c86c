# sigecob/api/routers/admin_orders.py
from typing import List

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from sigecob.api.errors import client_ip, http_error
from sigecob.data.database import get_db
from sigecob.domain.enums import UserRole
from sigecob.domain.errors import ShopError
from sigecob.domain.schemas import OrderOut, OrderStatusUpdate
from sigecob.services.order_service import OrderService

router = APIRouter(prefix="/admin/orders", tags=["admin"])


@router.get("/", response_model=List[OrderOut])
def list_orders(
    user_id: int = Query(...),
    status: str | None = Query(None, description="Estado de la orden o 'Todos'"),
    db: Session = Depends(get_db),
):
    svc = OrderService(db)
    try:
        return svc.list_all_orders(user_id, status)
    except ShopError as e:
        raise http_error(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    request: Request,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = OrderService(db)
    try:
        svc.users.require_role(user_id, UserRole.ADMIN)
        return svc.get_order(order_id, user_id, source_ip=client_ip(request))
    except ShopError as e:
        raise http_error(e)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: OrderStatusUpdate,
    request: Request,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = OrderService(db)
    try:
        return svc.update_status(
            order_id,
            user_id,
            order_status=payload.order_status,
            payment_status=payload.payment_status,
            source_ip=client_ip(request),
        )
    except ShopError as e:
        raise http_error(e)
