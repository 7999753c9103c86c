# sigecob/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from sigecob.api.errors import client_ip, http_error
from sigecob.data.database import get_db
from sigecob.domain.errors import ShopError
from sigecob.domain.schemas import CheckoutIn, CheckoutOut, OrderOut
from sigecob.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/create", response_model=CheckoutOut, status_code=201)
def create_order(
    payload: CheckoutIn,
    request: Request,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """
    Turns the user's cart into an order with a confirmed payment.
    Confirmation email and audit entry go out asynchronously.
    """
    svc = OrderService(db)
    try:
        result = svc.place_order(
            user_id=user_id,
            shipping_address=payload.shipping_address,
            payment_method=payload.payment_method,
            source_ip=client_ip(request),
        )
    except ShopError as e:
        raise http_error(e)
    return CheckoutOut.model_validate(result)


@router.get("/history", response_model=List[OrderOut])
def order_history(user_id: int = Query(...), db: Session = Depends(get_db)):
    svc = OrderService(db)
    try:
        return svc.list_user_orders(user_id)
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
        return svc.get_order(order_id, user_id, source_ip=client_ip(request))
    except ShopError as e:
        raise http_error(e)
