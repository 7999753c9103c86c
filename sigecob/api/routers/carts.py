# sigecob/api/routers/carts.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from sigecob.api.errors import http_error
from sigecob.data.database import get_db
from sigecob.domain.errors import ShopError
from sigecob.domain.schemas import CartItemIn, CartItemUpdate, CartOut
from sigecob.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(user_id: int = Query(...), db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        return svc.get_cart(user_id)
    except ShopError as e:
        raise http_error(e)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        return svc.add_item(user_id, payload.product_id, payload.quantity)
    except ShopError as e:
        raise http_error(e)


@router.put("/items/{item_id}", response_model=CartOut)
def update_item(
    item_id: int,
    payload: CartItemUpdate,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        return svc.update_item_quantity(user_id, item_id, payload.quantity)
    except ShopError as e:
        raise http_error(e)


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        return svc.remove_item(user_id, item_id)
    except ShopError as e:
        raise http_error(e)


@router.delete("/", response_model=CartOut)
def clear_cart(user_id: int = Query(...), db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        return svc.clear(user_id)
    except ShopError as e:
        raise http_error(e)
