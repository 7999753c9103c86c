# sigecob/api/routers/products.py
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from sigecob.api.errors import client_ip, http_error
from sigecob.data.database import get_db
from sigecob.domain.errors import ShopError
from sigecob.domain.schemas import ProductCreate, ProductOut, ProductPage, ProductUpdate, StockUpdate
from sigecob.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=ProductPage)
def list_products(
    include_discontinued: bool = Query(False),
    status: str | None = Query(None),
    category: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    try:
        return ProductService(db).list_products(
            include_discontinued=include_discontinued,
            status=status,
            category=category,
            page=page,
            page_size=page_size,
        )
    except ShopError as e:
        raise http_error(e)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return ProductService(db).get_product(product_id)
    except ShopError as e:
        raise http_error(e)


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    request: Request,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    try:
        return ProductService(db).create_product(user_id, payload, source_ip=client_ip(request))
    except ShopError as e:
        raise http_error(e)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    request: Request,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    try:
        return ProductService(db).update_product(user_id, product_id, payload, source_ip=client_ip(request))
    except ShopError as e:
        raise http_error(e)


@router.put("/{product_id}/stock", response_model=ProductOut)
def update_stock(
    product_id: int,
    payload: StockUpdate,
    request: Request,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    try:
        return ProductService(db).restock(user_id, product_id, payload.stock, source_ip=client_ip(request))
    except ShopError as e:
        raise http_error(e)


@router.delete("/{product_id}", response_model=ProductOut)
def discontinue_product(
    product_id: int,
    request: Request,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """Soft delete: the product stays, marked Discontinued."""
    try:
        return ProductService(db).discontinue(user_id, product_id, source_ip=client_ip(request))
    except ShopError as e:
        raise http_error(e)
