# sigecob/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sigecob.domain.enums import UserRole


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python; ORM rows validate directly."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- users ---

class UserCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100, description="Nombre completo")
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    role: UserRole = UserRole.CUSTOMER


class UserRead(ApiModel):
    id: int
    name: str
    email: str
    role: UserRole


# --- products ---

class ProductCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(..., ge=0)
    category: Optional[str] = None
    image_url: Optional[str] = None


class StockUpdate(ApiModel):
    stock: int = Field(..., ge=0)


class ProductUpdate(ApiModel):
    """Partial edit; only the fields present in the request are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    category: Optional[str] = None
    image_url: Optional[str] = None
    status: Optional[str] = None


class ProductOut(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    stock: int
    status: str
    category: Optional[str] = None
    image_url: Optional[str] = None


class ProductPage(ApiModel):
    items: List[ProductOut]
    total: int
    page: int
    page_size: int
    total_pages: int


# --- cart ---

class CartItemIn(ApiModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, gt=0)


class CartItemUpdate(ApiModel):
    quantity: int = Field(..., gt=0)


class CartItemOut(ApiModel):
    id: int
    product_id: int
    name: str
    quantity: int
    price: Decimal
    current_price: Decimal
    stock: int
    status: str
    subtotal: Decimal


class CartOut(ApiModel):
    cart_id: int
    user_id: int
    items: List[CartItemOut]
    total: Decimal


# --- checkout ---

class CheckoutIn(ApiModel):
    # optional here so a missing field surfaces as MissingField, not a 422
    shipping_address: Optional[str] = None
    payment_method: Optional[str] = None


class CheckoutOrderOut(ApiModel):
    id: int
    total_amount: Decimal
    order_status: str
    shipping_address: str


class CheckoutPaymentOut(ApiModel):
    id: int
    payment_status: str
    transaction_id: str


class CheckoutOut(ApiModel):
    order: CheckoutOrderOut
    payment: CheckoutPaymentOut


# --- orders ---

class OrderItemOut(ApiModel):
    id: int
    product_id: int
    quantity: int
    price: Decimal


class PaymentOut(ApiModel):
    id: int
    amount: Decimal
    payment_method: str
    transaction_id: str
    payment_status: str
    paid_at: Optional[datetime] = None


class OrderOut(ApiModel):
    id: int
    user_id: int
    total_amount: Decimal
    order_status: str
    shipping_address: str
    payment_id: Optional[int] = None
    created_at: datetime
    items: List[OrderItemOut]
    payment: Optional[PaymentOut] = None


class OrderStatusUpdate(ApiModel):
    order_status: Optional[str] = None
    payment_status: Optional[str] = None


# --- audit ---

class AuditEntryOut(ApiModel):
    id: int
    action: str
    user_id: Optional[int] = None
    entity: Optional[str] = None
    entity_id: Optional[int] = None
    details: Optional[dict] = None
    ip_address: Optional[str] = None
    created_at: datetime
