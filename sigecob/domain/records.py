# sigecob/domain/records.py
"""
Typed, validated views of the rows the checkout works on.

The ORM models stay thin; these records are what the cart snapshot reader
hands to the order executor, so their invariants are checked once, when the
snapshot is built.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple

from sigecob.domain.enums import ProductStatus
from sigecob.utils.settings import MAX_ITEM_QUANTITY

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ProductSnapshot:
    id: int
    name: str
    price: Decimal
    stock: int
    status: ProductStatus

    def __post_init__(self):
        if self.price < 0:
            raise ValueError(f"Product {self.id}: price must be non-negative")
        if self.stock < 0:
            raise ValueError(f"Product {self.id}: stock must be non-negative")
        if self.stock == 0 and self.status == ProductStatus.AVAILABLE:
            raise ValueError(f"Product {self.id}: Available with zero stock")

    @classmethod
    def from_model(cls, model) -> "ProductSnapshot":
        return cls(
            id=model.id,
            name=model.name,
            price=Decimal(model.price),
            stock=model.stock,
            status=ProductStatus(model.status),
        )


@dataclass(frozen=True)
class CartLine:
    item_id: int
    product: ProductSnapshot
    quantity: int
    unit_price: Decimal  # captured when the item was added

    def __post_init__(self):
        if not 1 <= self.quantity <= MAX_ITEM_QUANTITY:
            raise ValueError(f"Cart item {self.item_id}: quantity must be 1-{MAX_ITEM_QUANTITY}")
        if self.unit_price < 0:
            raise ValueError(f"Cart item {self.item_id}: price must be non-negative")

    @property
    def subtotal(self) -> Decimal:
        return (self.unit_price * self.quantity).quantize(CENTS)


@dataclass(frozen=True)
class CartSnapshot:
    cart_id: int
    user_id: int
    lines: Tuple[CartLine, ...]

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal("0.00")).quantize(CENTS)

    @property
    def item_ids(self) -> Tuple[int, ...]:
        return tuple(line.item_id for line in self.lines)
