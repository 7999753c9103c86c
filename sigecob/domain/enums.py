# sigecob/domain/enums.py
from enum import Enum

from sigecob.domain.errors import InvalidStatusTransition


class UserRole(str, Enum):
    CUSTOMER = "Customer"
    ADMIN = "Admin"
    AUDITOR = "Auditor"


class ProductStatus(str, Enum):
    AVAILABLE = "Available"
    OUT_OF_STOCK = "Out_of_Stock"
    DISCONTINUED = "Discontinued"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "CreditCard"
    PAYPAL = "PayPal"
    BANK_TRANSFER = "BankTransfer"


ORDER_TRANSITIONS = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

#refunded only from confirmed
PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.CONFIRMED, PaymentStatus.CANCELLED}),
    PaymentStatus.CONFIRMED: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.CANCELLED: frozenset(),
    PaymentStatus.REFUNDED: frozenset(),
}


def parse_status(enum_cls, value):
    """Coerce a raw status string into ``enum_cls``; unknown values are rejected."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidStatusTransition(
            f"Estado '{value}' no es válido para {enum_cls.__name__}",
            allowed=[s.value for s in enum_cls],
        )


def ensure_transition(current, target) -> None:
    """Raise InvalidStatusTransition unless ``current -> target`` is an edge of its graph."""
    table = ORDER_TRANSITIONS if isinstance(current, OrderStatus) else PAYMENT_TRANSITIONS
    if target not in table[current]:
        raise InvalidStatusTransition(
            f"No se puede cambiar el estado de {current.value} a {target.value}",
            current=current.value,
            target=target.value,
        )
