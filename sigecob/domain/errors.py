# sigecob/domain/errors.py
"""
Error taxonomy shared by services and routers.

Every error carries a stable ``kind`` and the HTTP status the routers answer
with. The builtin bases let callers keep catching ``ValueError`` /
``PermissionError`` / ``LookupError`` the usual way.
"""
from typing import Any, Dict


class ShopError(Exception):
    kind = "ShopError"
    status_code = 500

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message, **self.extra}


class MissingField(ShopError, ValueError):
    kind = "MissingField"
    status_code = 400


class InvalidPaymentMethod(ShopError, ValueError):
    kind = "InvalidPaymentMethod"
    status_code = 400


class EmptyCart(ShopError, ValueError):
    kind = "EmptyCart"
    status_code = 400


class InsufficientStock(ShopError, ValueError):
    kind = "InsufficientStock"
    status_code = 400

    def __init__(self, message: str, product_id: int, available: int, requested: int):
        super().__init__(
            message,
            product_id=product_id,
            available=available,
            requested=requested,
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class ProductUnavailable(ShopError, ValueError):
    kind = "ProductUnavailable"
    status_code = 400


class QuantityLimitExceeded(ShopError, ValueError):
    kind = "QuantityLimitExceeded"
    status_code = 400


class InvalidStatusTransition(ShopError, ValueError):
    kind = "InvalidStatusTransition"
    status_code = 400


class Conflict(ShopError, ValueError):
    kind = "Conflict"
    status_code = 409


class NotFound(ShopError, LookupError):
    kind = "NotFound"
    status_code = 404


class Unauthorized(ShopError, PermissionError):
    kind = "Unauthorized"
    status_code = 401


class Forbidden(ShopError, PermissionError):
    kind = "Forbidden"
    status_code = 403


class PersistenceFailure(ShopError, RuntimeError):
    kind = "PersistenceFailure"
    status_code = 500
