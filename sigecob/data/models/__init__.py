#import all models so they register in Base.metadata before create_all

from sigecob.data.models.user import UserModel
from sigecob.data.models.product import ProductModel
from sigecob.data.models.cart import CartModel
from sigecob.data.models.cart_item import CartItemModel
from sigecob.data.models.order import OrderModel
from sigecob.data.models.order_item import OrderItemModel
from sigecob.data.models.payment import PaymentModel
from sigecob.data.models.audit_log import AuditLogModel

__all__ = [
    "UserModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "PaymentModel",
    "AuditLogModel",
]
