# sigecob/repos/order_repo.py
from typing import Iterable, List

from sqlalchemy import select, insert
from sqlalchemy.orm import Session, selectinload

from sigecob.data.models.order import OrderModel
from sigecob.data.models.order_item import OrderItemModel
from sigecob.data.models.payment import PaymentModel


def _with_details(stmt):
    return stmt.options(
        selectinload(OrderModel.items).selectinload(OrderItemModel.product),
        selectinload(OrderModel.payment),
        selectinload(OrderModel.user),
    )


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_items(self, rows: Iterable[dict]) -> None:
        """Bulk insert of order item rows (order_id, product_id, quantity, price)."""
        rows = list(rows)
        if rows:
            self.db.execute(insert(OrderItemModel), rows)

    def create_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.flush()
        return payment

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(_with_details(select(OrderModel).where(OrderModel.id == order_id))).scalar_one_or_none()

    def list_by_user(self, user_id: int) -> List[OrderModel]:
        stmt = select(OrderModel).where(OrderModel.user_id == user_id).order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(_with_details(stmt)).scalars())

    def list_all(self, status: str | None = None) -> List[OrderModel]:
        stmt = select(OrderModel)
        if status:
            stmt = stmt.where(OrderModel.order_status == status)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(_with_details(stmt)).scalars())
