# sigecob/repos/cart_repo.py
from typing import Iterable

from sqlalchemy import select, delete
from sqlalchemy.orm import Session, selectinload

from sigecob.data.models.cart import CartModel
from sigecob.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int, with_products: bool = False) -> CartModel | None:
        stmt = select(CartModel).where(CartModel.user_id == user_id)
        if with_products:
            #refresh rows already in the session; stock may have moved under us
            stmt = stmt.options(
                selectinload(CartModel.items).selectinload(CartItemModel.product)
            ).execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_item(self, item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def delete_items(self, cart_id: int, item_ids: Iterable[int] | None = None) -> int:
        """Delete by parent key, optionally narrowed to ``item_ids``. Returns rows deleted."""
        stmt = delete(CartItemModel).where(CartItemModel.cart_id == cart_id)
        if item_ids is not None:
            stmt = stmt.where(CartItemModel.id.in_(list(item_ids)))
        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
