# sigecob/repos/product_repo.py
from typing import List, Tuple

from sqlalchemy import select, update, case, func
from sqlalchemy.orm import Session

from sigecob.data.models.product import ProductModel
from sigecob.domain.enums import ProductStatus


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_by_name(self, name: str) -> ProductModel | None:
        return self.db.execute(select(ProductModel).where(ProductModel.name == name)).scalar_one_or_none()

    def current_stock(self, product_id: int) -> int:
        stock = self.db.execute(select(ProductModel.stock).where(ProductModel.id == product_id)).scalar_one_or_none()
        return stock or 0

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def list_products(
        self,
        statuses: List[str] | None,
        excluded_status: str | None,
        category: str | None,
        offset: int,
        limit: int,
    ) -> Tuple[List[ProductModel], int]:
        stmt = select(ProductModel)
        if statuses:
            stmt = stmt.where(ProductModel.status.in_(statuses))
        if excluded_status:
            stmt = stmt.where(ProductModel.status != excluded_status)
        if category:
            stmt = stmt.where(ProductModel.category == category)

        total = self.db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
        rows = self.db.execute(stmt.order_by(ProductModel.id).offset(offset).limit(limit)).scalars()
        return list(rows), total

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """
        Conditional decrement: only succeeds while ``stock >= quantity``.

        Status follows the resulting stock in the same statement. Returns
        False when no row matched (stock gone or product discontinued).
        """
        new_stock = ProductModel.stock - quantity
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.stock >= quantity,
                ProductModel.status != ProductStatus.DISCONTINUED.value,
            )
            .values(
                stock=new_stock,
                status=case(
                    (new_stock == 0, ProductStatus.OUT_OF_STOCK.value),
                    else_=ProductStatus.AVAILABLE.value,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
