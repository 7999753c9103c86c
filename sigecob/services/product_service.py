# sigecob/services/product_service.py
import math
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sigecob.data.models.product import ProductModel
from sigecob.domain.enums import ProductStatus, UserRole, parse_status
from sigecob.domain.errors import Conflict, InvalidStatusTransition, NotFound
from sigecob.domain.schemas import ProductCreate, ProductOut, ProductUpdate
from sigecob.repos.product_repo import ProductRepo
from sigecob.services.audit_service import AuditService
from sigecob.services.user_service import UserService
from sigecob.utils.logging import get_logger

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


def status_for_stock(stock: int) -> ProductStatus:
    return ProductStatus.AVAILABLE if stock > 0 else ProductStatus.OUT_OF_STOCK


class ProductService:
    """
    Catalog. Reads are open; create, edit, restock and discontinue are Admin only.
    Products are never deleted, discontinuing is the delete.
    """

    def __init__(self, db: Session, audit_service: AuditService | None = None):
        self.db = db
        self.repo = ProductRepo(db)
        self.users = UserService(db)
        self.audit = audit_service or AuditService(db)

    def create_product(self, admin_id: int, payload: ProductCreate, source_ip: str | None = None) -> ProductOut:
        self.users.require_role(admin_id, UserRole.ADMIN)

        if self.repo.get_by_name(payload.name):
            raise Conflict(f"Ya existe un producto con el nombre {payload.name}.")

        product = ProductModel(
            name=payload.name,
            description=payload.description,
            price=payload.price,
            stock=payload.stock,
            status=status_for_stock(payload.stock).value,
            category=payload.category,
            image_url=payload.image_url,
        )
        try:
            self.repo.create_product(product)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict(f"Ya existe un producto con el nombre {payload.name}.")

        logger.info(f"Product {product.id} '{product.name}' created with stock {product.stock}")
        self.audit.record(
            "PRODUCT_CREATED",
            user_id=admin_id,
            entity="Product",
            entity_id=product.id,
            details={"name": product.name, "price": product.price, "stock": product.stock},
            source_ip=source_ip,
        )
        return ProductOut.model_validate(product)

    def get_product(self, product_id: int) -> ProductOut:
        return ProductOut.model_validate(self._get_model(product_id))

    def list_products(
        self,
        include_discontinued: bool = False,
        status: str | None = None,
        category: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Dict[str, Any]:
        page = max(page, 1)
        page_size = max(1, min(page_size, MAX_PAGE_SIZE))

        statuses = [parse_status(ProductStatus, status).value] if status else None
        excluded = None if include_discontinued or status else ProductStatus.DISCONTINUED.value

        rows, total = self.repo.list_products(
            statuses=statuses,
            excluded_status=excluded,
            category=category,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return {
            "items": [ProductOut.model_validate(p) for p in rows],
            "total": total,
            "page": page,
            "page_size": page_size,
            "total_pages": math.ceil(total / page_size) if total else 0,
        }

    def update_product(
        self,
        admin_id: int,
        product_id: int,
        payload: ProductUpdate,
        source_ip: str | None = None,
    ) -> ProductOut:
        """
        Edit catalog fields. Cart lines and orders keep the price they captured,
        so a price change only affects items added afterwards.
        """
        self.users.require_role(admin_id, UserRole.ADMIN)
        product = self._get_model(product_id)

        requested = payload.model_dump(exclude_unset=True)
        #name and price are required columns; an explicit null means "leave as is"
        for field in ("name", "price", "status"):
            if requested.get(field) is None:
                requested.pop(field, None)

        if "status" in requested:
            target = parse_status(ProductStatus, requested["status"])
            if target == ProductStatus.AVAILABLE and product.stock == 0:
                raise InvalidStatusTransition(
                    f"El producto {product.name} no tiene stock; no puede marcarse como disponible.",
                    current=product.status,
                    target=target.value,
                )
            requested["status"] = target.value

        if "name" in requested and requested["name"] != product.name:
            other = self.repo.get_by_name(requested["name"])
            if other and other.id != product.id:
                raise Conflict(f"Ya existe un producto con el nombre {requested['name']}.")

        changes = {
            field: {"old": getattr(product, field), "new": value}
            for field, value in requested.items()
            if getattr(product, field) != value
        }
        if not changes:
            return ProductOut.model_validate(product)

        for field, change in changes.items():
            setattr(product, field, change["new"])
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict(f"Ya existe un producto con el nombre {requested.get('name')}.")

        logger.info(f"Product {product_id} updated: {sorted(changes)}")
        self.audit.record(
            "PRODUCT_UPDATED",
            user_id=admin_id,
            entity="Product",
            entity_id=product_id,
            details=changes,
            source_ip=source_ip,
        )
        return ProductOut.model_validate(product)

    def restock(self, admin_id: int, product_id: int, stock: int, source_ip: str | None = None) -> ProductOut:
        """Set absolute stock. Status follows it unless the product is discontinued."""
        self.users.require_role(admin_id, UserRole.ADMIN)
        product = self._get_model(product_id)

        old_stock = product.stock
        product.stock = stock
        if product.status != ProductStatus.DISCONTINUED.value:
            product.status = status_for_stock(stock).value
        self.db.commit()

        logger.info(f"Product {product_id} stock {old_stock} -> {stock} ({product.status})")
        self.audit.record(
            "PRODUCT_STOCK_UPDATED",
            user_id=admin_id,
            entity="Product",
            entity_id=product_id,
            details={"oldStock": old_stock, "newStock": stock},
            source_ip=source_ip,
        )
        return ProductOut.model_validate(product)

    def discontinue(self, admin_id: int, product_id: int, source_ip: str | None = None) -> ProductOut:
        self.users.require_role(admin_id, UserRole.ADMIN)
        product = self._get_model(product_id)

        if product.status != ProductStatus.DISCONTINUED.value:
            product.status = ProductStatus.DISCONTINUED.value
            self.db.commit()
            logger.info(f"Product {product_id} discontinued")
            self.audit.record(
                "PRODUCT_DISCONTINUED",
                user_id=admin_id,
                entity="Product",
                entity_id=product_id,
                source_ip=source_ip,
            )
        return ProductOut.model_validate(product)

    def _get_model(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound("Producto no encontrado.")
        return product
