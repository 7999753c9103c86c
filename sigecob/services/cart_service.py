# sigecob/services/cart_service.py
from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sigecob.data.models.cart import CartModel
from sigecob.data.models.cart_item import CartItemModel
from sigecob.domain.enums import ProductStatus
from sigecob.domain.errors import (
    Conflict,
    InsufficientStock,
    NotFound,
    ProductUnavailable,
    QuantityLimitExceeded,
)
from sigecob.domain.records import CartLine, CartSnapshot, ProductSnapshot
from sigecob.repos.cart_repo import CartRepo
from sigecob.repos.product_repo import ProductRepo
from sigecob.repos.user_repo import UserRepo
from sigecob.utils.settings import MAX_ITEM_QUANTITY
from sigecob.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart use cases.

    queries (find_snapshot, get_snapshot, get_cart) only read, apart from the
    lazy creation of a missing cart; commands (add, update, remove, clear)
    mutate and commit. Concurrent edits of one cart are last-write-wins.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)

    #queries
    def find_snapshot(self, user_id: int) -> CartSnapshot | None:
        """The user's cart with live product rows, or None when no cart exists."""
        cart = self.repo.get_cart_by_user(user_id, with_products=True)
        if not cart:
            return None

        lines = tuple(
            CartLine(
                item_id=item.id,
                product=ProductSnapshot.from_model(item.product),
                quantity=item.quantity,
                unit_price=item.price,
            )
            for item in cart.items
        )
        return CartSnapshot(cart_id=cart.id, user_id=cart.user_id, lines=lines)

    def get_snapshot(self, user_id: int) -> CartSnapshot:
        snapshot = self.find_snapshot(user_id)
        if snapshot is not None:
            return snapshot

        cart = self._create_cart(user_id)
        return CartSnapshot(cart_id=cart.id, user_id=user_id, lines=())

    def get_cart(self, user_id: int) -> Dict[str, Any]:
        return self._to_dict(self.get_snapshot(user_id))

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        self._check_quantity(quantity)

        product = self.products.get_product(product_id)
        if not product:
            raise NotFound("Producto no encontrado.")

        if product.status != ProductStatus.AVAILABLE.value:
            raise ProductUnavailable(f"El producto {product.name} no está disponible.", product_id=product.id)

        cart = self.repo.get_cart_by_user(user_id) or self._create_cart(user_id)
        existing_item = self.repo.get_cart_item(cart.id, product_id)

        if existing_item:
            new_quantity = existing_item.quantity + quantity
            if new_quantity > MAX_ITEM_QUANTITY:
                raise QuantityLimitExceeded(
                    f"Solo puedes tener un máximo de {MAX_ITEM_QUANTITY} unidades de {product.name} en el carrito.",
                    limit=MAX_ITEM_QUANTITY,
                )
            self._check_stock(product, new_quantity)

            logger.info(
                f"Product {product_id} already in cart {cart.id}, quantity "
                f"{existing_item.quantity} -> {new_quantity}"
            )
            #keeps the price captured on first add
            existing_item.quantity = new_quantity
        else:
            self._check_stock(product, quantity)
            logger.info(f"Adding product {product_id} x{quantity} to cart {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart.id,
                    product_id=product_id,
                    quantity=quantity,
                    price=product.price,
                )
            )

        self._commit("Producto añadido por otra operación, inténtalo de nuevo.")
        return self.get_cart(user_id)

    def update_item_quantity(self, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        self._check_quantity(quantity)

        item = self._owned_item(user_id, item_id)
        self._check_stock(item.product, quantity)

        logger.info(f"Cart item {item_id}: quantity {item.quantity} -> {quantity}")
        item.quantity = quantity
        self._commit()

        return self.get_cart(user_id)

    def remove_item(self, user_id: int, item_id: int) -> Dict[str, Any]:
        item = self._owned_item(user_id, item_id)

        logger.info(f"Removing item {item_id} (product {item.product_id}) from cart {item.cart_id}")
        self.repo.delete_item(item)
        self._commit()

        return self.get_cart(user_id)

    def clear(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFound("Carrito no encontrado.")

        removed = self.repo.delete_items(cart.id)
        self._commit()

        logger.info(f"Cart {cart.id} cleared, {removed} items removed")
        return self.get_cart(user_id)

    #helpers
    def _create_cart(self, user_id: int) -> CartModel:
        if not self.users.get_user(user_id):
            raise NotFound("Usuario no encontrado.")

        cart = self.repo.create_cart(CartModel(user_id=user_id))
        self._commit("El carrito ya existe, inténtalo de nuevo.")
        logger.info(f"Created missing cart {cart.id} for user {user_id}")
        return cart

    def _owned_item(self, user_id: int, item_id: int) -> CartItemModel:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFound("Carrito no encontrado.")

        item = self.repo.get_item(item_id)
        if not item or item.cart_id != cart.id:
            raise NotFound("Ítem del carrito no encontrado o no pertenece a este usuario.")
        return item

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if not 1 <= quantity <= MAX_ITEM_QUANTITY:
            raise QuantityLimitExceeded(
                f"La cantidad debe estar entre 1 y {MAX_ITEM_QUANTITY} unidades.",
                limit=MAX_ITEM_QUANTITY,
            )

    @staticmethod
    def _check_stock(product, quantity: int) -> None:
        if product.stock < quantity:
            raise InsufficientStock(
                f"Stock insuficiente para {product.name}. Solo hay {product.stock} unidades disponibles.",
                product_id=product.id,
                available=product.stock,
                requested=quantity,
            )

    def _commit(self, conflict_message: str = "Conflicto al guardar el carrito.") -> None:
        try:
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise Conflict(conflict_message)

    @staticmethod
    def _to_dict(snapshot: CartSnapshot) -> Dict[str, Any]:
        return {
            "cart_id": snapshot.cart_id,
            "user_id": snapshot.user_id,
            "items": [
                {
                    "id": line.item_id,
                    "product_id": line.product.id,
                    "name": line.product.name,
                    "quantity": line.quantity,
                    "price": line.unit_price,
                    "current_price": line.product.price,
                    "stock": line.product.stock,
                    "status": line.product.status.value,
                    "subtotal": line.subtotal,
                }
                for line in snapshot.lines
            ],
            "total": snapshot.total,
        }
