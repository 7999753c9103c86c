# sigecob/data/seed.py
from decimal import Decimal

from sigecob.data.database import SessionLocal
from sigecob.data.models import CartModel, ProductModel, UserModel
from sigecob.domain.enums import ProductStatus, UserRole
from sigecob.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_USERS = [
    ("Administrador", "admin@sigecob.local", UserRole.ADMIN),
    ("Auditor", "auditor@sigecob.local", UserRole.AUDITOR),
    ("Cliente Demo", "cliente@sigecob.local", UserRole.CUSTOMER),
]

DEMO_PRODUCTS = [
    ("Teclado mecánico", "Teclado con switches rojos", Decimal("59.90"), 25, "Periféricos"),
    ("Mouse inalámbrico", "Mouse ergonómico 2.4 GHz", Decimal("19.99"), 40, "Periféricos"),
    ("Monitor 24\"", "Panel IPS Full HD", Decimal("149.00"), 8, "Monitores"),
    ("Audífonos USB", "Audífonos con micrófono", Decimal("34.50"), 0, "Audio"),
]


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(UserModel).first() or db.query(ProductModel).first():
            return

        for name, email, role in DEMO_USERS:
            user = UserModel(name=name, email=email, role=role.value)
            db.add(user)
            db.flush()
            db.add(CartModel(user_id=user.id))

        for name, description, price, stock, category in DEMO_PRODUCTS:
            status = ProductStatus.AVAILABLE if stock > 0 else ProductStatus.OUT_OF_STOCK
            db.add(
                ProductModel(
                    name=name,
                    description=description,
                    price=price,
                    stock=stock,
                    status=status.value,
                    category=category,
                )
            )

        db.commit()
        logger.info(f"Seeded {len(DEMO_USERS)} users and {len(DEMO_PRODUCTS)} products")
    finally:
        db.close()
