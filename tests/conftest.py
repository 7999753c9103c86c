"""Shared fixtures: throwaway SQLite database, eager Celery, row factories."""

import os
import tempfile

# settings are read at import time, so the environment goes first
_DB_DIR = tempfile.mkdtemp(prefix="sigecob-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["EMAIL_API_KEY"] = ""
os.environ["SEED_DEMO_DATA"] = "false"

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import select  # noqa: E402

from sigecob.data import models  # noqa: E402,F401
from sigecob.data.database import Base, SessionLocal, engine  # noqa: E402
from sigecob.data.models import (  # noqa: E402
    AuditLogModel,
    CartItemModel,
    CartModel,
    OrderItemModel,
    OrderModel,
    PaymentModel,
    ProductModel,
    UserModel,
)
from sigecob.domain.enums import ProductStatus, UserRole  # noqa: E402


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client():
    from sigecob.main import create_app

    return TestClient(create_app())


def make_user(db, name="Ana Pérez", email=None, role=UserRole.CUSTOMER, with_cart=True):
    user = UserModel(name=name, email=email or f"{name.split()[0].lower()}@example.com", role=role.value)
    db.add(user)
    db.flush()
    if with_cart:
        db.add(CartModel(user_id=user.id))
    db.commit()
    return user


def make_product(db, name="Teclado", price="10.00", stock=5, status=None, category=None):
    if status is None:
        status = ProductStatus.AVAILABLE if stock > 0 else ProductStatus.OUT_OF_STOCK
    product = ProductModel(
        name=name,
        price=Decimal(price),
        stock=stock,
        status=status.value,
        category=category,
    )
    db.add(product)
    db.commit()
    return product


def put_in_cart(db, user, product, quantity, price=None):
    """Insert a cart line directly, bypassing the add-to-cart stock checks."""
    cart = db.execute(select(CartModel).where(CartModel.user_id == user.id)).scalar_one()
    item = CartItemModel(
        cart_id=cart.id,
        product_id=product.id,
        quantity=quantity,
        price=Decimal(price) if price is not None else product.price,
    )
    db.add(item)
    db.commit()
    return item


def table_state(db):
    """Every row of the tables a checkout writes, for before/after comparison."""
    db.expire_all()
    state = {}
    for model in (CartItemModel, ProductModel, OrderModel, OrderItemModel, PaymentModel):
        rows = db.execute(select(model.__table__).order_by(model.__table__.c.id)).all()
        state[model.__tablename__] = [tuple(row) for row in rows]
    return state


def audit_actions(db):
    db.expire_all()
    return [entry.action for entry in db.execute(select(AuditLogModel).order_by(AuditLogModel.id)).scalars()]
