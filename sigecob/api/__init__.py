# sigecob/api/__init__.py
from fastapi import FastAPI

from sigecob.api.routers import admin_orders, audit, carts, health, orders, products, users


def include_routers(app: FastAPI) -> FastAPI:
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(admin_orders.router)
    app.include_router(audit.router)
    return app
