# sigecob/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from sigecob.api import include_routers
from sigecob.data import models  # noqa: F401  registers every table in Base.metadata
from sigecob.data.database import Base, engine
from sigecob.data.seed import seed
from sigecob.utils.logging import get_logger
from sigecob.utils.settings import SEED_DEMO_DATA

logger = get_logger(__name__)


def init_db() -> None:
    logger.info(f"Initializing database, tables: {sorted(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception:
        logger.exception("Failed to create tables")
        raise
    logger.info("Database tables ready")

    if SEED_DEMO_DATA:
        seed()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="SIGECOB",
        version="1.0.0",
        lifespan=lifespan,
    )
    return include_routers(app)


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
