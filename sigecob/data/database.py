# sigecob/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from sigecob.utils.settings import DATABASE_URL, DB_ISOLATION_LEVEL, DB_ECHO


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        #request threads share the pool; writers wait on the file lock
        return {"connect_args": {"check_same_thread": False, "timeout": 30}}
    return {"isolation_level": DB_ISOLATION_LEVEL, "pool_pre_ping": True}


engine = create_engine(DATABASE_URL, echo=DB_ECHO, future=True, **_engine_kwargs(DATABASE_URL))

SessionLocal = sessionmaker(bind=engine, autoflush=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
