"""Database engine, session factory and schema setup."""

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from . import config

Base = declarative_base()


def make_engine(url: str = config.DATABASE_URL) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # FastAPI runs sync handlers in a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args)


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None, reset: bool = False) -> None:
    """Create the products and clients tables if missing.

    With reset=True both tables are dropped first, wiping all rows.
    """
    from . import models  # noqa: F401  registers tables on Base.metadata

    bind = bind or engine
    if reset:
        Base.metadata.drop_all(bind=bind)
        logger.warning("Dropped all tables on {}", bind.url)
    Base.metadata.create_all(bind=bind)
