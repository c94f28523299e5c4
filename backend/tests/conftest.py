"""
conftest.py: Shared fixtures

Every test gets a fresh in-memory SQLite database and a TestClient whose
get_db dependency is overridden to use it.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"  # before importing app modules
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app import models
from app.database import Base, get_db

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture(autouse=True)
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session: Session) -> TestClient:
    from app.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_product(db_session: Session):
    def _make(name="Widget", price=1.0, storage=None) -> models.Product:
        p = models.Product(name=name, price=price, storage=storage)
        db_session.add(p)
        db_session.commit()
        db_session.refresh(p)
        return p
    return _make


@pytest.fixture()
def make_client(db_session: Session):
    def _make(name="Ana", email="ana@example.com", age=None) -> models.Client:
        c = models.Client(name=name, email=email, age=age)
        db_session.add(c)
        db_session.commit()
        db_session.refresh(c)
        return c
    return _make
