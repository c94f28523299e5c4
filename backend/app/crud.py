# app/crud.py
from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models, schemas
from .errors import ConflictError
from .utils import like_pattern


def _contains(column, term: str):
    return column.ilike(like_pattern(term), escape="\\")


def _is_unique_violation(exc: IntegrityError) -> bool:
    return getattr(exc.orig, "sqlite_errorname", "") == "SQLITE_CONSTRAINT_UNIQUE"


def get_product(db: Session, product_id: int) -> Optional[models.Product]:
    return db.get(models.Product, product_id)


def list_products(db: Session, offset: int = 0, limit: int = 10, search: str = "") -> Tuple[List[models.Product], int]:
    q = db.query(models.Product)
    if search:
        q = q.filter(_contains(models.Product.name, search))
    total = q.count()
    items = q.order_by(models.Product.id.desc()).offset(offset).limit(limit).all()
    return items, total


def create_product(db: Session, p: schemas.ProductCreate) -> models.Product:
    obj = models.Product(name=p.name, price=p.price, storage=p.storage)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    logger.info("Created product id={}", obj.id)
    return obj


def get_client(db: Session, client_id: int) -> Optional[models.Client]:
    return db.get(models.Client, client_id)


def list_clients(db: Session, offset: int = 0, limit: int = 10, search: str = "") -> Tuple[List[models.Client], int]:
    q = db.query(models.Client)
    if search:
        q = q.filter(or_(_contains(models.Client.name, search), _contains(models.Client.email, search)))
    total = q.count()
    items = q.order_by(models.Client.id.desc()).offset(offset).limit(limit).all()
    return items, total


def create_client(db: Session, c: schemas.ClientCreate) -> models.Client:
    obj = models.Client(name=c.name, email=c.email.lower(), age=c.age)
    db.add(obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_unique_violation(e):
            logger.info("Rejected duplicate client email {}", obj.email)
            raise ConflictError("Client already exists") from e
        raise
    db.refresh(obj)
    logger.info("Created client id={}", obj.id)
    return obj
