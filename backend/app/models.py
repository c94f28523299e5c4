# app/models.py
from sqlalchemy import Column, Float, Integer, Text

from .database import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    storage = Column(Integer, nullable=True)


class Client(Base):
    __tablename__ = "clients"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)  # stored lower(email)
    age = Column(Float, nullable=True)
