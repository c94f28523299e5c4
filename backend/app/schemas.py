# app/schemas.py
from typing import Annotated, ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

from .utils import MAX_ROW_ID

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ProductCreate(BaseModel):
    # converted to numbers before validation, see validators.coerce_numbers
    numeric_fields: ClassVar[tuple] = ("price", "storage")

    name: NonEmptyStr
    price: float = Field(ge=0, allow_inf_nan=False)
    storage: Optional[int] = Field(default=None, ge=0, le=MAX_ROW_ID)


class ClientCreate(BaseModel):
    numeric_fields: ClassVar[tuple] = ("age",)

    name: NonEmptyStr
    email: EmailStr
    age: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)

    @field_validator("email", mode="before")
    @classmethod
    def reject_display_name(cls, v):
        # EmailStr would reduce "Name <addr>" to addr
        if isinstance(v, str) and ("<" in v or ">" in v):
            raise ValueError("invalid email format")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: float
    storage: Optional[int] = None


class ClientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    age: Optional[float] = None


class PageBase(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class ProductPage(PageBase):
    data: List[ProductOut]


class ClientPage(PageBase):
    data: List[ClientOut]
