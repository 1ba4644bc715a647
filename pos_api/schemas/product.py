from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pos_api.core.constants import MAX_DB_INT


class ProductBase(BaseModel):
    name: str
    price: int = Field(ge=0, le=MAX_DB_INT, description="Unit price in minor currency units")
    stock: int = Field(0, ge=0, le=MAX_DB_INT)
    category_id: Optional[int] = Field(None, le=MAX_DB_INT)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    pass


class ProductRead(ProductBase):
    id: int
    category_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
