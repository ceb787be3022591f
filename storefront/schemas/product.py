from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


# Categories

class CategoryCreate(BaseModel):
    name: str


class CategoryUpdate(CategoryCreate):
    pass


class CategoryOut(BaseModel):
    id: int
    name: str
    product_count: int = 0

    model_config = ConfigDict(from_attributes=True)


# Products

class ProductBase(BaseModel):
    name: str
    description: str = ""
    price: float
    stock_quantity: int = 0
    category_id: int
    image: Optional[str] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    stock_quantity: Optional[int] = None
    category_id: Optional[int] = None
    image: Optional[str] = None


class StockAdjustment(BaseModel):
    quantity: int  # delta, may be negative


class ProductOut(ProductBase):
    id: int
    category_name: Optional[str] = None
    added_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
