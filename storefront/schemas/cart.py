from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import datetime


class CartCreate(BaseModel):
    user_id: int


class CartOut(BaseModel):
    id: int
    user_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CartItemCreate(BaseModel):
    product_id: int
    quantity: int


class CartItemUpdate(BaseModel):
    quantity: int


class CartItemOut(BaseModel):
    cart_id: int
    product_id: int
    quantity: int
    name: str
    price: float
    image: Optional[str] = None
    line_total: float


class CartContents(BaseModel):
    cart_id: int
    items: List[CartItemOut]
    total: float


class CartItemAdded(BaseModel):
    cart_id: int
    product_id: int
    quantity: int
