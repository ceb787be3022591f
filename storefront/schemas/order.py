from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import datetime


class OrderLineIn(BaseModel):
    product_id: int
    quantity: int


class OrderCreate(BaseModel):
    user_id: int
    total_price: Optional[float] = None
    products: List[OrderLineIn]


class OrderOut(BaseModel):
    id: int
    user_id: int
    total_price: float
    order_date: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderSummary(OrderOut):
    item_count: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class OrderLineOut(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    product_price: float
    item_total: float


class OrderDetails(BaseModel):
    order_id: int
    user_id: int
    total_price: float
    order_date: datetime
    first_name: str
    last_name: str
    shipping_address: Optional[str] = None
    shipping_city: Optional[str] = None
    shipping_zip: Optional[str] = None
    items: List[OrderLineOut]
