from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class PaymentCreate(BaseModel):
    order_id: int
    user_id: int
    total_amount: Optional[float] = None


class PaymentOut(BaseModel):
    id: int
    order_id: int
    user_id: int
    total_amount: float
    payment_status: str
    date: datetime

    model_config = ConfigDict(from_attributes=True)
