from pydantic import BaseModel


class DashboardStats(BaseModel):
    users: int
    orders: int
    products: int
    categories: int
    revenue: float
