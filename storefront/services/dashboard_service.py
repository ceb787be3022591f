from typing import Dict

from storefront.crud import category as crud_category
from storefront.crud import order as crud_order
from storefront.crud import payment as crud_payment
from storefront.crud import product as crud_product
from storefront.crud import user as crud_user
from storefront.services.base import BaseService


class DashboardService(BaseService):

    def get_stats(self) -> Dict:
        with self.reading("Failed to load dashboard statistics."):
            return {
                "users": crud_user.count_users(self.db),
                "orders": crud_order.count_orders(self.db),
                "products": crud_product.count_products(self.db),
                "categories": crud_category.count_categories(self.db),
                "revenue": crud_payment.total_revenue(self.db),
            }
