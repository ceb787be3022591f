# Import all models so they are registered on Base.metadata

from storefront.models.user import User
from storefront.models.product import Category, Product
from storefront.models.cart import Cart, CartItem
from storefront.models.order import Order, OrderProduct
from storefront.models.payment import Payment, PAYMENT_COMPLETED

__all__ = [
    "User",
    "Category",
    "Product",
    "Cart",
    "CartItem",
    "Order",
    "OrderProduct",
    "Payment",
    "PAYMENT_COMPLETED",
]
