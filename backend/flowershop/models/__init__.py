from flowershop.models.user import User, UserType
from flowershop.models.category import Category
from flowershop.models.product import Product
from flowershop.models.order import Order, OrderStatus
from flowershop.models.favorite import Favorite
from flowershop.models.cart_item import CartItem

__all__ = [
    "User",
    "UserType",
    "Category",
    "Product",
    "Order",
    "OrderStatus",
    "Favorite",
    "CartItem",
]
