from .address import Address
from .base import Base
from .cart_item import CartItem
from .order import Order
from .user import RevokedToken, User

__all__ = ["Address", "Base", "CartItem", "Order", "RevokedToken", "User"]
