from .cart import Cart
from .cart_item import CartItem
from .retired_guest_token import RetiredGuestToken

__all__ = [
    "Cart",
    "CartItem",
    "RetiredGuestToken",
]
