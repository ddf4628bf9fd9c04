from .cart import CartLineSerializer, CartSerializer

__all__ = [
    "CartSerializer",
    "CartLineSerializer",
]
