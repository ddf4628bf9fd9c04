from .order import (
    OrderItemSerializer,
    OrderSerializer,
    OrderTrackingSerializer,
)
from .order_input import OrderStatusInputSerializer, PlaceOrderInputSerializer

__all__ = [
    "OrderItemSerializer",
    "OrderSerializer",
    "OrderTrackingSerializer",
    "PlaceOrderInputSerializer",
    "OrderStatusInputSerializer",
]
