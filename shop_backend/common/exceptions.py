# common/exceptions.py

"""
COMMERCE DOMAIN ERRORS

Centralized, typed failures for cart, checkout and order services.

Every error carries:
- code: stable machine-readable kind (frontend switches on this)
- http_status: status used by the API exception handler
- message: human-readable detail

Services raise these; views never build error payloads by hand.
"""

from __future__ import annotations


class CommerceError(Exception):
    """Base exception for all commerce domain failures."""

    code = "COMMERCE_ERROR"
    http_status = 400
    default_message = "Request could not be completed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(CommerceError):
    """Missing product, address, order or cart line."""

    code = "NOT_FOUND"
    http_status = 404
    default_message = "Not found"


class Conflict(CommerceError):
    """Duplicate unique value (SKU, email, ...)."""

    code = "CONFLICT"
    http_status = 409
    default_message = "Conflict"


class InvalidState(CommerceError):
    """Operation illegal for the current order status."""

    code = "INVALID_STATE"
    http_status = 409
    default_message = "Operation not allowed in the current state"


class OutOfStock(CommerceError):
    code = "OUT_OF_STOCK"
    http_status = 409
    default_message = "This product is out of stock"


class InsufficientStock(CommerceError):
    """Requested quantity exceeds live stock. Always names the product."""

    code = "INSUFFICIENT_STOCK"
    http_status = 409

    def __init__(self, message: str | None = None, *, product_id=None, product_name: str = ""):
        self.product_id = product_id
        self.product_name = product_name
        super().__init__(message or f"Insufficient stock for {product_name or 'product'}")


class EmptyCart(CommerceError):
    code = "EMPTY_CART"
    http_status = 400
    default_message = "Cart is empty"


class InvalidIdentity(CommerceError):
    """Neither an authenticated user nor a guest cart token was supplied."""

    code = "INVALID_IDENTITY"
    http_status = 400
    default_message = "Either authentication token or guest_cart_id is required"


class RetryableError(CommerceError):
    """Transient store failure (lock timeout, serialization failure)."""

    code = "RETRY"
    http_status = 503
    default_message = "The request could not be completed right now. Please try again."


class PaymentGatewayError(CommerceError):
    """The payment provider rejected the request or is not configured."""

    code = "PAYMENT_GATEWAY_ERROR"
    http_status = 502
    default_message = "Payment provider is unavailable. Please try again."
