# checkout/services/exceptions.py

"""
CHECKOUT SERVICE ERRORS

Centralized domain errors for checkout services.

Each error carries:
- http_status: what the API layer answers with
- message: user-facing text (safe to show; internals go to the logs)
"""

from __future__ import annotations


class CheckoutError(Exception):
    """Base exception for all checkout failures."""

    http_status = 500
    default_message = "Checkout failed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CheckoutError):
    """Raised when request or address data is malformed."""

    http_status = 400
    default_message = "Invalid checkout request."


class EmptyCartError(CheckoutError):
    """Raised when the user's cart has no rows."""

    http_status = 400
    default_message = "Cart is empty."


class InvalidCartTotalError(CheckoutError):
    """Raised when the computed cart total is not positive."""

    http_status = 400
    default_message = "Invalid cart total."


class AddressNotFoundError(CheckoutError):
    """Raised when the shipping address is missing or owned by someone else."""

    http_status = 404
    default_message = "Address not found."


class OrderNotFoundError(CheckoutError):
    """Raised when no order of this user matches the gateway order id."""

    http_status = 404
    default_message = "Order not found."


class PaymentVerificationFailedError(CheckoutError):
    """Raised when the payment proof does not verify."""

    http_status = 400
    default_message = "Payment verification failed."


class CartChangedError(CheckoutError):
    """Raised when the cart no longer matches what the order was priced from."""

    http_status = 409
    default_message = "Your cart changed after checkout started. Please place the order again."


class InsufficientStockError(CheckoutError):
    """Raised when a paid order cannot be fulfilled from current stock."""

    http_status = 500
    default_message = "Payment verification failed. Please contact support."

    def __init__(self, message: str | None = None, *, product_id=None, requested=None, available=None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(message)


class GatewayConfigurationError(CheckoutError):
    """Raised when the payment gateway is enabled but not configured."""

    http_status = 500
    default_message = "Payment gateway is not configured."


class GatewayRequestError(CheckoutError):
    """Raised when the payment gateway rejects or fails a request."""

    http_status = 502
    default_message = "Error creating payment order."


class OrderNumberGenerationError(CheckoutError):
    """Raised when no unique order number could be generated."""

    http_status = 500
    default_message = "Could not generate an order number. Please retry."


class SchemaCompatibilityError(CheckoutError):
    """Reported by the orders.E001 system check when order columns are missing."""

    http_status = 500
    default_message = "Order storage schema is incompatible."

    def __init__(self, missing=()):
        self.missing = sorted(missing)
        super().__init__(
            "orders_order is missing required column(s): " + ", ".join(self.missing)
        )
