"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for Order entities.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
- Single source of truth
"""

from orders.models import Order

# ============================================================
# DOMAIN ERRORS
# ============================================================


class OrderLifecycleError(Exception):
    pass


class InvalidOrderTransitionError(OrderLifecycleError):
    pass


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_CANCELLED,
}

# pending -> processing happens only through verified payment.
PAYMENT_TRANSITION = (Order.STATUS_PENDING, Order.STATUS_PROCESSING)

# Staff-driven transitions.
ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_PROCESSING: {
        Order.STATUS_SHIPPED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_SHIPPED: {
        Order.STATUS_DELIVERED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_DELIVERED: {
        Order.STATUS_CANCELLED,
    },
}

# Statuses the customer is emailed about when staff set them.
CUSTOMER_NOTIFIED_STATES = {
    Order.STATUS_SHIPPED,
    Order.STATUS_DELIVERED,
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str, via_payment: bool = False) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    if via_payment:
        return (from_status, to_status) == PAYMENT_TRANSITION

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str, via_payment: bool = False):
    if not can_transition(
        from_status=order.status,
        to_status=target_status,
        via_payment=via_payment,
    ):
        raise InvalidOrderTransitionError(
            f"Order {order.order_number} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )
