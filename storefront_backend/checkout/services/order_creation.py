# checkout/services/order_creation.py

"""
ORDER CREATION (create-order)

Purpose:
- Turn the user's cart into a PENDING Order + a payment-gateway order.

Flow:
1) Resolve the shipping snapshot (saved address or deprecated free text)
2) Load cart rows with live product prices; none -> EmptyCartError
3) total = sum(price * qty), 2dp; <= 0 -> InvalidCartTotalError
4) Open the gateway order (network call happens OUTSIDE the DB transaction)
5) Atomically: generate a unique order number + insert the pending Order,
   storing the cart fingerprint the amount was computed from (a number
   lost to a concurrent insert is redrawn)

Hard rules:
- Money is server-owned; the client never sends amounts.
- No stock is reserved or moved here; fulfillment does that after payment.
- No OrderItems here: items are materialized from the cart at verification.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import IntegrityError, transaction

from cart.services import cart_fingerprint, cart_lines
from checkout.services.exceptions import (
    EmptyCartError,
    InvalidCartTotalError,
    OrderNumberGenerationError,
)
from checkout.services.gateways import PaymentGateway
from checkout.services.shipping import resolve_shipping
from orders.models import Order
from orders.services.order_number import OrderNumberExhaustedError, generate_order_number

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

# Inserts retried when a concurrent checkout claims the same order number.
INSERT_ATTEMPTS = 3


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CheckoutOrder:
    id: int
    order_number: str
    gateway_order_id: str
    amount: Decimal
    currency: str
    payment_mode: str


def _receipt_for(user) -> str:
    return f"rcpt_{uuid.UUID(str(user.id)).hex[:12]}_{int(time.time())}"


def compute_cart_total(lines) -> Decimal:
    total = Decimal("0.00")
    for line in lines:
        total += Decimal(str(line.product.price)) * int(line.quantity)
    return _money(total)


def _insert_pending_order(
    *, user, gateway, gateway_order_id, currency, total, shipping, fingerprint
) -> Order:
    """
    The existence check in generate_order_number() can race with another
    checkout; the unique index decides, and a lost race draws a new number.
    """
    for attempt in range(1, INSERT_ATTEMPTS + 1):
        try:
            order_number = generate_order_number()
        except OrderNumberExhaustedError as exc:
            raise OrderNumberGenerationError() from exc

        try:
            with transaction.atomic():
                return Order.objects.create(
                    order_number=order_number,
                    user=user,
                    gateway_order_id=gateway_order_id,
                    payment_mode=gateway.mode,
                    currency=currency,
                    cart_fingerprint=fingerprint,
                    total_amount=total,
                    status=Order.STATUS_PENDING,
                    shipping_address=shipping.address,
                    shipping_address_text=shipping.text,
                    shipping_mobile=shipping.mobile,
                    shipping_pincode=shipping.pincode,
                )
        except IntegrityError:
            if not Order.objects.filter(order_number=order_number).exists():
                raise
            logger.warning(
                "Order number taken at insert, retrying",
                extra={"order_number": order_number, "attempt": attempt},
            )

    logger.error(
        "Pending order not stored; gateway order left unused",
        extra={"gateway_order_id": gateway_order_id},
    )
    raise OrderNumberGenerationError()


def create_checkout_order(
    *,
    user,
    gateway: PaymentGateway,
    shipping_address_id=None,
    shipping_address: str = "",
    currency: str | None = None,
) -> CheckoutOrder:
    shipping = resolve_shipping(
        user=user,
        shipping_address_id=shipping_address_id,
        shipping_address=shipping_address,
    )

    lines = list(cart_lines(user=user))
    if not lines:
        raise EmptyCartError()

    total = compute_cart_total(lines)
    if total <= Decimal("0.00"):
        raise InvalidCartTotalError()

    currency = (currency or getattr(settings, "DEFAULT_CURRENCY", "INR") or "INR").strip().upper()

    gateway_order = gateway.create_order(
        amount=total,
        currency=currency,
        receipt=_receipt_for(user),
    )

    order = _insert_pending_order(
        user=user,
        gateway=gateway,
        gateway_order_id=gateway_order.id,
        currency=currency,
        total=total,
        shipping=shipping,
        fingerprint=cart_fingerprint(lines),
    )

    logger.info(
        "Checkout order created",
        extra={
            "order_id": order.id,
            "order_number": order.order_number,
            "gateway_order_id": order.gateway_order_id,
            "amount": str(total),
            "payment_mode": gateway.mode,
        },
    )

    return CheckoutOrder(
        id=order.id,
        order_number=order.order_number,
        gateway_order_id=order.gateway_order_id,
        amount=total,
        currency=currency,
        payment_mode=gateway.mode,
    )
