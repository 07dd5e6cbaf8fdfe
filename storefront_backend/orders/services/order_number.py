# orders/services/order_number.py

"""
ORDER NUMBER GENERATION

Format: ORD + local timestamp (YYYYMMDDHHMMSS) + 4 random digits,
e.g. ORD202610181432070417.

Uniqueness:
- Each candidate is checked against existing orders before use.
- The unique index on Order.order_number remains the final guard.
"""

from __future__ import annotations

import logging
import secrets

from django.utils import timezone

from orders.models import Order

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 10


class OrderNumberExhaustedError(Exception):
    pass


def _candidate() -> str:
    stamp = timezone.localtime().strftime("%Y%m%d%H%M%S")
    return f"ORD{stamp}{secrets.randbelow(10000):04d}"


def generate_order_number(*, max_attempts: int = MAX_ATTEMPTS) -> str:
    for attempt in range(1, max_attempts + 1):
        candidate = _candidate()
        if not Order.objects.filter(order_number=candidate).exists():
            return candidate

        logger.warning(
            "Order number collision",
            extra={"order_number": candidate, "attempt": attempt},
        )

    raise OrderNumberExhaustedError(
        f"Could not generate a unique order number after {max_attempts} attempts"
    )
