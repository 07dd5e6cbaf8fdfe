# orders/services/order_status.py

"""
STAFF STATUS UPDATES

- Locks the order row, validates the move against order_lifecycle,
  persists it.
- Customer email for shipped/delivered is sent after commit and is
  best-effort (a mail failure never rolls back the status change).
- Cancelling does not restock; paid cancellations are refunded and
  restocked manually.
"""

from __future__ import annotations

import logging

from django.db import transaction

from notifications.services import send_order_status_email
from orders.models import Order
from orders.services.order_lifecycle import CUSTOMER_NOTIFIED_STATES, validate_transition

logger = logging.getLogger(__name__)


def _email_status_change(order_id: int) -> None:
    try:
        order = Order.objects.select_related("user").get(id=order_id)
        send_order_status_email(order)
    except Exception:
        logger.exception("Order status email failed", extra={"order_id": order_id})


@transaction.atomic
def update_order_status(*, order_id: int, target_status: str, actor=None) -> Order:
    order = Order.objects.select_for_update().get(id=order_id)

    validate_transition(order=order, target_status=target_status)

    previous = order.status
    order.status = target_status
    order.save(update_fields=["status", "updated_at"])

    logger.info(
        "Order status updated",
        extra={
            "order_id": order.id,
            "from_status": previous,
            "to_status": target_status,
            "actor_id": str(getattr(actor, "id", "") or ""),
        },
    )

    if target_status in CUSTOMER_NOTIFIED_STATES:
        transaction.on_commit(lambda: _email_status_change(order.id))

    return order
