# notifications/services/emails.py

"""
ORDER EMAILS (plain text, django.core.mail)

- send_order_confirmation_email(): after a payment is fulfilled
- send_order_status_email(): when staff mark an order shipped/delivered

Both return False (and send nothing) when emails are disabled or the
order has no reachable customer. Transport errors propagate; callers
running after commit catch and log them.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def _recipient(order) -> str:
    user = getattr(order, "user", None)
    return (getattr(user, "email", "") or "").strip()


def _greeting(order) -> str:
    user = getattr(order, "user", None)
    name = getattr(user, "display_name", "") if user else ""
    return f"Hi {name}," if name else "Hello,"


def _enabled() -> bool:
    return bool(getattr(settings, "ORDER_EMAILS_ENABLED", True))


def send_order_confirmation_email(order) -> bool:
    recipient = _recipient(order)
    if not _enabled() or not recipient:
        return False

    store_name = settings.STORE_NAME
    lines = [
        _greeting(order),
        "",
        f"Thank you for shopping with {store_name}. Your payment was received",
        f"and order {order.order_number} is now being processed.",
        "",
    ]
    for item in order.items.all():
        lines.append(f"- {item.product_name} x {item.quantity} @ {item.price_at_purchase}")
    lines += [
        "",
        f"Total: {order.currency} {order.total_amount}",
        "",
        "Shipping to:",
        order.shipping_address_text,
    ]

    logger.info(
        "Sending order confirmation email",
        extra={"order_id": order.id, "recipient": recipient},
    )
    send_mail(
        subject=f"{store_name}: order {order.order_number} confirmed",
        message="\n".join(lines),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[recipient],
        fail_silently=False,
    )
    return True


def send_order_status_email(order) -> bool:
    recipient = _recipient(order)
    if not _enabled() or not recipient:
        return False

    store_name = settings.STORE_NAME
    status_label = order.get_status_display()
    message = "\n".join(
        [
            _greeting(order),
            "",
            f"Your order {order.order_number} is now {status_label.lower()}.",
            "",
            f"Total: {order.currency} {order.total_amount}",
            "",
            f"Thank you for shopping with {store_name}.",
        ]
    )

    logger.info(
        "Sending order status email",
        extra={"order_id": order.id, "status": order.status, "recipient": recipient},
    )
    send_mail(
        subject=f"{store_name}: order {order.order_number} {status_label.lower()}",
        message=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[recipient],
        fail_silently=False,
    )
    return True
