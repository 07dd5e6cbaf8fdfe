# orders/services/invoice.py

"""
PLAIN-TEXT INVOICE RENDERER

Used by the print job (piped to the print command) and by the
invoice download endpoint. Fixed-width so it reads on thermal and
line printers alike.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.utils import timezone

from orders.models import Order

WIDTH = 64
TWOPLACES = Decimal("0.01")


def _money(value) -> str:
    return str(Decimal(str(value or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP))


def _rule(char: str = "-") -> str:
    return char * WIDTH


def _center(text: str) -> str:
    return text.center(WIDTH).rstrip()


def render_invoice_text(order: Order) -> str:
    store_name = getattr(settings, "STORE_NAME", "") or "Storefront"
    store_address = getattr(settings, "STORE_ADDRESS", "")
    store_phone = getattr(settings, "STORE_PHONE", "")

    lines = [_center(store_name), _center("INVOICE")]
    if store_address:
        lines.extend(_center(part.strip()) for part in store_address.split("|") if part.strip())
    if store_phone:
        lines.append(_center(f"Phone: {store_phone}"))

    created = timezone.localtime(order.created_at) if order.created_at else timezone.localtime()
    lines += [
        _rule("="),
        f"Order Number: {order.order_number}",
        f"Date: {created:%d %b %Y %H:%M}",
        f"Payment ID: {order.gateway_payment_id or 'N/A'}",
        _rule(),
        "SHIP TO:",
    ]
    lines += [line for line in (order.shipping_address_text or "").splitlines() if line.strip()]
    if order.shipping_mobile and order.shipping_mobile not in (order.shipping_address_text or ""):
        lines.append(f"Mobile: {order.shipping_mobile}")

    lines += [
        _rule(),
        f"{'Item':<28}{'Qty':>6}{'Price':>14}{'Total':>16}",
        _rule(),
    ]

    for item in order.items.all():
        name = item.product_name[:27]
        lines.append(
            f"{name:<28}{item.quantity:>6}{_money(item.price_at_purchase):>14}"
            f"{_money(item.line_total):>16}"
        )
        if item.sku:
            lines.append(f"  {item.sku}")

    lines += [
        _rule(),
        f"{'TOTAL (' + order.currency + ')':<48}{_money(order.total_amount):>16}",
        _rule("="),
        _center("Thank you for your business!"),
    ]
    return "\n".join(lines) + "\n"
