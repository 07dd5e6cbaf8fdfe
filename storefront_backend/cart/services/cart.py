# cart/services/cart.py

"""
CART SERVICE

Shared by the cart API and checkout:
- cart_lines(): the user's rows joined with their live Product
- cart_totals(): subtotal from live prices (never trusted from client)
- cart_fingerprint(): digest of (product, quantity) pairs; checkout stores it
  on the order so verification can tell whether the cart changed since
- add_to_cart(): increments an existing row, capped by live stock
"""

from __future__ import annotations

import hashlib
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction

from cart.models import CartItem
from products.models import Product

TWOPLACES = Decimal("0.01")


class InsufficientCartStockError(Exception):
    def __init__(self, *, product: Product, requested: int):
        self.product = product
        self.requested = requested
        super().__init__(
            f"Only {product.stock_quantity} unit(s) of {product.name} available "
            f"(requested {requested})"
        )


def _money(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def cart_lines(*, user, lock: bool = False):
    qs = CartItem.objects.filter(user=user).select_related("product").order_by("created_at")
    if lock:
        qs = qs.select_for_update()
    return qs


def cart_totals(lines) -> dict:
    subtotal = Decimal("0.00")
    item_count = 0
    for line in lines:
        subtotal += Decimal(str(line.product.price)) * int(line.quantity)
        item_count += int(line.quantity)
    return {"item_count": item_count, "subtotal_amount": _money(subtotal)}


def cart_fingerprint(lines) -> str:
    """
    Order-independent; prices are excluded (they are read live at fulfillment).
    """
    pairs = sorted(f"{line.product_id}:{int(line.quantity)}" for line in lines)
    return hashlib.sha256("|".join(pairs).encode("utf-8")).hexdigest()


@transaction.atomic
def add_to_cart(*, user, product: Product, quantity: int) -> CartItem:
    item = (
        CartItem.objects.select_for_update()
        .filter(user=user, product=product)
        .first()
    )
    requested = int(quantity) + (item.quantity if item else 0)

    if requested > int(product.stock_quantity or 0):
        raise InsufficientCartStockError(product=product, requested=requested)

    if item is None:
        return CartItem.objects.create(user=user, product=product, quantity=requested)

    item.quantity = requested
    item.save(update_fields=["quantity", "updated_at"])
    return item
