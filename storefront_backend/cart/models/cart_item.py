# cart/models/cart_item.py

"""
CART ITEM MODEL

Purpose:
- A customer's cart is simply their CartItem rows.
- Price is NOT snapshotted here: checkout always reads the live Product.price.

Rules:
- One row per (user, product) (DB constraint); adding again increments quantity.
- Quantity must be > 0.
- Rows are deleted by fulfillment once the order is paid.
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product


class CartItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart_items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="cart_items",
    )

    quantity = models.PositiveIntegerField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "product"],
                name="unique_cart_item_per_user_product",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="cart_item_quantity_positive",
            ),
        ]

    def clean(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValidationError({"quantity": "Quantity must be greater than zero"})

    @property
    def line_total(self):
        return self.product.price * self.quantity

    def __str__(self):
        return f"{self.product} x {self.quantity} ({self.user})"
