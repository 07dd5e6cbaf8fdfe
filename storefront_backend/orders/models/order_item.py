# orders/models/order_item.py

"""
ORDER ITEM (IMMUTABLE SNAPSHOT)

- Inserted only by payment fulfillment, one per cart row.
- price_at_purchase is the live Product.price read under the product row lock.
- product_name is kept so the invoice survives product deletion.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from products.models import Product


class OrderItem(models.Model):
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        related_name="order_items",
    )
    product_name = models.CharField(max_length=255)
    sku = models.CharField(max_length=128, blank=True, default="")

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price_at_purchase = models.DecimalField(max_digits=10, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="order_item_quantity_positive",
            ),
        ]

    @property
    def line_total(self) -> Decimal:
        return (Decimal(str(self.price_at_purchase)) * int(self.quantity)).quantize(
            Decimal("0.01")
        )

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("OrderItem records are immutable once created")
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_name} x{self.quantity}"
