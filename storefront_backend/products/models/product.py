# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a sellable product.

    STOCK MODEL (IMPORTANT):
    - stock_quantity is the single source of truth for availability
    - It may never go negative (DB check constraint)
    - Checkout decrements it with a conditional UPDATE, never read-modify-write

    PRICE:
    - price is the live selling price
    - Orders snapshot it into OrderItem.price_at_purchase at fulfillment time
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sku = models.CharField(max_length=128, unique=True, db_index=True)
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")

    price = models.DecimalField(max_digits=10, decimal_places=2)
    stock_quantity = models.PositiveIntegerField(default=0)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="product_stock_quantity_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    def clean(self):
        if self.price is None or Decimal(self.price) < Decimal("0.00"):
            raise ValidationError({"price": "Price must be non-negative"})

    @property
    def in_stock(self) -> bool:
        return self.is_active and int(self.stock_quantity or 0) > 0
