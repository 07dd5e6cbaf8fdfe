# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Catalog admin.

- Price and stock are edited here by staff.
- stock_quantity is guarded by a DB check constraint (never negative).
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "sku",
        "name",
        "price",
        "stock_quantity",
        "is_active",
        "created_at",
    )
    list_filter = ("is_active", "created_at")
    search_fields = ("sku", "name")
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")
