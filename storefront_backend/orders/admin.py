# orders/admin.py
"""
=====================================================
PATH: orders/admin.py
=====================================================

Orders are financial records:
- Order rows are read-only in admin (status moves go through the API so
  lifecycle rules and customer emails apply).
- OrderItems are shown inline, never editable.
"""

from __future__ import annotations

from django.contrib import admin

from orders.models import Order, OrderItem, PrinterSetting, PrintHistory


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    fields = ("product_name", "sku", "quantity", "price_at_purchase", "created_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class PrintHistoryInline(admin.TabularInline):
    model = PrintHistory
    extra = 0
    can_delete = False
    fields = ("status", "printer_name", "printer_address", "error_message", "created_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_number",
        "user",
        "total_amount",
        "status",
        "approval_status",
        "print_status",
        "payment_mode",
        "created_at",
    )
    list_filter = ("status", "approval_status", "print_status", "payment_mode")
    search_fields = ("order_number", "gateway_order_id", "gateway_payment_id", "user__email")
    ordering = ("-created_at",)
    inlines = [OrderItemInline, PrintHistoryInline]

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PrinterSetting)
class PrinterSettingAdmin(admin.ModelAdmin):
    list_display = ("printer_name", "user", "connection_type", "printer_address", "is_default")
    list_filter = ("connection_type", "is_default")
    search_fields = ("printer_name", "user__email")
