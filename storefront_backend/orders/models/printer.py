# orders/models/printer.py

"""
Invoice printers owned by staff, and the per-attempt print audit trail.
"""

from django.conf import settings
from django.db import models


class PrinterSetting(models.Model):
    CONNECTION_USB = "usb"
    CONNECTION_NETWORK = "network"

    CONNECTION_CHOICES = [
        (CONNECTION_USB, "USB / local queue"),
        (CONNECTION_NETWORK, "Network"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="printers",
    )

    printer_name = models.CharField(max_length=128, help_text="Print queue name (lp -d)")
    printer_address = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Host[:port] of the print server for network printers",
    )
    connection_type = models.CharField(
        max_length=16,
        choices=CONNECTION_CHOICES,
        default=CONNECTION_USB,
    )
    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-is_default", "-created_at"]

    def __str__(self):
        suffix = " (default)" if self.is_default else ""
        return f"{self.printer_name}{suffix}"


class PrintHistory(models.Model):
    STATUS_COMPLETED = "completed"
    STATUS_FAILED = "failed"

    STATUS_CHOICES = [
        (STATUS_COMPLETED, "Completed"),
        (STATUS_FAILED, "Failed"),
    ]

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="print_history",
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES)
    printer_name = models.CharField(max_length=128, blank=True, default="")
    printer_address = models.CharField(max_length=255, blank=True, default="")
    error_message = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "print history"

    def __str__(self):
        return f"{self.order_id} | {self.status} | {self.printer_name}"
