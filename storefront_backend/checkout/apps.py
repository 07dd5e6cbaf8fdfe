# checkout/apps.py

"""
CHECKOUT APP CONFIG

Online checkout core:
- create-order: cart -> pending Order + payment-gateway order
- verify-payment: verified payment -> paid Order, items, stock, notifications
"""

from django.apps import AppConfig


class CheckoutConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "checkout"
    verbose_name = "Checkout"

    def ready(self):
        from checkout.services import gateways  # noqa: F401
