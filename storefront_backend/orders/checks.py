# orders/checks.py

"""
SCHEMA COMPATIBILITY CHECK (orders.E001)

Checkout writes a fixed set of orders_order columns. Instead of probing
the table inside requests, verify them once at startup / deploy
(`manage.py check --database default`, `migrate` runs it too).
"""

from __future__ import annotations

from django.core.checks import Error, register
from django.db import connections
from django.db.utils import DatabaseError

from checkout.services.exceptions import SchemaCompatibilityError

REQUIRED_ORDER_COLUMNS = (
    "order_number",
    "gateway_order_id",
    "gateway_payment_id",
    "gateway_signature",
    "payment_mode",
    "currency",
    "cart_fingerprint",
    "total_amount",
    "status",
    "shipping_address_id",
    "shipping_address_text",
    "shipping_mobile",
    "shipping_pincode",
    "approval_status",
    "approved_at",
    "print_status",
    "print_error",
    "printed_at",
    "paid_at",
)


def missing_order_columns(connection) -> set[str]:
    from orders.models import Order

    table = Order._meta.db_table
    with connection.cursor() as cursor:
        if table not in connection.introspection.table_names(cursor):
            # Not migrated yet: migrate will create the full schema.
            return set()
        present = {
            col.name for col in connection.introspection.get_table_description(cursor, table)
        }
    return set(REQUIRED_ORDER_COLUMNS) - present


@register("database")
def check_order_schema(app_configs=None, databases=None, **kwargs):
    errors = []
    for alias in databases or []:
        try:
            missing = missing_order_columns(connections[alias])
        except DatabaseError:
            continue
        if missing:
            errors.append(
                Error(
                    str(SchemaCompatibilityError(missing)),
                    hint="Run `python manage.py migrate orders`.",
                    id="orders.E001",
                )
            )
    return errors
