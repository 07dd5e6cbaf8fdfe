# notifications/services/staff.py

from __future__ import annotations

from django.contrib.auth import get_user_model

from notifications.models import Notification

User = get_user_model()


def notify_staff_new_order(order) -> list[Notification]:
    """
    One unread notification per active admin/manager.

    Runs inside the fulfillment transaction, so it rolls back with it.
    """
    rows = [
        Notification(
            user=staff_user,
            type=Notification.TYPE_NEW_ORDER,
            title="New order received",
            message=(
                f"Order {order.order_number} has been paid "
                f"({order.currency} {order.total_amount}) and is ready to process."
            ),
            related_id=order.id,
            related_type="order",
        )
        for staff_user in User.objects.staff()
    ]
    return Notification.objects.bulk_create(rows)
