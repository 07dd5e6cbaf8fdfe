from .emails import send_order_confirmation_email, send_order_status_email
from .staff import notify_staff_new_order

__all__ = [
    "notify_staff_new_order",
    "send_order_confirmation_email",
    "send_order_status_email",
]
