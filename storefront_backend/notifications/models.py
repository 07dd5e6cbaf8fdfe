# notifications/models.py

from django.conf import settings
from django.db import models


class Notification(models.Model):
    """
    In-app notification for a single user (staff dashboards poll these).

    related_type + related_id point at the subject (e.g. "order", 42)
    without a hard FK, so notifications outlive what they refer to.
    """

    TYPE_NEW_ORDER = "new_order"
    TYPE_ORDER_STATUS = "order_status"

    TYPE_CHOICES = [
        (TYPE_NEW_ORDER, "New Order"),
        (TYPE_ORDER_STATUS, "Order Status"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    type = models.CharField(max_length=32, choices=TYPE_CHOICES)
    title = models.CharField(max_length=255)
    message = models.TextField()
    is_read = models.BooleanField(default=False)

    related_id = models.PositiveBigIntegerField(null=True, blank=True)
    related_type = models.CharField(max_length=32, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "is_read"], name="notification_user_read_idx"),
        ]

    def __str__(self):
        return f"{self.user} | {self.title}"
