from django.contrib import admin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("title", "user", "type", "is_read", "related_type", "related_id", "created_at")
    list_filter = ("type", "is_read")
    search_fields = ("title", "message", "user__email")
