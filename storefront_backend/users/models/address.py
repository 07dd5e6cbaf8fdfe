# users/models/address.py

"""
Saved shipping addresses (address book).

Checkout snapshots an address into the Order (text + mobile + pincode),
so editing or deleting an address never rewrites historical orders.
"""

from django.conf import settings
from django.db import models

from users.validators import validate_mobile_number, validate_pincode


class Address(models.Model):
    TYPE_HOME = "home"
    TYPE_WORK = "work"
    TYPE_OTHER = "other"

    TYPE_CHOICES = [
        (TYPE_HOME, "Home"),
        (TYPE_WORK, "Work"),
        (TYPE_OTHER, "Other"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="addresses",
    )

    address_type = models.CharField(max_length=16, choices=TYPE_CHOICES, default=TYPE_HOME)
    full_name = models.CharField(max_length=255)
    mobile_number = models.CharField(max_length=15, validators=[validate_mobile_number])
    house_number = models.CharField(max_length=64, blank=True, default="")
    address_line1 = models.CharField(max_length=255)
    address_line2 = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=6, validators=[validate_pincode])
    country = models.CharField(max_length=100, default="India")

    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default", "-created_at"]
        indexes = [
            models.Index(fields=["user", "is_default"], name="address_user_default_idx"),
        ]

    def as_shipping_text(self) -> str:
        street = ", ".join(
            part for part in (self.house_number, self.address_line1) if part
        )
        lines = [
            self.full_name,
            street,
            self.address_line2,
            f"{self.city}, {self.state} - {self.pincode}",
            self.country,
            f"Mobile: {self.mobile_number}",
        ]
        return "\n".join(line for line in lines if line)

    def __str__(self):
        return f"{self.full_name}, {self.city} ({self.pincode})"
