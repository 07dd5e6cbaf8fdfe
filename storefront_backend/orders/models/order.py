# orders/models/order.py

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

User = settings.AUTH_USER_MODEL


class Order(models.Model):
    """
    Online order placed through checkout.

    LIFECYCLE:
    - Created PENDING by create-order (no items, no stock movement yet)
    - Becomes PROCESSING only through verified payment (fulfillment)
    - Staff then move it through shipped -> delivered, or cancel it

    GUARANTEES:
    - gateway_order_id is unique: it is the idempotency key for verification
    - shipping_address_text is a snapshot; editing the address book never
      rewrites it
    """

    STATUS_PENDING = "pending"
    STATUS_PROCESSING = "processing"
    STATUS_SHIPPED = "shipped"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    APPROVAL_PENDING = "pending_approval"
    APPROVAL_APPROVED = "approved"
    APPROVAL_REJECTED = "rejected"

    APPROVAL_CHOICES = [
        (APPROVAL_PENDING, "Pending Approval"),
        (APPROVAL_APPROVED, "Approved"),
        (APPROVAL_REJECTED, "Rejected"),
    ]

    PRINT_PENDING = "pending"
    PRINT_PRINTING = "printing"
    PRINT_COMPLETED = "completed"
    PRINT_FAILED = "failed"

    PRINT_CHOICES = [
        (PRINT_PENDING, "Pending"),
        (PRINT_PRINTING, "Printing"),
        (PRINT_COMPLETED, "Completed"),
        (PRINT_FAILED, "Failed"),
    ]

    PAYMENT_MODE_MOCK = "mock"
    PAYMENT_MODE_RAZORPAY = "razorpay"

    PAYMENT_MODE_CHOICES = [
        (PAYMENT_MODE_MOCK, "Mock"),
        (PAYMENT_MODE_RAZORPAY, "Razorpay"),
    ]

    order_number = models.CharField(
        max_length=64,
        unique=True,
        help_text="System-generated human-readable order number",
    )

    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name="orders",
    )

    # ---------------- PAYMENT ----------------
    gateway_order_id = models.CharField(max_length=128, unique=True)
    gateway_payment_id = models.CharField(max_length=128, blank=True, default="")
    gateway_signature = models.CharField(max_length=256, blank=True, default="")
    payment_mode = models.CharField(
        max_length=16,
        choices=PAYMENT_MODE_CHOICES,
        default=PAYMENT_MODE_MOCK,
    )
    currency = models.CharField(max_length=8, default="INR")
    cart_fingerprint = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="Digest of the cart lines the amount was computed from",
    )

    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)

    # ---------------- SHIPPING SNAPSHOT ----------------
    shipping_address = models.ForeignKey(
        "users.Address",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    shipping_address_text = models.TextField()
    shipping_mobile = models.CharField(max_length=15, blank=True, default="")
    shipping_pincode = models.CharField(max_length=6, blank=True, default="")

    # ---------------- APPROVAL / PRINT ----------------
    approval_status = models.CharField(
        max_length=20,
        choices=APPROVAL_CHOICES,
        default=APPROVAL_PENDING,
    )
    approved_at = models.DateTimeField(null=True, blank=True)

    print_status = models.CharField(
        max_length=16,
        choices=PRINT_CHOICES,
        null=True,
        blank=True,
    )
    print_error = models.TextField(blank=True, default="")
    printed_at = models.DateTimeField(null=True, blank=True)

    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="order_status_idx"),
            models.Index(fields=["user", "created_at"], name="order_user_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gt=0),
                name="order_total_amount_positive",
            ),
        ]

    @property
    def is_paid(self) -> bool:
        return self.paid_at is not None

    def __str__(self):
        return f"{self.order_number} | {self.total_amount} | {self.status}"
