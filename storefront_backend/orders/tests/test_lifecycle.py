# orders/tests/test_lifecycle.py

from decimal import Decimal

from django.test import SimpleTestCase

from orders.models import Order
from orders.services.order_lifecycle import (
    InvalidOrderTransitionError,
    can_transition,
    validate_transition,
)


class OrderLifecycleRulesTests(SimpleTestCase):
    """
    GUARANTEES:
    - pending -> processing only through verified payment
    - cancelled is terminal
    - staff cannot skip shipped on the way to delivered
    """

    def _order(self, status):
        return Order(order_number="ORD-T", status=status, total_amount=Decimal("10.00"))

    def test_payment_moves_pending_to_processing(self):
        self.assertTrue(
            can_transition(
                from_status=Order.STATUS_PENDING,
                to_status=Order.STATUS_PROCESSING,
                via_payment=True,
            )
        )

    def test_staff_cannot_mark_pending_as_processing(self):
        self.assertFalse(
            can_transition(from_status=Order.STATUS_PENDING, to_status=Order.STATUS_PROCESSING)
        )

    def test_payment_cannot_reprocess_paid_order(self):
        self.assertFalse(
            can_transition(
                from_status=Order.STATUS_PROCESSING,
                to_status=Order.STATUS_PROCESSING,
                via_payment=True,
            )
        )

    def test_staff_forward_path(self):
        self.assertTrue(
            can_transition(from_status=Order.STATUS_PROCESSING, to_status=Order.STATUS_SHIPPED)
        )
        self.assertTrue(
            can_transition(from_status=Order.STATUS_SHIPPED, to_status=Order.STATUS_DELIVERED)
        )

    def test_cannot_skip_shipped(self):
        self.assertFalse(
            can_transition(from_status=Order.STATUS_PROCESSING, to_status=Order.STATUS_DELIVERED)
        )

    def test_cancelled_is_terminal(self):
        for target in (Order.STATUS_PENDING, Order.STATUS_PROCESSING, Order.STATUS_SHIPPED):
            self.assertFalse(
                can_transition(from_status=Order.STATUS_CANCELLED, to_status=target)
            )

    def test_validate_transition_raises_with_order_number(self):
        with self.assertRaisesMessage(InvalidOrderTransitionError, "ORD-T"):
            validate_transition(
                order=self._order(Order.STATUS_DELIVERED),
                target_status=Order.STATUS_SHIPPED,
            )
