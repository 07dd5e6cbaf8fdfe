# checkout/tests/test_fulfillment.py

from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase, override_settings

from cart.models import CartItem
from checkout.services.exceptions import (
    CartChangedError,
    EmptyCartError,
    InsufficientStockError,
    OrderNotFoundError,
    PaymentVerificationFailedError,
)
from checkout.services.fulfillment import verify_and_fulfill
from checkout.services.gateways import MockGateway, RazorpayGateway
from checkout.services.order_creation import create_checkout_order
from checkout.services.razorpay import razorpay_signature
from notifications.models import Notification
from orders.models import Order, OrderItem, PrinterSetting, PrintHistory
from products.models import Product
from users.models import ROLE_MANAGER

User = get_user_model()

RAZORPAY_TEST_SETTINGS = {
    "RAZORPAY": {"KEY_ID": "rzp_test_key", "KEY_SECRET": "rzp_test_secret", "TIMEOUT": 5}
}


class FulfillmentTestBase(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="asha@example.com", password="x")
        self.manager = User.objects.create_user(
            email="manager@example.com", password="x", role=ROLE_MANAGER
        )

        self.a = Product.objects.create(name="A", sku="A-1", price=Decimal("100.00"), stock_quantity=10)
        self.b = Product.objects.create(name="B", sku="B-1", price=Decimal("50.00"), stock_quantity=5)

        CartItem.objects.create(user=self.user, product=self.a, quantity=2)
        CartItem.objects.create(user=self.user, product=self.b, quantity=1)

    def _create_order(self, gateway):
        return create_checkout_order(
            user=self.user, gateway=gateway, shipping_address="12 MG Road, Bengaluru 560001"
        )

    def _stock(self, product):
        product.refresh_from_db()
        return product.stock_quantity


class MockFulfillmentTests(FulfillmentTestBase):
    """
    Verify-payment in mock mode.

    GUARANTEES:
    - One OrderItem per cart row at the live price
    - Stock decremented by purchased quantity
    - Cart emptied, order processing + approved
    - Repeat verification never re-fulfills
    - Any stock shortfall rolls everything back
    - A cart changed since create-order is never fulfilled
    """

    def setUp(self):
        super().setUp()
        self.gateway = MockGateway()
        self.handle = self._create_order(self.gateway)

    def _verify(self):
        return verify_and_fulfill(
            user=self.user,
            gateway=self.gateway,
            gateway_order_id=self.handle.gateway_order_id,
        )

    # =====================================================
    # HAPPY PATH
    # =====================================================

    def test_concrete_scenario(self):
        result = self._verify()

        self.assertEqual(result.order_id, self.handle.id)
        self.assertFalse(result.already_processed)

        order = Order.objects.get(id=self.handle.id)
        self.assertEqual(order.status, Order.STATUS_PROCESSING)
        self.assertEqual(order.approval_status, Order.APPROVAL_APPROVED)
        self.assertEqual(order.print_status, Order.PRINT_PENDING)
        self.assertIsNotNone(order.paid_at)
        self.assertIsNotNone(order.approved_at)
        self.assertTrue(order.gateway_payment_id.startswith("pay_mock_"))

        items = {
            (item.product_id, item.quantity, item.price_at_purchase)
            for item in OrderItem.objects.filter(order=order)
        }
        self.assertEqual(
            items,
            {(self.a.id, 2, Decimal("100.00")), (self.b.id, 1, Decimal("50.00"))},
        )

        self.assertEqual(self._stock(self.a), 8)
        self.assertEqual(self._stock(self.b), 4)
        self.assertFalse(CartItem.objects.filter(user=self.user).exists())

    def test_items_use_price_at_verification(self):
        Product.objects.filter(id=self.a.id).update(price=Decimal("90.00"))

        self._verify()

        item = OrderItem.objects.get(order_id=self.handle.id, product=self.a)
        self.assertEqual(item.price_at_purchase, Decimal("90.00"))
        self.assertEqual(item.product_name, "A")
        self.assertEqual(item.sku, "A-1")

    def test_staff_are_notified(self):
        self._verify()

        notification = Notification.objects.get(user=self.manager)
        self.assertEqual(notification.related_id, self.handle.id)
        self.assertFalse(Notification.objects.filter(user=self.user).exists())

    # =====================================================
    # IDEMPOTENCY
    # =====================================================

    def test_second_verification_does_not_double_decrement(self):
        self._verify()
        result = self._verify()

        self.assertTrue(result.already_processed)
        self.assertEqual(result.order_number, self.handle.order_number)
        self.assertEqual(self._stock(self.a), 8)
        self.assertEqual(self._stock(self.b), 4)
        self.assertEqual(OrderItem.objects.filter(order_id=self.handle.id).count(), 2)
        self.assertEqual(Notification.objects.filter(user=self.manager).count(), 1)

    def test_repeat_after_new_cart_does_not_consume_it(self):
        self._verify()
        CartItem.objects.create(user=self.user, product=self.a, quantity=1)

        self._verify()

        self.assertEqual(CartItem.objects.filter(user=self.user).count(), 1)
        self.assertEqual(self._stock(self.a), 8)

    # =====================================================
    # CART CHANGED AFTER CREATE-ORDER
    # =====================================================

    def test_grown_quantity_is_refused(self):
        CartItem.objects.filter(user=self.user, product=self.a).update(quantity=9)

        with self.assertRaises(CartChangedError):
            self._verify()

        order = Order.objects.get(id=self.handle.id)
        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertEqual(order.total_amount, Decimal("250.00"))
        self.assertEqual(OrderItem.objects.count(), 0)
        self.assertEqual(self._stock(self.a), 10)
        self.assertEqual(CartItem.objects.filter(user=self.user).count(), 2)

    def test_added_product_is_refused(self):
        extra = Product.objects.create(name="C", sku="C-1", price=Decimal("10.00"), stock_quantity=3)
        CartItem.objects.create(user=self.user, product=extra, quantity=1)

        with self.assertRaises(CartChangedError):
            self._verify()
        self.assertEqual(self._stock(extra), 3)

    def test_removed_product_is_refused(self):
        CartItem.objects.filter(user=self.user, product=self.b).delete()

        with self.assertRaises(CartChangedError):
            self._verify()
        self.assertEqual(self._stock(self.a), 10)

    def test_unchanged_cart_with_new_prices_still_fulfills(self):
        Product.objects.filter(id=self.b.id).update(price=Decimal("55.00"))

        result = self._verify()

        self.assertFalse(result.already_processed)
        self.assertEqual(OrderItem.objects.filter(order_id=self.handle.id).count(), 2)

    # =====================================================
    # FAILURES
    # =====================================================

    def test_insufficient_stock_rolls_back_everything(self):
        Product.objects.filter(id=self.b.id).update(stock_quantity=0)

        with self.assertRaises(InsufficientStockError) as ctx:
            self._verify()

        self.assertEqual(ctx.exception.product_id, self.b.id)
        self.assertEqual(ctx.exception.requested, 1)
        self.assertEqual(ctx.exception.available, 0)

        order = Order.objects.get(id=self.handle.id)
        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertIsNone(order.paid_at)
        self.assertEqual(OrderItem.objects.count(), 0)
        self.assertEqual(self._stock(self.a), 10)
        self.assertEqual(CartItem.objects.filter(user=self.user).count(), 2)
        self.assertFalse(Notification.objects.exists())

    def test_deactivated_product_cannot_be_fulfilled(self):
        Product.objects.filter(id=self.a.id).update(is_active=False)

        with self.assertRaises(InsufficientStockError):
            self._verify()
        self.assertEqual(self._stock(self.b), 5)

    def test_empty_cart_keeps_order_pending(self):
        CartItem.objects.filter(user=self.user).delete()

        with self.assertRaises(EmptyCartError):
            self._verify()
        self.assertEqual(Order.objects.get(id=self.handle.id).status, Order.STATUS_PENDING)

    def test_other_users_order_is_not_found(self):
        other = User.objects.create_user(email="ravi@example.com", password="x")

        with self.assertRaises(OrderNotFoundError):
            verify_and_fulfill(
                user=other,
                gateway=self.gateway,
                gateway_order_id=self.handle.gateway_order_id,
            )

    # =====================================================
    # POST-COMMIT SIDE EFFECTS
    # =====================================================

    def test_confirmation_email_is_sent_after_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            self._verify()

        self.assertEqual(len(callbacks), 1)
        self.assertEqual(mail.outbox, [])

        callbacks[0]()
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(self.handle.order_number, mail.outbox[0].subject)

    @override_settings(PRINTING_ENABLED=True)
    @patch("orders.services.printing.subprocess.run", side_effect=OSError("no lp"))
    def test_print_failure_does_not_fail_payment(self, run):
        PrinterSetting.objects.create(user=self.manager, printer_name="counter", is_default=True)

        with self.captureOnCommitCallbacks(execute=True):
            result = self._verify()

        self.assertFalse(result.already_processed)
        order = Order.objects.get(id=self.handle.id)
        self.assertEqual(order.status, Order.STATUS_PROCESSING)
        self.assertEqual(order.print_status, Order.PRINT_FAILED)
        self.assertEqual(PrintHistory.objects.get(order=order).status, PrintHistory.STATUS_FAILED)
        self.assertEqual(len(mail.outbox), 1)

    @override_settings(PRINTING_ENABLED=False)
    @patch("orders.services.printing.subprocess.run")
    def test_printing_disabled_skips_print_job(self, run):
        PrinterSetting.objects.create(user=self.manager, printer_name="counter", is_default=True)

        with self.captureOnCommitCallbacks(execute=True):
            self._verify()

        run.assert_not_called()
        self.assertEqual(Order.objects.get(id=self.handle.id).print_status, Order.PRINT_PENDING)


@override_settings(PAYMENT_MODE="razorpay", PAYMENTS=RAZORPAY_TEST_SETTINGS)
class RazorpayFulfillmentTests(FulfillmentTestBase):
    """
    GUARANTEES:
    - A valid HMAC signature fulfills the order
    - A tampered signature leaves the order untouched
    """

    def setUp(self):
        super().setUp()
        self.gateway = RazorpayGateway()
        with patch(
            "checkout.services.gateways.razorpay_create_order",
            return_value={"id": "order_RZP123"},
        ):
            self.handle = self._create_order(self.gateway)

    def test_valid_signature_fulfills(self):
        signature = razorpay_signature(order_id="order_RZP123", payment_id="pay_RZP456")

        verify_and_fulfill(
            user=self.user,
            gateway=self.gateway,
            gateway_order_id="order_RZP123",
            payment_id="pay_RZP456",
            signature=signature,
        )

        order = Order.objects.get(id=self.handle.id)
        self.assertEqual(order.status, Order.STATUS_PROCESSING)
        self.assertEqual(order.payment_mode, Order.PAYMENT_MODE_RAZORPAY)
        self.assertEqual(order.gateway_payment_id, "pay_RZP456")
        self.assertEqual(order.gateway_signature, signature)

    def test_tampered_signature_leaves_order_pending(self):
        signature = razorpay_signature(order_id="order_RZP123", payment_id="pay_RZP456")

        with self.assertRaises(PaymentVerificationFailedError):
            verify_and_fulfill(
                user=self.user,
                gateway=self.gateway,
                gateway_order_id="order_RZP123",
                payment_id="pay_OTHER",
                signature=signature,
            )

        order = Order.objects.get(id=self.handle.id)
        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertEqual(order.gateway_payment_id, "")
        self.assertEqual(self._stock(self.a), 10)
        self.assertEqual(CartItem.objects.filter(user=self.user).count(), 2)
