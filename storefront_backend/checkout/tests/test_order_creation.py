# checkout/tests/test_order_creation.py

from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings

from cart.models import CartItem
from cart.services import cart_fingerprint
from checkout.services.exceptions import (
    AddressNotFoundError,
    EmptyCartError,
    GatewayRequestError,
    InvalidCartTotalError,
    OrderNumberGenerationError,
    ValidationError,
)
from checkout.services.gateways import MockGateway
from checkout.services.order_creation import create_checkout_order
from orders.models import Order, OrderItem
from orders.services.order_number import OrderNumberExhaustedError
from products.models import Product
from users.models import Address

User = get_user_model()


def _address(user, **overrides):
    data = {
        "full_name": "Asha Rao",
        "mobile_number": "9876543210",
        "house_number": "12B",
        "address_line1": "MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
    }
    data.update(overrides)
    return Address.objects.create(user=user, **data)


class CreateCheckoutOrderTests(TestCase):
    """
    Order creation service.

    GUARANTEES:
    - Total is computed server-side from live prices
    - Order is created PENDING with a shipping snapshot
    - No items, no stock movement before payment
    - Rejected requests insert no Order row
    """

    def setUp(self):
        self.user = User.objects.create_user(email="asha@example.com", password="x")
        self.other = User.objects.create_user(email="ravi@example.com", password="x")
        self.gateway = MockGateway()

        self.a = Product.objects.create(name="A", sku="A-1", price=Decimal("100.00"), stock_quantity=10)
        self.b = Product.objects.create(name="B", sku="B-1", price=Decimal("50.00"), stock_quantity=10)

    def _fill_cart(self):
        CartItem.objects.create(user=self.user, product=self.a, quantity=2)
        CartItem.objects.create(user=self.user, product=self.b, quantity=1)

    # =====================================================
    # HAPPY PATH
    # =====================================================

    def test_total_is_sum_of_live_prices(self):
        self._fill_cart()
        address = _address(self.user)

        handle = create_checkout_order(
            user=self.user, gateway=self.gateway, shipping_address_id=address.id
        )

        self.assertEqual(handle.amount, Decimal("250.00"))
        self.assertEqual(handle.currency, "INR")
        self.assertEqual(handle.payment_mode, "mock")
        self.assertTrue(handle.gateway_order_id.startswith("order_mock_"))

        order = Order.objects.get(id=handle.id)
        self.assertEqual(order.total_amount, Decimal("250.00"))
        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertEqual(order.shipping_address, address)
        self.assertEqual(order.shipping_mobile, "9876543210")
        self.assertEqual(order.shipping_pincode, "560001")
        self.assertIn("MG Road", order.shipping_address_text)
        self.assertIsNone(order.print_status)

    def test_price_change_before_checkout_is_used(self):
        self._fill_cart()
        Product.objects.filter(id=self.a.id).update(price=Decimal("120.00"))

        handle = create_checkout_order(
            user=self.user, gateway=self.gateway, shipping_address="12 MG Road, Bengaluru"
        )
        self.assertEqual(handle.amount, Decimal("290.00"))

    def test_no_items_or_stock_movement_before_payment(self):
        self._fill_cart()

        create_checkout_order(user=self.user, gateway=self.gateway, shipping_address="12 MG Road")

        self.assertEqual(OrderItem.objects.count(), 0)
        self.a.refresh_from_db()
        self.assertEqual(self.a.stock_quantity, 10)
        self.assertEqual(CartItem.objects.filter(user=self.user).count(), 2)

    def test_order_remembers_cart_it_was_priced_from(self):
        self._fill_cart()

        handle = create_checkout_order(
            user=self.user, gateway=self.gateway, shipping_address="12 MG Road"
        )

        order = Order.objects.get(id=handle.id)
        self.assertEqual(
            order.cart_fingerprint,
            cart_fingerprint(CartItem.objects.filter(user=self.user)),
        )
        self.assertEqual(len(order.cart_fingerprint), 64)

    def test_order_numbers_are_unique(self):
        self._fill_cart()

        numbers = {
            create_checkout_order(
                user=self.user, gateway=self.gateway, shipping_address="12 MG Road"
            ).order_number
            for _ in range(5)
        }
        self.assertEqual(len(numbers), 5)

    # =====================================================
    # REJECTIONS
    # =====================================================

    def test_empty_cart(self):
        with self.assertRaises(EmptyCartError):
            create_checkout_order(user=self.user, gateway=self.gateway, shipping_address="12 MG Road")
        self.assertEqual(Order.objects.count(), 0)

    def test_foreign_address(self):
        self._fill_cart()
        foreign = _address(self.other)

        with self.assertRaises(AddressNotFoundError):
            create_checkout_order(
                user=self.user, gateway=self.gateway, shipping_address_id=foreign.id
            )
        self.assertEqual(Order.objects.count(), 0)

    def test_address_with_invalid_mobile(self):
        self._fill_cart()
        address = _address(self.user, mobile_number="1234567890")

        with self.assertRaises(ValidationError):
            create_checkout_order(
                user=self.user, gateway=self.gateway, shipping_address_id=address.id
            )
        self.assertEqual(Order.objects.count(), 0)

    def test_zero_total(self):
        free = Product.objects.create(name="Free", sku="F-1", price=Decimal("0.00"), stock_quantity=5)
        CartItem.objects.create(user=self.user, product=free, quantity=1)

        with self.assertRaises(InvalidCartTotalError):
            create_checkout_order(user=self.user, gateway=self.gateway, shipping_address="12 MG Road")
        self.assertEqual(Order.objects.count(), 0)

    def test_gateway_failure_inserts_nothing(self):
        self._fill_cart()

        with patch.object(MockGateway, "create_order", side_effect=GatewayRequestError()):
            with self.assertRaises(GatewayRequestError):
                create_checkout_order(
                    user=self.user, gateway=self.gateway, shipping_address="12 MG Road"
                )
        self.assertEqual(Order.objects.count(), 0)

    def test_order_number_lost_at_insert_is_redrawn(self):
        self._fill_cart()
        Order.objects.create(
            order_number="ORD202601010000000001",
            gateway_order_id="order_mock_taken",
            total_amount=Decimal("10.00"),
            shipping_address_text="x",
        )

        # The first number passed the existence check, then another checkout
        # stored it before this insert ran.
        with patch(
            "checkout.services.order_creation.generate_order_number",
            side_effect=["ORD202601010000000001", "ORD202601010000000002"],
        ):
            handle = create_checkout_order(
                user=self.user, gateway=self.gateway, shipping_address="12 MG Road"
            )

        self.assertEqual(handle.order_number, "ORD202601010000000002")
        self.assertEqual(Order.objects.filter(user=self.user).count(), 1)

    def test_order_number_lost_on_every_insert(self):
        self._fill_cart()
        Order.objects.create(
            order_number="ORD202601010000000001",
            gateway_order_id="order_mock_taken",
            total_amount=Decimal("10.00"),
            shipping_address_text="x",
        )

        with patch(
            "checkout.services.order_creation.generate_order_number",
            return_value="ORD202601010000000001",
        ):
            with self.assertRaises(OrderNumberGenerationError):
                create_checkout_order(
                    user=self.user, gateway=self.gateway, shipping_address="12 MG Road"
                )
        self.assertFalse(Order.objects.filter(user=self.user).exists())

    def test_order_number_exhaustion(self):
        self._fill_cart()

        with patch(
            "checkout.services.order_creation.generate_order_number",
            side_effect=OrderNumberExhaustedError("taken"),
        ):
            with self.assertRaises(OrderNumberGenerationError):
                create_checkout_order(
                    user=self.user, gateway=self.gateway, shipping_address="12 MG Road"
                )
        self.assertEqual(Order.objects.count(), 0)


class FreeTextShippingTests(TestCase):
    """
    GUARANTEES:
    - Mobile / pincode are read only from exact standalone tokens
    - Free text can be switched off
    """

    def setUp(self):
        from checkout.services.shipping import resolve_shipping

        self.resolve = resolve_shipping
        self.user = User.objects.create_user(email="asha@example.com", password="x")

    def test_extracts_mobile_and_pincode(self):
        snapshot = self.resolve(
            user=self.user,
            shipping_address="Asha, 12 MG Road, Bengaluru 560001, ph 9876543210",
        )

        self.assertEqual(snapshot.mobile, "9876543210")
        self.assertEqual(snapshot.pincode, "560001")
        self.assertIsNone(snapshot.address)

    def test_embedded_digits_are_not_tokens(self):
        snapshot = self.resolve(
            user=self.user,
            shipping_address="Flat 98765432101, Block 5600012",
        )

        self.assertEqual(snapshot.mobile, "")
        self.assertEqual(snapshot.pincode, "")

    def test_mobile_is_not_read_as_pincode(self):
        snapshot = self.resolve(user=self.user, shipping_address="Call 9876543210")

        self.assertEqual(snapshot.mobile, "9876543210")
        self.assertEqual(snapshot.pincode, "")

    def test_blank_text_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.resolve(user=self.user, shipping_address="   ")

    @override_settings(CHECKOUT_ALLOW_FREE_TEXT_ADDRESS=False)
    def test_free_text_can_be_disabled(self):
        with self.assertRaises(ValidationError):
            self.resolve(user=self.user, shipping_address="12 MG Road")
