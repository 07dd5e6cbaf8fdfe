# orders/tests/test_printing.py

import subprocess
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.utils import timezone

from orders.models import Order, OrderItem, PrinterSetting, PrintHistory
from orders.services.invoice import render_invoice_text
from orders.services.printing import (
    PrintJobError,
    build_print_command,
    get_default_printer,
    print_order_invoice,
)
from users.models import ROLE_MANAGER

User = get_user_model()


def _paid_order(user=None):
    order = Order.objects.create(
        order_number="ORD202601010930000042",
        user=user,
        gateway_order_id="order_mock_print",
        gateway_payment_id="pay_mock_abc",
        total_amount=Decimal("250.00"),
        status=Order.STATUS_PROCESSING,
        shipping_address_text="Asha Rao\n12B, MG Road\nBengaluru, Karnataka - 560001",
        shipping_mobile="9876543210",
        shipping_pincode="560001",
        paid_at=timezone.now(),
    )
    OrderItem.objects.create(
        order=order,
        product_name="Bath Towel",
        sku="TWL-1",
        quantity=2,
        price_at_purchase=Decimal("125.00"),
    )
    return order


@override_settings(
    STORE_NAME="Demo Store",
    STORE_ADDRESS="1 Market Street|Bengaluru 560001",
    STORE_PHONE="080-1234567",
)
class InvoiceTextTests(TestCase):
    def test_invoice_contains_header_items_and_total(self):
        text = render_invoice_text(_paid_order())

        self.assertIn("Demo Store", text)
        self.assertIn("1 Market Street", text)
        self.assertIn("Phone: 080-1234567", text)
        self.assertIn("Order Number: ORD202601010930000042", text)
        self.assertIn("Payment ID: pay_mock_abc", text)
        self.assertIn("Bengaluru, Karnataka - 560001", text)
        self.assertIn("Mobile: 9876543210", text)
        self.assertIn("Bath Towel", text)
        self.assertIn("250.00", text)
        self.assertIn("Thank you for your business!", text)

    def test_lines_fit_printer_width(self):
        text = render_invoice_text(_paid_order())
        self.assertTrue(all(len(line) <= 64 for line in text.splitlines()))


class PrintJobTests(TestCase):
    """
    Invoice print job.

    GUARANTEES:
    - No default printer -> print_status pending, nothing sent
    - Success -> completed + printed_at + history row
    - Failure -> failed + error + history row, error re-raised
    - Only printers owned by active staff are used
    """

    def setUp(self):
        self.manager = User.objects.create_user(
            email="manager@example.com", password="x", role=ROLE_MANAGER
        )
        self.order = _paid_order()

    def _printer(self, **overrides):
        data = {
            "user": self.manager,
            "printer_name": "counter",
            "is_default": True,
        }
        data.update(overrides)
        return PrinterSetting.objects.create(**data)

    # =====================================================
    # PRINTER RESOLUTION
    # =====================================================

    def test_customer_printers_are_ignored(self):
        customer = User.objects.create_user(email="c@example.com", password="x")
        self._printer(user=customer)

        self.assertIsNone(get_default_printer())

    def test_network_printer_command(self):
        printer = self._printer(
            connection_type=PrinterSetting.CONNECTION_NETWORK,
            printer_address="10.0.0.5:631",
        )

        with self.settings(PRINT_COMMAND="lp"):
            self.assertEqual(
                build_print_command(printer),
                ["lp", "-h", "10.0.0.5:631", "-d", "counter", "-t", "invoice"],
            )

    # =====================================================
    # PRINT OUTCOMES
    # =====================================================

    @patch("orders.services.printing.subprocess.run")
    def test_no_printer_leaves_pending(self, run):
        result = print_order_invoice(order_id=self.order.id)

        self.assertEqual(result, Order.PRINT_PENDING)
        run.assert_not_called()
        self.order.refresh_from_db()
        self.assertEqual(self.order.print_status, Order.PRINT_PENDING)

    @patch("orders.services.printing.subprocess.run")
    def test_successful_print(self, run):
        self._printer()

        result = print_order_invoice(order_id=self.order.id)

        self.assertEqual(result, Order.PRINT_COMPLETED)
        document = run.call_args.kwargs["input"].decode("utf-8")
        self.assertIn("ORD202601010930000042", document)

        self.order.refresh_from_db()
        self.assertEqual(self.order.print_status, Order.PRINT_COMPLETED)
        self.assertIsNotNone(self.order.printed_at)
        history = PrintHistory.objects.get(order=self.order)
        self.assertEqual(history.status, PrintHistory.STATUS_COMPLETED)
        self.assertEqual(history.printer_name, "counter")

    @patch("orders.services.printing.subprocess.run")
    def test_failed_print_records_error(self, run):
        self._printer()
        run.side_effect = subprocess.CalledProcessError(
            1, ["lp"], stderr=b"lp: printer offline"
        )

        with self.assertRaisesMessage(PrintJobError, "printer offline"):
            print_order_invoice(order_id=self.order.id)

        self.order.refresh_from_db()
        self.assertEqual(self.order.print_status, Order.PRINT_FAILED)
        self.assertIn("printer offline", self.order.print_error)
        history = PrintHistory.objects.get(order=self.order)
        self.assertEqual(history.status, PrintHistory.STATUS_FAILED)

    @patch("orders.services.printing.subprocess.run", side_effect=FileNotFoundError("lp"))
    def test_missing_print_command_is_a_print_error(self, run):
        self._printer()

        with self.assertRaises(PrintJobError):
            print_order_invoice(order_id=self.order.id)
