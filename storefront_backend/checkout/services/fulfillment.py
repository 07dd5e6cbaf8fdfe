# checkout/services/fulfillment.py

"""
PAYMENT VERIFICATION & FULFILLMENT (verify-payment)

Purpose:
- Confirm payment for a pending Order and materialize it, exactly once.

Everything below happens in ONE transaction:
1) Lock the Order row by (gateway_order_id, user)        -> OrderNotFoundError
2) Verify the payment proof through the gateway          -> PaymentVerificationFailedError
3) Idempotency: order already past pending -> return the earlier result
4) Lock the user's cart rows; none                       -> EmptyCartError
   rows differ from the ones the order was priced from  -> CartChangedError
5) Per cart row: lock the product, require active + enough stock
   (InsufficientStockError), insert OrderItem at the CURRENT price, then
   decrement stock with a conditional UPDATE (stock_quantity >= qty)
6) Mark the order paid: processing + approved + print pending
7) Delete the cart rows
8) Notify every active admin/manager

After COMMIT (transaction.on_commit), best-effort:
- invoice print job (failures recorded on the order + PrintHistory)
- confirmation email

Any failure in 1-8 rolls everything back; the order stays pending and the
cart is untouched, so the client can retry verification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from cart.models import CartItem
from cart.services import cart_fingerprint, cart_lines
from checkout.services.exceptions import (
    CartChangedError,
    EmptyCartError,
    InsufficientStockError,
    OrderNotFoundError,
    PaymentVerificationFailedError,
)
from checkout.services.gateways import PaymentGateway
from notifications.services import notify_staff_new_order, send_order_confirmation_email
from orders.models import Order, OrderItem
from orders.services.order_lifecycle import validate_transition
from orders.services.printing import PrintJobError, print_order_invoice
from products.models import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FulfillmentResult:
    order_id: int
    order_number: str
    already_processed: bool = False


# =====================================================
# POST-COMMIT SIDE EFFECTS
# =====================================================

def dispatch_post_payment_side_effects(order_id: int) -> None:
    """
    Runs after the fulfillment transaction commits. Never raises.
    """
    if getattr(settings, "PRINTING_ENABLED", False):
        try:
            print_order_invoice(order_id=order_id)
        except PrintJobError:
            # Already recorded on the order + PrintHistory by the print job.
            logger.warning("Auto-print failed", extra={"order_id": order_id})
        except Exception:
            logger.exception("Auto-print crashed", extra={"order_id": order_id})

    try:
        order = Order.objects.select_related("user").prefetch_related("items").get(id=order_id)
        send_order_confirmation_email(order)
    except Exception:
        logger.exception("Order confirmation email failed", extra={"order_id": order_id})


# =====================================================
# FULFILLMENT
# =====================================================

def _lock_order(*, user, gateway_order_id: str) -> Order:
    try:
        return Order.objects.select_for_update().get(
            gateway_order_id=gateway_order_id,
            user=user,
        )
    except Order.DoesNotExist:
        raise OrderNotFoundError()


def _materialize_line(*, order: Order, line) -> OrderItem:
    product = Product.objects.select_for_update().get(id=line.product_id)
    quantity = int(line.quantity)

    if not product.is_active or int(product.stock_quantity) < quantity:
        raise InsufficientStockError(
            product_id=product.id,
            requested=quantity,
            available=int(product.stock_quantity),
        )

    item = OrderItem.objects.create(
        order=order,
        product=product,
        product_name=product.name,
        sku=product.sku,
        quantity=quantity,
        price_at_purchase=product.price,
    )

    updated = Product.objects.filter(
        id=product.id,
        stock_quantity__gte=quantity,
    ).update(stock_quantity=F("stock_quantity") - quantity)

    if updated != 1:
        raise InsufficientStockError(
            product_id=product.id,
            requested=quantity,
            available=int(product.stock_quantity),
        )

    return item


def verify_and_fulfill(
    *,
    user,
    gateway: PaymentGateway,
    gateway_order_id: str,
    payment_id: str = "",
    signature: str = "",
) -> FulfillmentResult:
    with transaction.atomic():
        order = _lock_order(user=user, gateway_order_id=gateway_order_id)

        if not gateway.verify_payment(
            gateway_order_id=gateway_order_id,
            payment_id=payment_id,
            signature=signature,
        ):
            logger.warning(
                "Payment signature mismatch",
                extra={"order_id": order.id, "gateway_order_id": gateway_order_id},
            )
            raise PaymentVerificationFailedError()

        if order.status != Order.STATUS_PENDING:
            logger.info(
                "Duplicate payment verification ignored",
                extra={"order_id": order.id, "status": order.status},
            )
            return FulfillmentResult(
                order_id=order.id,
                order_number=order.order_number,
                already_processed=True,
            )

        lines = list(cart_lines(user=user, lock=True))
        if not lines:
            raise EmptyCartError()

        if cart_fingerprint(lines) != order.cart_fingerprint:
            logger.warning(
                "Cart changed between create-order and payment",
                extra={
                    "order_id": order.id,
                    "gateway_order_id": gateway_order_id,
                    "gateway_payment_id": payment_id,
                },
            )
            raise CartChangedError()

        try:
            for line in lines:
                _materialize_line(order=order, line=line)
        except InsufficientStockError as exc:
            logger.error(
                "Paid order could not be fulfilled: insufficient stock",
                extra={
                    "order_id": order.id,
                    "product_id": str(exc.product_id),
                    "requested": exc.requested,
                    "available": exc.available,
                    "gateway_payment_id": payment_id,
                },
            )
            raise

        validate_transition(
            order=order,
            target_status=Order.STATUS_PROCESSING,
            via_payment=True,
        )

        now = timezone.now()
        order.gateway_payment_id = payment_id or gateway.synthesize_payment_id()
        order.gateway_signature = signature or ""
        order.status = Order.STATUS_PROCESSING
        order.approval_status = Order.APPROVAL_APPROVED
        order.approved_at = now
        order.paid_at = now
        order.print_status = Order.PRINT_PENDING
        order.save(
            update_fields=[
                "gateway_payment_id",
                "gateway_signature",
                "status",
                "approval_status",
                "approved_at",
                "paid_at",
                "print_status",
                "updated_at",
            ]
        )

        CartItem.objects.filter(user=user).delete()

        notify_staff_new_order(order)

        order_id = order.id
        transaction.on_commit(lambda: dispatch_post_payment_side_effects(order_id))

    logger.info(
        "Payment verified and order fulfilled",
        extra={
            "order_id": order.id,
            "order_number": order.order_number,
            "gateway_payment_id": order.gateway_payment_id,
            "items": len(lines),
        },
    )

    return FulfillmentResult(order_id=order.id, order_number=order.order_number)
