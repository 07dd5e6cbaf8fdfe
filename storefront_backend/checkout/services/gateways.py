# checkout/services/gateways.py

"""
PAYMENT GATEWAYS

One capability, two implementations, chosen once from PAYMENT_MODE:

- MockGateway ("mock"): no network; synthesizes order_mock_<hex> ids and
  accepts any verification. Demo / development only (prod settings refuse it
  unless ALLOW_MOCK_PAYMENTS is set).
- RazorpayGateway ("razorpay"): creates orders over the Razorpay REST API
  and verifies HMAC-SHA256(order_id|payment_id) signatures.

Services receive the gateway as an argument; views resolve it with
get_payment_gateway().
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache

from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver

from checkout.services.exceptions import GatewayConfigurationError
from checkout.services.razorpay import (
    razorpay_config,
    razorpay_create_order,
    verify_razorpay_signature,
)

logger = logging.getLogger(__name__)

MODE_MOCK = "mock"
MODE_RAZORPAY = "razorpay"


@dataclass(frozen=True)
class GatewayOrder:
    id: str
    amount: Decimal
    currency: str


class PaymentGateway:
    mode: str = ""
    # Whether verify-payment must carry payment id + signature.
    requires_payment_proof: bool = True

    def create_order(self, *, amount: Decimal, currency: str, receipt: str) -> GatewayOrder:
        raise NotImplementedError

    def verify_payment(self, *, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        raise NotImplementedError

    def synthesize_payment_id(self) -> str:
        return ""


class MockGateway(PaymentGateway):
    mode = MODE_MOCK
    requires_payment_proof = False

    def create_order(self, *, amount: Decimal, currency: str, receipt: str) -> GatewayOrder:
        return GatewayOrder(id=f"order_mock_{uuid.uuid4().hex}", amount=amount, currency=currency)

    def verify_payment(self, *, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        return True

    def synthesize_payment_id(self) -> str:
        return f"pay_mock_{uuid.uuid4().hex[:16]}"


class RazorpayGateway(PaymentGateway):
    mode = MODE_RAZORPAY
    requires_payment_proof = True

    def create_order(self, *, amount: Decimal, currency: str, receipt: str) -> GatewayOrder:
        payload = razorpay_create_order(amount=amount, currency=currency, receipt=receipt)
        return GatewayOrder(id=str(payload["id"]), amount=amount, currency=currency)

    def verify_payment(self, *, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        return verify_razorpay_signature(
            order_id=gateway_order_id,
            payment_id=payment_id,
            signature=signature,
        )


def build_gateway(mode: str) -> PaymentGateway:
    mode = (mode or MODE_MOCK).strip().lower()

    if mode == MODE_MOCK:
        return MockGateway()

    if mode == MODE_RAZORPAY:
        cfg = razorpay_config()
        if not (cfg.get("KEY_ID") or "").strip() or not (cfg.get("KEY_SECRET") or "").strip():
            raise GatewayConfigurationError(
                "PAYMENT_MODE=razorpay requires RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET."
            )
        return RazorpayGateway()

    raise GatewayConfigurationError(f"Unknown PAYMENT_MODE: {mode!r}")


@lru_cache(maxsize=1)
def get_payment_gateway() -> PaymentGateway:
    gateway = build_gateway(getattr(settings, "PAYMENT_MODE", MODE_MOCK))
    logger.info("Payment gateway selected", extra={"payment_mode": gateway.mode})
    return gateway


@receiver(setting_changed)
def _reset_gateway(*, setting, **kwargs):
    if setting in {"PAYMENT_MODE", "PAYMENTS"}:
        get_payment_gateway.cache_clear()
