# checkout/services/razorpay.py
from __future__ import annotations

import base64
import hashlib
import hmac
import json
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings

from checkout.services.exceptions import GatewayConfigurationError, GatewayRequestError

RAZORPAY_BASE = "https://api.razorpay.com/v1"


def razorpay_config() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    cfg = (payments.get("RAZORPAY") or {}) if isinstance(payments, dict) else {}
    return cfg if isinstance(cfg, dict) else {}


def _credentials() -> tuple[str, str]:
    cfg = razorpay_config()
    key_id = (cfg.get("KEY_ID") or "").strip()
    key_secret = (cfg.get("KEY_SECRET") or "").strip()

    if not key_id or not key_secret:
        raise GatewayConfigurationError(
            "Razorpay is not configured. Set RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET."
        )
    return key_id, key_secret


def to_paise(amount: Decimal) -> int:
    try:
        rupees = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError("amount must be a valid Decimal") from exc
    paise = (rupees * Decimal("100")).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(paise)


def _safe_preview(text: str, limit: int = 800) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _error_description(raw: str) -> str:
    try:
        parsed = json.loads(raw or "")
    except ValueError:
        return _safe_preview(raw)
    if isinstance(parsed, dict):
        error = parsed.get("error") or {}
        if isinstance(error, dict) and error.get("description"):
            return str(error["description"])
    return _safe_preview(raw)


def _request_json(method: str, path: str, *, body: dict | None = None) -> dict[str, Any]:
    key_id, key_secret = _credentials()
    cfg = razorpay_config()
    base = (cfg.get("API_BASE") or RAZORPAY_BASE).rstrip("/")
    timeout = int(cfg.get("TIMEOUT") or 25)

    data = None
    if body is not None:
        data = json.dumps(body, ensure_ascii=False).encode("utf-8")

    token = base64.b64encode(f"{key_id}:{key_secret}".encode("utf-8")).decode("ascii")
    req = Request(
        f"{base}{path}",
        data=data,
        headers={
            "Authorization": f"Basic {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        },
        method=method,
    )

    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        try:
            raw = e.read().decode("utf-8", errors="replace")
        except OSError:
            raw = ""
        raise GatewayRequestError(
            f"Razorpay HTTPError: {e.code} {_error_description(raw)}"
        ) from e
    except URLError as e:
        raise GatewayRequestError(f"Razorpay URLError: {e.reason}") from e
    except (TimeoutError, OSError) as e:
        raise GatewayRequestError(f"Razorpay request failed: {e}") from e

    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise GatewayRequestError(f"Razorpay returned non-JSON: {_safe_preview(raw)}") from e

    if not isinstance(parsed, dict):
        raise GatewayRequestError("Razorpay returned an unexpected payload")
    return parsed


def razorpay_create_order(*, amount: Decimal, currency: str, receipt: str, notes: dict | None = None) -> dict:
    payload: dict = {
        "amount": to_paise(amount),
        "currency": str(currency).strip().upper(),
        "receipt": str(receipt).strip()[:40],
    }
    if notes:
        payload["notes"] = notes

    parsed = _request_json("POST", "/orders", body=payload)

    if not parsed.get("id"):
        raise GatewayRequestError("Razorpay order response has no id")
    return parsed


def razorpay_signature(*, order_id: str, payment_id: str) -> str:
    _, key_secret = _credentials()
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(key_secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_razorpay_signature(*, order_id: str, payment_id: str, signature: str | None) -> bool:
    if not signature or not payment_id:
        return False
    expected = razorpay_signature(order_id=order_id, payment_id=payment_id)
    return hmac.compare_digest(expected, str(signature).strip())
