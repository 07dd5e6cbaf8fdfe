# checkout/services/shipping.py

"""
SHIPPING RESOLUTION

Two inputs, one snapshot:

1) shipping_address_id (preferred)
   - must belong to the user, else AddressNotFoundError
   - its mobile (^[6-9]\\d{9}$) and pincode (^\\d{6}$) must be valid,
     else ValidationError (rows saved before validation existed can fail here)

2) free-text shipping_address (deprecated; CHECKOUT_ALLOW_FREE_TEXT_ADDRESS)
   - blank text -> ValidationError
   - mobile / pincode are picked up only from standalone tokens that match
     the exact patterns; they are optional on this path
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from django.conf import settings

from checkout.services.exceptions import AddressNotFoundError, ValidationError
from users.models import Address
from users.validators import is_valid_mobile, is_valid_pincode

logger = logging.getLogger(__name__)

MOBILE_TOKEN_RE = re.compile(r"(?<!\d)[6-9]\d{9}(?!\d)")
PINCODE_TOKEN_RE = re.compile(r"(?<!\d)\d{6}(?!\d)")


@dataclass(frozen=True)
class ShippingSnapshot:
    text: str
    mobile: str = ""
    pincode: str = ""
    address: Address | None = None


def _from_address(*, user, address_id) -> ShippingSnapshot:
    try:
        address = Address.objects.get(id=address_id, user=user)
    except (Address.DoesNotExist, ValueError, TypeError):
        raise AddressNotFoundError()

    mobile = (address.mobile_number or "").strip()
    pincode = (address.pincode or "").strip()

    if not is_valid_mobile(mobile):
        raise ValidationError("Invalid mobile number. Must be 10 digits starting with 6-9.")
    if not is_valid_pincode(pincode):
        raise ValidationError("Invalid pincode. Must be 6 digits.")

    return ShippingSnapshot(
        text=address.as_shipping_text(),
        mobile=mobile,
        pincode=pincode,
        address=address,
    )


def _from_free_text(text: str) -> ShippingSnapshot:
    if not getattr(settings, "CHECKOUT_ALLOW_FREE_TEXT_ADDRESS", True):
        raise ValidationError("Please select a saved shipping address.")

    text = (text or "").strip()
    if not text:
        raise ValidationError("Shipping address is required.")

    mobile_match = MOBILE_TOKEN_RE.search(text)
    # Drop the mobile first so its digits can't be read as a pincode.
    remainder = MOBILE_TOKEN_RE.sub(" ", text)
    pincode_match = PINCODE_TOKEN_RE.search(remainder)

    logger.info("Free-text shipping address used", extra={"has_mobile": bool(mobile_match)})

    return ShippingSnapshot(
        text=text,
        mobile=mobile_match.group(0) if mobile_match else "",
        pincode=pincode_match.group(0) if pincode_match else "",
    )


def resolve_shipping(*, user, shipping_address_id=None, shipping_address: str = "") -> ShippingSnapshot:
    if shipping_address_id not in (None, ""):
        return _from_address(user=user, address_id=shipping_address_id)
    return _from_free_text(shipping_address)
