# users/validators.py

"""
Contact field rules shared by the address book and checkout.

- mobile: 10 digits starting with 6-9
- pincode: exactly 6 digits
"""

from __future__ import annotations

import re

from django.core.validators import RegexValidator

MOBILE_PATTERN = r"^[6-9]\d{9}$"
PINCODE_PATTERN = r"^\d{6}$"

MOBILE_RE = re.compile(MOBILE_PATTERN)
PINCODE_RE = re.compile(PINCODE_PATTERN)

validate_mobile_number = RegexValidator(
    regex=MOBILE_PATTERN,
    message="Invalid mobile number. Must be 10 digits starting with 6-9.",
    code="invalid_mobile",
)

validate_pincode = RegexValidator(
    regex=PINCODE_PATTERN,
    message="Invalid pincode. Must be 6 digits.",
    code="invalid_pincode",
)


def is_valid_mobile(value) -> bool:
    return bool(MOBILE_RE.match(str(value or "").strip()))


def is_valid_pincode(value) -> bool:
    return bool(PINCODE_RE.match(str(value or "").strip()))
