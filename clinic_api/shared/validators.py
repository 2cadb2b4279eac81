"""Shared validation utilities"""

import re
from typing import Optional

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase, stripped email address

    Raises:
        ValueError: If email format is invalid
    """
    if email is None:
        return None

    email = email.strip().lower()

    if not re.match(EMAIL_PATTERN, email):
        raise ValueError("Invalid email format")

    return email


def validate_ph_mobile(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a Philippine mobile number to E.164 format.

    Accepts 09XXXXXXXXX, 9XXXXXXXXX, 639XXXXXXXXX and +63 9XX XXX XXXX.

    Returns:
        Normalized number (+639XXXXXXXXX)

    Raises:
        ValueError: If the number is not a PH mobile number
    """
    if not phone:
        return None

    digits = re.sub(r"\D", "", phone)

    if digits.startswith("63") and len(digits) == 12:
        digits = digits[2:]
    elif digits.startswith("0") and len(digits) == 11:
        digits = digits[1:]

    if len(digits) != 10 or not digits.startswith("9"):
        raise ValueError("Contact number must be a Philippine mobile number (e.g. 09123456789)")

    return f"+63{digits}"
