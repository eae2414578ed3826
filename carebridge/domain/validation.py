# SPDX-License-Identifier: Apache-2.0

"""
Form field validation shared by the auth, profile, donation and need screens.

Each validator returns an error message, or None when the value is acceptable.
"""

import re
from typing import Optional

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
AMOUNT_PATTERN = re.compile(r'^\d*\.?\d*$')
QUANTITY_PATTERN = re.compile(r'^\d+$')

MIN_PASSWORD_LENGTH = 6
MIN_PHONE_LENGTH = 10


def validate_email(email: str) -> Optional[str]:
    if not email.strip():
        return "Email is required"
    if not EMAIL_PATTERN.match(email.strip()):
        return "Invalid email format"
    return None


def validate_password(password: str) -> Optional[str]:
    if not password.strip():
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


def validate_password_confirmation(password: str, confirmation: str) -> Optional[str]:
    if confirmation != password:
        return "Passwords do not match"
    return None


def validate_required(value: str, label: str) -> Optional[str]:
    if not value.strip():
        return f"{label} is required"
    return None


def validate_phone(phone: str) -> Optional[str]:
    """Phone numbers are optional, but must be long enough when given."""
    if phone.strip() and len(phone.strip()) < MIN_PHONE_LENGTH:
        return "Invalid phone number"
    return None


def parse_amount(text: str) -> Optional[float]:
    """Parse a positive amount, or None."""
    try:
        amount = float(text)
    except ValueError:
        return None
    return amount if amount > 0 else None


def parse_quantity(text: str) -> Optional[int]:
    """Parse a positive whole quantity, or None."""
    if not QUANTITY_PATTERN.match(text):
        return None
    quantity = int(text)
    return quantity if quantity > 0 else None


def is_amount_input(text: str) -> bool:
    """Whether a partially typed amount may be accepted by the form."""
    return text == "" or bool(AMOUNT_PATTERN.match(text))


def is_quantity_input(text: str) -> bool:
    """Whether a partially typed quantity may be accepted by the form."""
    return text == "" or bool(QUANTITY_PATTERN.match(text))
