"""
Input validation helper functions.
Provides validation for common input types.
"""

import math
import re


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_room_number(room) -> bool:
    """
    Validate a hotel room number: a positive integer (or its string form).

    Args:
        room: Room number to validate

    Returns:
        True if valid room number
    """
    if isinstance(room, bool) or room is None:
        return False
    if isinstance(room, int):
        return room > 0
    return bool(re.match(r'^[1-9][0-9]{0,5}$', str(room).strip()))


def validate_price(price) -> bool:
    """
    Validate a nightly price: a finite number strictly greater than zero.

    Args:
        price: Price to validate (number or numeric string)

    Returns:
        True if valid price
    """
    if isinstance(price, bool) or price is None:
        return False
    try:
        value = float(price)
    except (TypeError, ValueError, OverflowError):
        return False
    return math.isfinite(value) and value > 0


def validate_password(password: str, min_length: int = 6) -> tuple:
    """
    Validate password strength.

    Args:
        password: Password to validate
        min_length: Minimum password length

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not password:
        return False, 'Password is required'

    if len(password) < min_length:
        return False, f'Password must be at least {min_length} characters long'

    return True, ''


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    sanitized = str(text).strip()

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
