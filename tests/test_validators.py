"""
Tests for input validation utilities.
"""

import pytest
from datetime import date, datetime

from utils.datetime_helpers import parse_date
from utils.validators import (
    validate_email,
    validate_room_number,
    validate_price,
    validate_password,
    sanitize_input
)


class TestValidateEmail:
    """Tests for email validation."""

    def test_valid_email(self):
        """Test valid email formats."""
        assert validate_email('user@example.com') is True
        assert validate_email('user.name@example.com') is True
        assert validate_email('user+tag@example.co.uk') is True

    def test_invalid_email(self):
        """Test invalid email formats."""
        assert validate_email('') is False
        assert validate_email(None) is False
        assert validate_email('invalid') is False
        assert validate_email('missing@domain') is False
        assert validate_email('@nodomain.com') is False
        assert validate_email('spaces in@email.com') is False


class TestValidateRoomNumber:
    """Tests for room number validation."""

    def test_valid_numbers(self):
        assert validate_room_number(101) is True
        assert validate_room_number('305') is True
        assert validate_room_number(' 12 ') is True

    def test_invalid_numbers(self):
        assert validate_room_number(0) is False
        assert validate_room_number(-3) is False
        assert validate_room_number('012') is False
        assert validate_room_number('1a') is False
        assert validate_room_number('') is False
        assert validate_room_number(None) is False
        assert validate_room_number(True) is False


class TestValidatePrice:
    """Tests for nightly price validation."""

    def test_valid_prices(self):
        assert validate_price(80) is True
        assert validate_price(0.5) is True
        assert validate_price('120.50') is True

    def test_invalid_prices(self):
        assert validate_price(0) is False
        assert validate_price(-10) is False
        assert validate_price('abc') is False
        assert validate_price(None) is False
        assert validate_price(True) is False

    def test_non_finite_prices(self):
        assert validate_price('inf') is False
        assert validate_price(float('inf')) is False
        assert validate_price('1e400') is False
        assert validate_price('nan') is False
        assert validate_price(10 ** 400) is False


class TestValidatePassword:
    """Tests for password validation."""

    def test_valid_password(self):
        assert validate_password('secret1') == (True, '')

    def test_short_password(self):
        valid, message = validate_password('abc')
        assert valid is False
        assert '6' in message

    def test_empty_password(self):
        assert validate_password('')[0] is False


class TestSanitizeInput:
    """Tests for input sanitization."""

    def test_strips_and_truncates(self):
        assert sanitize_input('  suite  ') == 'suite'
        assert sanitize_input('abcdef', max_length=3) == 'abc'
        assert sanitize_input(None) == ''


class TestParseDate:
    """Tests for date coercion."""

    def test_accepted_inputs(self):
        assert parse_date('2025-06-01') == date(2025, 6, 1)
        assert parse_date(date(2025, 6, 1)) == date(2025, 6, 1)
        assert parse_date(datetime(2025, 6, 1, 14, 30)) == date(2025, 6, 1)
        assert parse_date(None) is None
        assert parse_date('') is None

    @pytest.mark.parametrize('value', ['01/06/2025', '2025-13-01', '2025-02-30', 'tomorrow'])
    def test_rejected_inputs(self, value):
        with pytest.raises(ValueError):
            parse_date(value)
