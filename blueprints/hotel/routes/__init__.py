"""
Hotel API routes package.
Split into modules by entity; each exposes register_routes(bp).
"""

from flask import request

from models.errors import InvalidDateRangeError, ValidationError
from utils.datetime_helpers import parse_date
from utils.messages import get_message


def get_json_body() -> dict:
    """Return the JSON object sent with the request."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(get_message('json_required'))
    return data


def get_date_arg(name: str):
    """Read an optional YYYY-MM-DD query parameter."""
    try:
        return parse_date(request.args.get(name))
    except ValueError as e:
        raise InvalidDateRangeError(get_message('invalid_date', field=name)) from e
