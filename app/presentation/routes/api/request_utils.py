from flask import request

from app.buisness.core.exceptions import ValidationError
from app.utils.date_parsing import parse_bool


def json_body() -> dict:
    """The request's JSON object body"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def int_arg(name: str, default=None):
    value = request.args.get(name)
    if value in (None, ''):
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Query parameter '{name}' must be an integer")


def bool_arg(name: str, default: bool = False) -> bool:
    try:
        return parse_bool(request.args.get(name), default=default)
    except ValueError:
        raise ValidationError(f"Query parameter '{name}' must be true or false")


def int_value(value, field: str):
    """Required integer from a JSON body field"""
    if value in (None, ''):
        raise ValidationError(f"{field} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")


def optional_text(value):
    return None if value in (None, '') else str(value)
