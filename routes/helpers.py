# routes/helpers.py
# Request parsing shared by the API blueprints

import re

from flask import request
from errors import ValidationError

# SQLite INTEGER is a signed 64-bit value
MAX_ID = 2 ** 63 - 1

_DIGITS = re.compile(r'[0-9]+')
_SIGNED_DIGITS = re.compile(r'-?[0-9]+')


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def parse_id(raw, what='id'):
    """Accept a positive integer id, given as an int or a string of ASCII digits."""
    if isinstance(raw, bool):
        raise ValidationError(f'Invalid {what}')
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _DIGITS.fullmatch(raw.strip()):
        value = int(raw)
    else:
        raise ValidationError(f'Invalid {what}')
    if value <= 0 or value > MAX_ID:
        raise ValidationError(f'Invalid {what}')
    return value


def optional_id(data, field):
    value = data.get(field)
    if value is None or value == '':
        return None
    return parse_id(value, field)


def required_text(data, field):
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field} is required')
    return value.strip()


def optional_text(data, field):
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be a string')
    return value


def required_int(data, field):
    value = data.get(field)
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer')
    if isinstance(value, str) and _SIGNED_DIGITS.fullmatch(value.strip()):
        value = int(value)
    if not isinstance(value, int) or not -MAX_ID <= value <= MAX_ID:
        raise ValidationError(f'{field} must be an integer')
    return value
