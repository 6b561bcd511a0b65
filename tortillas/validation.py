"""
Request body helpers.

Malformed input is turned into ``ValidationError`` (400) right here so
views can stay linear.
"""

from flask import request

from tortillas.errors import ValidationError

_MISSING = object()

# Range of a 32-bit INTEGER column
MIN_DB_INTEGER = -2**31
MAX_DB_INTEGER = 2**31 - 1


def json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')
    return data


def required_str(data, key, label=None, max_length=None):
    value = data.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{label or key} is required.')
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f'{label or key} must be at most {max_length} characters.')
    return value


def optional_str(data, key, default=None):
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError(f'{key} must be a string.')
    return value.strip() or None


def optional_int(data, key, default=None, minimum=MIN_DB_INTEGER, maximum=MAX_DB_INTEGER):
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None or value == '':
        return default
    if isinstance(value, bool):
        raise ValidationError(f'{key} must be an integer.')
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f'{key} must be an integer.')
    if minimum is not None and number < minimum:
        raise ValidationError(f'{key} must be at least {minimum}.')
    if maximum is not None and number > maximum:
        raise ValidationError(f'{key} must be at most {maximum}.')
    return number


def required_int(data, key, minimum=MIN_DB_INTEGER, maximum=MAX_DB_INTEGER):
    number = optional_int(data, key, minimum=minimum, maximum=maximum)
    if number is None:
        raise ValidationError(f'{key} is required.')
    return number


def optional_bool(data, key, default=None):
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in {'true', '1', 'yes', 'on'}:
        return True
    if isinstance(value, str) and value.lower() in {'false', '0', 'no', 'off'}:
        return False
    raise ValidationError(f'{key} must be a boolean.')
