from werkzeug.routing import IntegerConverter

# widest value a signed 64-bit INTEGER column holds (SQLite, BIGINT)
MAX_DB_INT = 2**63 - 1


class IdConverter(IntegerConverter):
    """``<id:...>`` route segment: a positive integer the store can hold."""

    def __init__(self, map, *args, **kwargs):
        kwargs.setdefault("min", 1)
        kwargs.setdefault("max", MAX_DB_INT)
        super().__init__(map, *args, **kwargs)


def parse_id(value, field: str) -> int:
    """Positive integer id from a JSON body value; raises ValueError otherwise."""
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a positive integer")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if not isinstance(value, int) or not 1 <= value <= MAX_DB_INT:
        raise ValueError(f"{field} must be a positive integer")
    return value


def int_field(data: dict, key: str, default=None):
    value = data.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer")
    try:
        value = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"{key} must be an integer")
    if not -MAX_DB_INT <= value <= MAX_DB_INT:
        raise ValueError(f"{key} is out of range")
    return value


def text_field(data: dict, key: str):
    """Stripped string, or None when missing/blank. Non-strings raise ValueError."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value.strip() or None
