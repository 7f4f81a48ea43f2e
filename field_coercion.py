import math

import numpy as np

NUMERIC_FIELDS = frozenset({"age"})


def is_number(value) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def is_finite_number(value) -> bool:
    return is_number(value) and bool(np.isfinite(value))


def parse_number(text):
    """Parse numeric text into an int (when integral) or a float.

    Raises ValueError for anything that is not a finite number.
    """
    stripped = str(text).strip()
    if stripped == "":
        raise ValueError("empty numeric value")
    try:
        return int(stripped)
    except ValueError:
        pass
    number = float(stripped)
    if not math.isfinite(number):
        raise ValueError(f"Cannot coerce '{text}' to a finite number")
    if number.is_integer():
        return int(number)
    return number


def coerce_field_value(key, value):
    """Coerce an edited value for storage in the edit buffer.

    Non-numeric fields are stored as given. For numeric fields an empty
    input becomes the "" sentinel and unparseable text is kept verbatim,
    so validation at commit time can reject it.
    """
    if key not in NUMERIC_FIELDS:
        return value
    if value is None:
        return ""
    if is_number(value):
        return value
    text = str(value)
    if text.strip() == "":
        return ""
    try:
        return parse_number(text)
    except ValueError:
        return text


def display_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value)
