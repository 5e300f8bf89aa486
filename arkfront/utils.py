"""Numeric helpers used when formatting numbers."""

MAX_DECIMAL_PLACES = 15
_PRECISION = 1e-7


def dec_places(d: float) -> int:
    """Count the decimal places of ``d``, at least 1 and at most 15."""
    places = 0
    while True:
        d *= 10
        remainder = d - int(d)
        places += 1
        if not (remainder > _PRECISION and places < MAX_DECIMAL_PLACES):
            return places


def dig_places(d: float) -> int:
    """Count the digits in the integer part of ``d`` (0 for values below 1)."""
    value = abs(int(d))
    places = 0
    while value:
        places += 1
        value //= 10
    return places