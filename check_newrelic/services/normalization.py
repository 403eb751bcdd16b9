from __future__ import annotations

from decimal import Decimal, DecimalException
from enum import Enum

from check_newrelic.core.exceptions import ValidationError


class DataType(str, Enum):
    FLOAT = "float"  # percentages, rates: compared in thousandths
    INT = "int"      # counts and durations


FLOAT_SCALE = 1000

# Largest accepted power of ten; keeps scaled values within 64 bits
MAX_EXPONENT = 15


def _parse(raw: str, what: str) -> Decimal:
    text = str(raw).strip()
    try:
        number = Decimal(text)
    except DecimalException as exc:
        raise ValidationError(f"Non-numeric value {raw!r} for {what}") from exc
    if not number.is_finite():
        raise ValidationError(f"Non-numeric value {raw!r} for {what}")
    if number and number.adjusted() > MAX_EXPONENT:
        raise ValidationError(f"Value {raw!r} out of range for {what}")
    return number


def normalize(raw: str, data_type: DataType, what: str = "value") -> int:
    """Return the integer form of ``raw`` used for threshold comparison.

    FLOAT values are scaled to thousandths, INT values keep their units. Both
    truncate toward zero. Decimal arithmetic keeps ``"12.345"`` at exactly
    12345 instead of drifting through binary floating point.

    ``what`` names the input in the error raised for unparseable or
    out-of-range text.
    """
    number = _parse(raw, what)
    try:
        if data_type is DataType.FLOAT:
            return int(number * FLOAT_SCALE)
        return int(number)
    except DecimalException as exc:
        raise ValidationError(f"Value {raw!r} out of range for {what}") from exc
