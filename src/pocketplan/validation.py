"""Input validation for calculator fields.

The calculation services assume validated, non-negative numeric inputs.
Everything coming from a form, a CLI flag or stored JSON passes through
these helpers first.
"""

from __future__ import annotations

import math
from typing import Any


class InvalidInputError(ValueError):
    """Raised when a field cannot be accepted by the calculators."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field}: {reason} (got {value!r})")


def _to_float(field: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(field, value, "expected a number")
    if isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            return 0.0
        value = text
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(field, value, "expected a number") from exc
    if math.isnan(number) or math.isinf(number):
        raise InvalidInputError(field, value, "expected a finite number")
    return number


def parse_amount(value: Any, *, field: str = "amount") -> float:
    """Return a non-negative currency amount.

    Empty strings read as zero, matching how blank form fields behave.
    """

    number = _to_float(field, value)
    if number < 0:
        raise InvalidInputError(field, value, "must not be negative")
    return number


def parse_rate(value: Any, *, field: str = "interest_rate") -> float:
    """Return an annual interest rate percentage (>= 0)."""

    return parse_amount(value, field=field)


def parse_positive_int(value: Any, *, field: str) -> int:
    number = _to_float(field, value)
    if number <= 0 or number != int(number):
        raise InvalidInputError(field, value, "must be a positive whole number")
    return int(number)


def parse_payment_day(value: Any, *, field: str = "payment_day") -> int | None:
    """Return a calendar day 1..31, or None for blank input."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    day = parse_positive_int(value, field=field)
    if day > 31:
        raise InvalidInputError(field, value, "must be between 1 and 31")
    return day


__all__ = [
    "InvalidInputError",
    "parse_amount",
    "parse_rate",
    "parse_positive_int",
    "parse_payment_day",
]
