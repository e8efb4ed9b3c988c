"""
Amounts -- lenient numeric parsing, percentages and night counts.

Responsibility:
    The single auditable home of the "lenient-zero" policy: prices,
    percentages and quantities typed by sales staff arrive as free text,
    and anything that does not parse as a finite number is zero.  Also
    computes hotel nights from check-in/check-out values.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.  Used by line items,
    pricing and validation.

Invariants enforced:
    LENIENT_PARSING -- parse_*_or_zero never raise; blank, garbage, NaN
    and infinite input all yield Decimal("0").

Failure modes:
    None.  Every function in this module is total.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _to_decimal_or_zero(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO
    if not result.is_finite():
        return ZERO
    return result


def parse_amount_or_zero(value: Any) -> Decimal:
    """Parse a price/rate field. Unparsable input is zero."""
    return _to_decimal_or_zero(value)


def parse_percent_or_zero(value: Any) -> Decimal:
    """Parse a percentage field such as "15" or "7.5". Unparsable input is zero."""
    return _to_decimal_or_zero(value)


def parse_quantity_or_zero(value: Any) -> Decimal:
    """Parse a count field (rooms, days, pax). Unparsable input is zero."""
    return _to_decimal_or_zero(value)


def apply_percent(amount: Any, percent: Any) -> Any:
    """
    Return ``amount * percent / 100``.

    ``amount`` may be a Decimal or a Money; ``percent`` is read with
    parse_percent_or_zero, so "abc" yields a zero amount.
    """
    return amount * parse_percent_or_zero(percent) / HUNDRED


def parse_date_or_none(value: Any) -> date | None:
    """
    Normalize a date-ish value to a calendar date.

    Accepts ``date``, ``datetime`` (time-of-day dropped) and ISO strings
    ("2024-03-15" or "2024-03-15T10:30:00").  Anything else is None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


def nights_between(checkin: Any, checkout: Any) -> int:
    """
    Number of nights between check-in and check-out.

    Both values are normalized to calendar dates before subtracting, so a
    daylight-saving shift or a late check-in time never loses or adds a
    night.  Returns 0 when either value is missing or unparsable, or when
    checkout is not after checkin.
    """
    start = parse_date_or_none(checkin)
    end = parse_date_or_none(checkout)
    if start is None or end is None or end <= start:
        return 0
    return (end - start).days
