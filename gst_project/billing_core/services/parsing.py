from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError

ZERO = Decimal("0")


def _to_decimal(value):
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        # True/False are ints in Python, but never a quantity
        raise InvalidOperation(value)
    if isinstance(value, float):
        # str() keeps 0.1 as "0.1" instead of its binary expansion
        return Decimal(str(value))
    if isinstance(value, int):
        return Decimal(value)
    text = str(value).strip().replace(",", "")
    return Decimal(text)


def coerce_decimal(value):
    """
    Lenient conversion used by the amount calculator.

    Policy: blank, non-numeric, NaN and infinite input all count as 0.
    Negative numbers pass through unchanged; rejecting them is the job
    of form validation.
    """
    if value is None:
        return ZERO
    try:
        number = _to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not number.is_finite():
        return ZERO
    return number


def parse_non_negative_number(value, field=None):
    """
    Strict conversion for form input.

    Blank input is 0. Anything that is not a finite number >= 0 raises
    ValidationError, keyed by `field` when one is given.
    """
    def fail(message):
        if field:
            raise ValidationError({field: message})
        raise ValidationError(message)

    if value is None or (isinstance(value, str) and not value.strip()):
        return ZERO
    try:
        number = _to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        fail("Must be a number")
    if not number.is_finite():
        fail("Must be a finite number")
    if number < 0:
        fail("Cannot be negative")
    return number


def percent_of(base, percent):
    """base x percent / 100, with 0 for a zero or unusable base."""
    base = coerce_decimal(base)
    percent = coerce_decimal(percent)
    if not base or not percent:
        return ZERO
    return base * percent / Decimal("100")
