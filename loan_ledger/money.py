"""Decimal helpers for the two-place, round-half-up currency convention."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from loan_ledger.exceptions import InvalidTermsError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def to_decimal(value: object, name: str = "value") -> Decimal:
    """Convert a number or numeric string to ``Decimal`` without float noise.

    Parameters
    ----------
    value : object
        Decimal, int, float or numeric string.
    name : str
        Field name used in the error message.

    Returns
    -------
    Decimal
        Exact decimal representation.

    Raises
    ------
    InvalidTermsError
        If the value is not numeric or not finite.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise InvalidTermsError(f"{name} must be numeric, got {value!r}")
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise InvalidTermsError(f"{name} must be numeric, got {value!r}") from exc
    else:
        raise InvalidTermsError(f"{name} must be numeric, got {value!r}")

    if not result.is_finite():
        raise InvalidTermsError(f"{name} must be finite, got {value!r}")
    return result


def to_money(value: object) -> Decimal:
    """Round a value to cents using round-half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round_rate(value: Decimal) -> Decimal:
    """Round a percentage or ratio to two places, half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Decimal]) -> Decimal:
    """Sum monetary values, returning ``0.00`` for an empty iterable."""
    return sum(values, ZERO)
