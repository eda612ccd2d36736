"""
Shared model helpers.

Every monetary figure in the core passes through ``round_money`` when it
crosses a model boundary, so no unrounded value is ever accumulated
across calls.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Union

from pydantic import AfterValidator

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def round_money(value: Union[Decimal, int, float, str, None]) -> Decimal:
    """Round a value to 2 fraction digits (half-up)."""
    if value is None or value == "":
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# Decimal that is always stored with 2 fraction digits
Money = Annotated[Decimal, AfterValidator(round_money)]
