"""Shared checks for money amounts entering the store."""

from decimal import Decimal, InvalidOperation

from servicebook.domain.constants import AMOUNT_PLACES
from servicebook.domain.errors import (
    ValidationError,
    non_positive_amount,
    too_many_decimal_places,
)


def checked_amount(amount, places: int = AMOUNT_PLACES) -> Decimal:
    """Return amount as a Decimal that can be stored without rounding.

    Raises:
        ValidationError: If amount is not a finite number, has more decimal
            places than the store keeps, or is not greater than zero
    """
    try:
        amount = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid amount {amount!r}") from e
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount {amount}")
    if amount.normalize().as_tuple().exponent < -places:
        raise ValidationError(too_many_decimal_places(amount, places))
    if amount <= 0:
        raise ValidationError(non_positive_amount(amount))
    return amount
