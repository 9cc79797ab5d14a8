from decimal import Decimal
from decimal import InvalidOperation
from typing import Union

from .errors import InvalidAmount

Amount = Union[Decimal, int, float, str]

# Amounts stay below 10**MAX_DIGITS with at most MAX_DECIMAL_PLACES decimal
# places, so balance arithmetic is exact within the default 28 digit context.
MAX_DIGITS = 12
MAX_DECIMAL_PLACES = 12


def to_amount(value: Amount) -> Decimal:
    """Convert value into a positive Decimal amount.

    Integers, floats, strings and Decimals are accepted. Floats are converted
    through their shortest string representation so that `0.1` becomes
    `Decimal("0.1")`. Booleans are rejected although they are integers.

    Raises InvalidAmount if the value is not a positive finite number, is
    10**MAX_DIGITS or more, or has more than MAX_DECIMAL_PLACES decimal places.
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"Expecting amount but got {value!r}.")

    if isinstance(value, float):
        value = repr(value)

    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(f"Expecting amount but got {value!r}.") from None

    if not amount.is_finite():
        raise InvalidAmount(f"Amount must be finite, got {amount}.")

    if amount <= 0:
        raise InvalidAmount(f"Amount must be positive, got {amount}.")

    if amount.adjusted() >= MAX_DIGITS:
        raise InvalidAmount(f"Amount is too large, got {amount}.")

    if amount != amount.quantize(Decimal(1).scaleb(-MAX_DECIMAL_PLACES)):
        raise InvalidAmount(
            f"Amount has more than {MAX_DECIMAL_PLACES} decimal places, got {amount}."
        )

    return amount
