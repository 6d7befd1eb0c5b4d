"""Money amount validation shared by the account and ledger services."""

from decimal import Decimal, InvalidOperation

from fintrack.domain.errors import ValidationError

CENT = Decimal("0.01")
# Largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


def parse_money(value, allow_negative: bool = False) -> Decimal:
    """Return ``value`` as a two-place Decimal or raise ValidationError.

    Accepts Decimal, int, float and numeric strings. The magnitude must fit
    a ``Numeric(12, 2)`` column and carry at most two decimal places.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid amount '{value}'")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid amount '{value}'")
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount '{value}'")
    if amount < 0 and not allow_negative:
        raise ValidationError("Amount must not be negative")
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"Amount must not exceed {MAX_AMOUNT}")
    if amount != amount.quantize(CENT):
        raise ValidationError("Amount must have at most two decimal places")
    return amount.quantize(CENT)
