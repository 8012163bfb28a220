"""Currency conversion helpers."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from core.exceptions import ValidationError

CENT = Decimal("0.01")

# Largest amount Stripe accepts for a single charge, in cents.
MAX_CENTS = 99_999_999


def dollars_to_cents(amount: Decimal | float | int | str | None) -> int:
    """
    Convert a positive dollar amount to integer cents.

    Rounds half-up to the nearest cent, so 19.999 becomes 2000.

    Raises:
        ValidationError: If the amount is missing, not a number, not positive
            or above the largest chargeable amount.
    """
    if amount is None or amount == "":
        raise ValidationError("Valid amount is required")

    try:
        value = Decimal(str(amount))
        if not value.is_finite() or value <= 0:
            raise ValidationError("Valid amount is required")
        cents = int(value.quantize(CENT, rounding=ROUND_HALF_UP) * 100)
    except InvalidOperation:
        raise ValidationError("Valid amount is required") from None

    if cents <= 0:
        raise ValidationError("Valid amount is required")
    if cents > MAX_CENTS:
        raise ValidationError(
            f"Amount must not exceed ${Decimal(MAX_CENTS) / 100:.2f}"
        )
    return cents
