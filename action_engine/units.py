"""Fixed-point conversion between decimal amount strings and token units."""

from decimal import Decimal, InvalidOperation

from transaction_codec.models import MAX_UINT256


class InvalidAmountError(ValueError):
    """Raised when an amount string cannot be represented at the token scale."""


def parse_units(amount: str, decimals: int) -> int:
    if not isinstance(amount, str):
        raise InvalidAmountError("Amount must be a decimal string.")
    try:
        value = Decimal(amount.strip())
    except InvalidOperation as exc:
        raise InvalidAmountError(f"Amount is not a decimal number: {amount!r}") from exc
    if not value.is_finite():
        raise InvalidAmountError(f"Amount must be finite: {amount!r}")
    if value < 0:
        raise InvalidAmountError(f"Amount must be non-negative: {amount!r}")
    if not value:
        return 0
    if value.adjusted() + decimals >= len(str(MAX_UINT256)):
        raise InvalidAmountError(f"Amount exceeds uint256: {amount!r}")

    _, coefficient, exponent = value.as_tuple()
    digits = list(coefficient)
    shift = exponent + decimals
    while shift < 0 and len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        shift += 1
    if shift < 0:
        raise InvalidAmountError(
            f"Amount {amount!r} has more than {decimals} decimal places."
        )
    units = int("".join(map(str, digits))) * 10 ** max(shift, 0)
    if units > MAX_UINT256:
        raise InvalidAmountError(f"Amount exceeds uint256: {amount!r}")
    return units


def format_units(value: int, decimals: int) -> str:
    """Render an integer amount as a plain decimal string without trailing zeros."""

    if value < 0:
        raise InvalidAmountError("Token amounts must be non-negative.")
    whole, fraction = divmod(value, 10 ** decimals)
    if fraction == 0:
        return str(whole)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{fraction_str}"
