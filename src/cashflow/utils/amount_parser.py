"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

CENTS = Decimal("0.01")


def to_decimal(value: Decimal | float | int | str | None, field_name: str = "amount") -> Decimal:
    """Convert a monetary value to Decimal without binary float artifacts.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1"). None becomes 0.

    Raises:
        ValueError: If the value is not a finite number
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, bool):
        raise ValueError(f"Invalid {field_name} '{value}'")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Invalid {field_name} '{value}'")
    if not result.is_finite():
        raise ValueError(f"Invalid {field_name} '{value}': must be a finite number")
    return result


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount typed on the command line.

    Handles "123.45", "$123.45" and "1,234.56". Sign is kept as typed; the
    storage layer rejects negative amounts.

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"[$€£¥,\s]", "", amount_str)
    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    return amount


def quantize_cents(value: Decimal) -> Decimal:
    """Round to two decimal places."""
    return value.quantize(CENTS)
