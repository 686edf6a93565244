"""Amount parsing and formatting utilities."""

from decimal import Decimal, InvalidOperation
import re

from piggybank.domain.errors import BadRequestError

_PLAIN_DECIMAL = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")

# Matches the NUMERIC(19, 4) amount column
MAX_DECIMAL_PLACES = 4
MAX_MAGNITUDE = Decimal("1E15")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-typed amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        BadRequestError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise BadRequestError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    amount = to_amount(amount_str)
    return -amount if is_negative else amount


def to_amount(value: Decimal | str | int) -> Decimal:
    """Coerce a wire-format amount into a finite Decimal.

    Only plain decimal notation is accepted for strings ("-50.00", "12",
    ".5"); floats are rejected so binary rounding never reaches the ledger.
    Amounts must be storable without rounding: at most 4 decimal places and
    an absolute value below 10^15.

    Raises:
        BadRequestError: If the value is not a finite decimal number, or it
            has too many decimal places or digits
    """
    amount = None
    if isinstance(value, int) and not isinstance(value, bool):
        amount = Decimal(value)
    elif isinstance(value, Decimal):
        amount = value if value.is_finite() else None
    elif isinstance(value, str) and _PLAIN_DECIMAL.match(value.strip()):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            amount = None
    if amount is None:
        raise BadRequestError(f"Invalid amount: {value}")

    if amount.normalize().as_tuple().exponent < -MAX_DECIMAL_PLACES:
        raise BadRequestError(
            f"Invalid amount: {value}. At most {MAX_DECIMAL_PLACES} decimal places are allowed"
        )
    if abs(amount) >= MAX_MAGNITUDE:
        raise BadRequestError(f"Invalid amount: {value}. Amount is too large")
    return amount


def format_amount(amount: Decimal) -> str:
    """Render an amount as a plain decimal string (no exponent)."""
    text = format(amount, "f")
    if "." in text:
        text = text.rstrip("0")
        whole, _, fraction = text.partition(".")
        text = f"{whole}.{fraction.ljust(2, '0')}"
    else:
        text = f"{text}.00"
    if text.startswith("-") and Decimal(text) == 0:
        text = text[1:]
    return text
