"""Parse command-line split specifications."""

from decimal import Decimal
from typing import NamedTuple, Optional

from piggybank.domain.entities import Currency
from piggybank.domain.errors import BadRequestError
from piggybank.utils.amount_parser import parse_amount
from piggybank.utils.id_parser import parse_enum


class SplitSpec(NamedTuple):
    """A split as typed on the command line, account not yet resolved."""

    account: str
    amount: Decimal
    currency: Optional[Currency]
    memo: Optional[str]


def parse_split_spec(spec: str) -> SplitSpec:
    """Parse "ACCOUNT=AMOUNT[ CURRENCY][;MEMO]".

    Examples:
        "Expenses:Food=50.00"
        "Assets:Cash=-50 USD;lunch"

    The account is split off at the last '=' so account names may contain
    '='. A currency left out is filled in by the caller, normally from the
    account.

    Raises:
        BadRequestError: If the spec is malformed
    """
    body, sep, memo = spec.partition(";")
    account, eq, amount_part = body.rpartition("=")
    account = account.strip()
    if not eq or not account:
        raise BadRequestError(
            f"Invalid split '{spec}'. Use ACCOUNT=AMOUNT[ CURRENCY][;MEMO]"
        )

    tokens = amount_part.split()
    if not tokens or len(tokens) > 2:
        raise BadRequestError(
            f"Invalid split '{spec}'. Use ACCOUNT=AMOUNT[ CURRENCY][;MEMO]"
        )
    amount = parse_amount(tokens[0])
    currency = parse_enum(Currency, tokens[1], "currency") if len(tokens) == 2 else None

    memo = memo.strip() if sep else ""
    return SplitSpec(account=account, amount=amount, currency=currency, memo=memo or None)
