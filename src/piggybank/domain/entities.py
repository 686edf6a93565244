"""Domain model entities for piggybank.

These are pure data classes representing business concepts, independent of
database schema. ORM rows are converted into these by
``piggybank.database.mappers`` so business logic never touches the session.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID


class AccountType(Enum):
    """Top-level classification of an account."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class NormalBalance(Enum):
    """Side on which an account naturally increases."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"

    @classmethod
    def for_account_type(cls, account_type: AccountType) -> "NormalBalance":
        """Return the normal balance side for an account type."""
        return _NORMAL_BALANCES[account_type]


_NORMAL_BALANCES = {
    AccountType.ASSET: NormalBalance.DEBIT,
    AccountType.EXPENSE: NormalBalance.DEBIT,
    AccountType.LIABILITY: NormalBalance.CREDIT,
    AccountType.EQUITY: NormalBalance.CREDIT,
    AccountType.INCOME: NormalBalance.CREDIT,
}


class Currency(Enum):
    """Supported currencies."""

    USD = "USD"
    EUR = "EUR"
    RSD = "RSD"

    @property
    def symbol(self) -> str:
        return _CURRENCY_DISPLAY[self][0]

    @property
    def display_name(self) -> str:
        return _CURRENCY_DISPLAY[self][1]


_CURRENCY_DISPLAY = {
    Currency.USD: ("$", "US Dollar"),
    Currency.EUR: ("€", "Euro"),
    Currency.RSD: ("RSD", "Serbian Dinar"),
}


class ReconcileStatus(Enum):
    """Reconciliation state of a single split."""

    NEW = "NEW"
    CLEARED = "CLEARED"
    RECONCILED = "RECONCILED"

    @property
    def symbol(self) -> str:
        """Single-letter marker shown in registers (n / c / y)."""
        return _RECONCILE_SYMBOLS[self]


_RECONCILE_SYMBOLS = {
    ReconcileStatus.NEW: "n",
    ReconcileStatus.CLEARED: "c",
    ReconcileStatus.RECONCILED: "y",
}


@dataclass(frozen=True)
class Account:
    """Account in the chart of accounts."""

    id: UUID
    owner_id: UUID
    parent_id: Optional[UUID]
    name: str
    full_name: str
    account_type: AccountType
    currency: Currency
    placeholder: bool
    description: Optional[str]
    created_at: datetime
    updated_at: datetime

    @property
    def normal_balance(self) -> NormalBalance:
        return NormalBalance.for_account_type(self.account_type)


@dataclass(frozen=True)
class Split:
    """One signed posting of a transaction against a single account."""

    id: UUID
    transaction_id: UUID
    account_id: UUID
    amount: Decimal
    currency: Currency
    memo: Optional[str]
    reconcile_status: ReconcileStatus
    position: int


@dataclass(frozen=True)
class Transaction:
    """Transaction header with its complete set of splits."""

    id: UUID
    owner_id: UUID
    date: date
    num: Optional[str]
    description: str
    notes: Optional[str]
    voided: bool
    void_reason: Optional[str]
    created_at: datetime
    updated_at: datetime
    sequence: int
    splits: tuple[Split, ...] = ()


@dataclass(frozen=True)
class SplitInput:
    """Requested split for create/update.

    Fields may hold typed values or the raw strings received from a caller;
    ``TransactionService.validate_splits`` coerces and checks them.
    """

    account_id: UUID | str
    amount: Decimal | str
    currency: Currency | str
    memo: Optional[str] = None
    reconcile_status: Optional[ReconcileStatus | str] = None


@dataclass(frozen=True)
class TransactionPage:
    """One page of a transaction listing."""

    transactions: tuple[Transaction, ...]
    total: int
    page: int
    page_size: int


@dataclass(frozen=True)
class AccountTreeNode:
    """Account with its own balance and the balance rolled up from descendants."""

    account: Account
    balance: Decimal
    total_balance: Decimal
    children: tuple["AccountTreeNode", ...] = ()


@dataclass(frozen=True)
class RegisterEntry:
    """One register row: a split seen from the account it posts to."""

    transaction_id: UUID
    split_id: UUID
    date: date
    num: Optional[str]
    description: str
    memo: Optional[str]
    amount: Decimal
    currency: Currency
    balance: Decimal
    reconcile_status: ReconcileStatus
    voided: bool
    other_accounts: tuple[str, ...] = ()
    is_split: bool = False


@dataclass(frozen=True)
class AccountRegister:
    """Chronological running-balance view of one account."""

    account_id: UUID
    account_name: str
    account_type: AccountType
    normal_balance: NormalBalance
    entries: tuple[RegisterEntry, ...] = field(default_factory=tuple)
    opening_balance: Decimal = Decimal("0")
    closing_balance: Decimal = Decimal("0")
