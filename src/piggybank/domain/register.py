"""Account register: the running-balance view of one account's postings."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional
from uuid import UUID

from piggybank.database.base import Database
from piggybank.domain.entities import (
    Account,
    AccountRegister,
    RegisterEntry,
    Transaction,
)
from piggybank.domain.errors import NotFoundError, account_not_found
from piggybank.utils.date_parser import parse_iso_date
from piggybank.utils.id_parser import parse_uuid

# Opening balance is not tracked historically; registers always start at zero.
OPENING_BALANCE = Decimal("0")


def _other_account_names(
    txn: Transaction, account_id: UUID, accounts_by_id: Mapping[UUID, Account]
) -> tuple[str, ...]:
    names: list[str] = []
    seen: set[UUID] = set()
    for split in txn.splits:
        if split.account_id == account_id or split.account_id in seen:
            continue
        seen.add(split.account_id)
        other = accounts_by_id.get(split.account_id)
        names.append(other.full_name if other is not None else str(split.account_id))
    return tuple(names)


def project_register(
    account: Account,
    transactions: Iterable[Transaction],
    accounts_by_id: Mapping[UUID, Account],
) -> AccountRegister:
    """Project an account's register from the transactions touching it.

    Rows are ordered by transaction date, then insertion sequence, then split
    position. Splits of voided transactions are listed but do not move the
    running balance.

    Args:
        account: Account the register is for
        transactions: Transactions with their splits (any order)
        accounts_by_id: Accounts used to name the other side of each entry

    Returns:
        The register with entries and closing balance
    """
    ordered = sorted(transactions, key=lambda txn: (txn.date, txn.sequence))
    running = OPENING_BALANCE
    entries: list[RegisterEntry] = []

    for txn in ordered:
        others = _other_account_names(txn, account.id, accounts_by_id)
        for split in sorted(txn.splits, key=lambda s: s.position):
            if split.account_id != account.id:
                continue
            if not txn.voided:
                running += split.amount
            entries.append(
                RegisterEntry(
                    transaction_id=txn.id,
                    split_id=split.id,
                    date=txn.date,
                    num=txn.num,
                    description=txn.description,
                    memo=split.memo,
                    amount=split.amount,
                    currency=split.currency,
                    balance=running,
                    reconcile_status=split.reconcile_status,
                    voided=txn.voided,
                    other_accounts=others,
                    is_split=len(others) > 1,
                )
            )

    return AccountRegister(
        account_id=account.id,
        account_name=account.full_name,
        account_type=account.account_type,
        normal_balance=account.normal_balance,
        entries=tuple(entries),
        opening_balance=OPENING_BALANCE,
        closing_balance=running,
    )


class RegisterService:
    """Service producing account registers."""

    def __init__(self, db: Database):
        """Initialize register service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_register(
        self,
        owner_id: UUID | str,
        account_id: UUID | str,
        start_date: Optional[date | str] = None,
        end_date: Optional[date | str] = None,
    ) -> AccountRegister:
        """Get the register of an account, optionally limited to a date range.

        Args:
            owner_id: Caller's owner ID
            account_id: Account ID
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date

        Returns:
            Account register

        Raises:
            BadRequestError: If an ID or date is malformed
            NotFoundError: If the account does not exist or is not owned
        """
        owner_id = parse_uuid(owner_id, "owner id")
        account_id = parse_uuid(account_id, "account id")
        start = parse_iso_date(start_date, "start date") if start_date is not None else None
        end = parse_iso_date(end_date, "end date") if end_date is not None else None

        account = self.db.get_account(account_id, owner_id=owner_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        transactions = self.db.list_account_transactions(account_id, start_date=start, end_date=end)
        other_ids = {split.account_id for txn in transactions for split in txn.splits}
        accounts_by_id = {acc.id: acc for acc in self.db.get_accounts(owner_id, list(other_ids))}
        accounts_by_id[account.id] = account
        return project_register(account, transactions, accounts_by_id)
