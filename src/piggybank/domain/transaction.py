"""Transaction domain service (the ledger engine)."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence
from uuid import UUID

from piggybank.database.base import Database, NewSplit
from piggybank.domain.entities import (
    Currency,
    ReconcileStatus,
    Split as SplitEntity,
    SplitInput,
    Transaction as TransactionEntity,
    TransactionPage,
)
from piggybank.domain.errors import (
    BadRequestError,
    NotFoundError,
    ValidationError,
    account_not_found,
    placeholder_posting,
    split_not_found,
    transaction_not_found,
    unbalanced_splits,
)
from piggybank.logging_config import get_logger
from piggybank.utils.amount_parser import to_amount
from piggybank.utils.date_parser import parse_iso_date
from piggybank.utils.id_parser import parse_enum, parse_uuid

logger = get_logger(__name__)

MIN_SPLITS = 2
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500


def check_zero_sum(splits: Sequence[NewSplit]) -> None:
    """Require the amounts of every currency group to sum to exactly zero.

    Raises:
        ValidationError: Naming the first unbalanced currency and its sum
    """
    totals: dict[Currency, Decimal] = defaultdict(lambda: Decimal("0"))
    for split in splits:
        totals[split.currency] += split.amount
    for currency, total in totals.items():
        if total != 0:
            raise ValidationError(unbalanced_splits(currency.name, total))


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _validate_description(description: Optional[str]) -> str:
    if description is None or not description.strip():
        raise BadRequestError("Transaction description cannot be blank")
    return description.strip()


class TransactionService:
    """Service for recording and maintaining balanced transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_transaction(self, owner_id: UUID, transaction_id: UUID) -> TransactionEntity:
        txn = self.db.get_transaction(transaction_id, owner_id=owner_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def _normalize_split(self, split: SplitInput) -> NewSplit:
        reconcile_status = ReconcileStatus.NEW
        if split.reconcile_status is not None:
            reconcile_status = parse_enum(ReconcileStatus, split.reconcile_status, "reconcile status")
        return NewSplit(
            account_id=parse_uuid(split.account_id, "account id"),
            amount=to_amount(split.amount),
            currency=parse_enum(Currency, split.currency, "currency"),
            memo=_optional_text(split.memo),
            reconcile_status=reconcile_status,
        )

    def validate_splits(
        self, owner_id: UUID | str, splits: Sequence[SplitInput]
    ) -> list[NewSplit]:
        """Validate a split set for create or update.

        Args:
            owner_id: Caller's owner ID
            splits: Requested splits

        Returns:
            Normalized splits in the given order

        Raises:
            BadRequestError: If an ID, amount, currency or status is malformed
            NotFoundError: If an account does not exist or is not owned
            ValidationError: If there are fewer than two splits, a placeholder
                account is targeted, or a currency group does not sum to zero
        """
        owner_id = parse_uuid(owner_id, "owner id")
        if splits is None or len(splits) < MIN_SPLITS:
            raise ValidationError(f"A transaction needs at least {MIN_SPLITS} splits")

        normalized = [self._normalize_split(split) for split in splits]

        account_ids = {split.account_id for split in normalized}
        accounts = {account.id: account for account in self.db.get_accounts(owner_id, list(account_ids))}
        for split in normalized:
            if split.account_id not in accounts:
                raise NotFoundError(account_not_found(split.account_id))

        placeholders = sorted(
            {accounts[split.account_id].full_name for split in normalized if accounts[split.account_id].placeholder}
        )
        if placeholders:
            raise ValidationError(placeholder_posting(placeholders))

        check_zero_sum(normalized)
        return normalized

    def create_transaction(
        self,
        owner_id: UUID | str,
        date: date | str,
        description: str,
        splits: Sequence[SplitInput],
        num: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> TransactionEntity:
        """Record a balanced transaction with its splits.

        Args:
            owner_id: Caller's owner ID
            date: Transaction date (date or YYYY-MM-DD)
            description: Description (required)
            splits: Two or more splits
            num: Optional reference number (e.g. check number)
            notes: Optional notes

        Returns:
            The created transaction with its splits

        Raises:
            BadRequestError: If any field is malformed
            NotFoundError: If a split account is missing or not owned
            ValidationError: If the splits break a ledger rule
        """
        owner_id = parse_uuid(owner_id, "owner id")
        txn_date = parse_iso_date(date)
        description = _validate_description(description)

        with self.db.unit_of_work():
            new_splits = self.validate_splits(owner_id, splits)
            transaction_id = self.db.create_transaction(
                owner_id=owner_id,
                date=txn_date,
                description=description,
                splits=new_splits,
                num=_optional_text(num),
                notes=_optional_text(notes),
            )
            txn = self._require_transaction(owner_id, transaction_id)

        logger.info("Created transaction %s with %d splits", txn.id, len(txn.splits))
        return txn

    def get_transaction(self, owner_id: UUID | str, transaction_id: UUID | str) -> TransactionEntity:
        """Get an owned transaction with its splits.

        Raises:
            NotFoundError: If the transaction does not exist or is not owned
        """
        return self._require_transaction(
            parse_uuid(owner_id, "owner id"), parse_uuid(transaction_id, "transaction id")
        )

    def list_transactions(
        self,
        owner_id: UUID | str,
        start_date: Optional[date | str] = None,
        end_date: Optional[date | str] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> TransactionPage:
        """List transactions newest first, one page at a time.

        Args:
            owner_id: Caller's owner ID
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            page: 1-based page number
            page_size: Transactions per page (1 to 500)

        Returns:
            The requested page and the total number of matches

        Raises:
            BadRequestError: If a date or the paging parameters are invalid
        """
        owner_id = parse_uuid(owner_id, "owner id")
        start = parse_iso_date(start_date, "start date") if start_date is not None else None
        end = parse_iso_date(end_date, "end date") if end_date is not None else None
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise BadRequestError(f"Invalid page: {page}. Must be 1 or greater")
        if isinstance(page_size, bool) or not isinstance(page_size, int) or not 1 <= page_size <= MAX_PAGE_SIZE:
            raise BadRequestError(f"Invalid page size: {page_size}. Must be between 1 and {MAX_PAGE_SIZE}")

        total = self.db.count_transactions(owner_id, start_date=start, end_date=end)
        transactions = self.db.list_transactions(
            owner_id,
            start_date=start,
            end_date=end,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return TransactionPage(
            transactions=tuple(transactions), total=total, page=page, page_size=page_size
        )

    def update_transaction(
        self,
        owner_id: UUID | str,
        transaction_id: UUID | str,
        date: Optional[date | str] = None,
        description: Optional[str] = None,
        num: Optional[str] = None,
        notes: Optional[str] = None,
        splits: Optional[Sequence[SplitInput]] = None,
    ) -> TransactionEntity:
        """Update transaction fields and optionally replace its splits.

        Provided splits are validated as in create_transaction and replace the
        whole prior split set; there is no partial split update.

        Raises:
            BadRequestError: If any field is malformed
            NotFoundError: If the transaction or a split account is missing
            ValidationError: If the new splits break a ledger rule
        """
        owner_id = parse_uuid(owner_id, "owner id")
        transaction_id = parse_uuid(transaction_id, "transaction id")
        txn_date = parse_iso_date(date) if date is not None else None
        if description is not None:
            description = _validate_description(description)

        with self.db.unit_of_work():
            self._require_transaction(owner_id, transaction_id)
            new_splits = self.validate_splits(owner_id, splits) if splits is not None else None

            self.db.update_transaction(
                transaction_id,
                date=txn_date,
                num=_optional_text(num),
                description=description,
                notes=_optional_text(notes),
                update_num=num is not None,
                update_notes=notes is not None,
            )
            if new_splits is not None:
                self.db.replace_splits(transaction_id, new_splits)
            txn = self._require_transaction(owner_id, transaction_id)

        logger.info("Updated transaction %s", transaction_id)
        return txn

    def delete_transaction(self, owner_id: UUID | str, transaction_id: UUID | str) -> None:
        """Delete a transaction and all of its splits (irreversible).

        Raises:
            NotFoundError: If the transaction does not exist or is not owned
        """
        owner_id = parse_uuid(owner_id, "owner id")
        transaction_id = parse_uuid(transaction_id, "transaction id")

        with self.db.unit_of_work():
            self._require_transaction(owner_id, transaction_id)
            self.db.delete_transaction(transaction_id)

        logger.info("Deleted transaction %s", transaction_id)

    def void_transaction(
        self,
        owner_id: UUID | str,
        transaction_id: UUID | str,
        reason: Optional[str] = None,
    ) -> TransactionEntity:
        """Mark a transaction as voided; its splits stay but stop counting.

        Raises:
            NotFoundError: If the transaction does not exist or is not owned
            ValidationError: If the transaction is already voided
        """
        owner_id = parse_uuid(owner_id, "owner id")
        transaction_id = parse_uuid(transaction_id, "transaction id")

        with self.db.unit_of_work():
            txn = self._require_transaction(owner_id, transaction_id)
            if txn.voided:
                raise ValidationError("Transaction is already voided")
            self.db.set_transaction_voided(transaction_id, True, _optional_text(reason))
            txn = self._require_transaction(owner_id, transaction_id)

        logger.info("Voided transaction %s", transaction_id)
        return txn

    def unvoid_transaction(self, owner_id: UUID | str, transaction_id: UUID | str) -> TransactionEntity:
        """Restore a voided transaction and clear the void reason.

        Raises:
            NotFoundError: If the transaction does not exist or is not owned
            ValidationError: If the transaction is not voided
        """
        owner_id = parse_uuid(owner_id, "owner id")
        transaction_id = parse_uuid(transaction_id, "transaction id")

        with self.db.unit_of_work():
            txn = self._require_transaction(owner_id, transaction_id)
            if not txn.voided:
                raise ValidationError("Transaction is not voided")
            self.db.set_transaction_voided(transaction_id, False, None)
            txn = self._require_transaction(owner_id, transaction_id)

        logger.info("Unvoided transaction %s", transaction_id)
        return txn

    def get_split(self, owner_id: UUID | str, split_id: UUID | str) -> SplitEntity:
        """Get an owned split by ID.

        Raises:
            NotFoundError: If the split does not exist or is not owned
        """
        owner_id = parse_uuid(owner_id, "owner id")
        split_id = parse_uuid(split_id, "split id")
        split = self.db.get_split(split_id, owner_id=owner_id)
        if split is None:
            raise NotFoundError(split_not_found(split_id))
        return split

    def set_reconcile_status(
        self,
        owner_id: UUID | str,
        split_id: UUID | str,
        status: ReconcileStatus | str,
    ) -> SplitEntity:
        """Set a split's reconciliation state.

        Any state may be set from any other; the owning transaction's
        updated_at is bumped.

        Raises:
            BadRequestError: If the status or ID is malformed
            NotFoundError: If the split does not exist or is not owned
        """
        status = parse_enum(ReconcileStatus, status, "reconcile status")

        with self.db.unit_of_work():
            split = self.get_split(owner_id, split_id)
            self.db.update_split_reconcile_status(split.id, status)
            split = self.get_split(owner_id, split.id)

        logger.info("Set split %s reconcile status to %s", split.id, status.name)
        return split
