"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import NamedTuple, Optional, Sequence
from datetime import date
from decimal import Decimal
from uuid import UUID

# Import entities directly to avoid circular import through domain/__init__.py
from piggybank.domain.entities import (
    Account,
    AccountType,
    Currency,
    ReconcileStatus,
    Split,
    Transaction,
)


class NewSplit(NamedTuple):
    """Validated split row ready to insert."""

    account_id: UUID
    amount: Decimal
    currency: Currency
    memo: Optional[str]
    reconcile_status: ReconcileStatus


class Database(ABC):
    """Abstract database interface for piggybank.

    Write methods commit immediately when called on their own. Inside
    ``unit_of_work()`` they only flush, and the whole unit commits or rolls
    back together.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Atomic scope: commit on success, roll back on any exception."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        owner_id: UUID,
        name: str,
        full_name: str,
        account_type: AccountType,
        currency: Currency,
        parent_id: Optional[UUID] = None,
        placeholder: bool = False,
        description: Optional[str] = None,
    ) -> Account:
        """Create an account and return it."""
        pass

    @abstractmethod
    def get_account(self, account_id: UUID, owner_id: Optional[UUID] = None) -> Optional[Account]:
        """Get account by ID, optionally restricted to an owner."""
        pass

    @abstractmethod
    def list_accounts(self, owner_id: UUID) -> list[Account]:
        """List all accounts of an owner ordered by full name."""
        pass

    @abstractmethod
    def get_accounts(self, owner_id: UUID, account_ids: Sequence[UUID]) -> list[Account]:
        """Get the owner's accounts among the given IDs."""
        pass

    @abstractmethod
    def find_account_by_name(
        self, owner_id: UUID, parent_id: Optional[UUID], name: str
    ) -> Optional[Account]:
        """Find the sibling with the given short name under a parent (None = root)."""
        pass

    @abstractmethod
    def list_child_accounts(self, account_id: UUID) -> list[Account]:
        """List the immediate children of an account."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        parent_id: Optional[UUID] = None,
        update_parent: bool = False,
    ) -> None:
        """Update account fields.

        Args:
            update_parent: If True, set parent_id even if it's None (move to root)
        """
        pass

    @abstractmethod
    def update_account_full_name(self, account_id: UUID, full_name: str) -> None:
        """Store a recomputed full name."""
        pass

    @abstractmethod
    def delete_account(self, account_id: UUID) -> None:
        """Delete an account row."""
        pass

    @abstractmethod
    def get_account_split_count(self, account_id: UUID) -> int:
        """Count splits posted to an account (voided included)."""
        pass

    @abstractmethod
    def get_account_child_count(self, account_id: UUID) -> int:
        """Count immediate child accounts."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        owner_id: UUID,
        date: date,
        description: str,
        splits: Sequence[NewSplit],
        num: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> UUID:
        """Insert a transaction and its splits. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(
        self, transaction_id: UUID, owner_id: Optional[UUID] = None
    ) -> Optional[Transaction]:
        """Get transaction (with splits) by ID, optionally restricted to an owner."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        owner_id: UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions newest first (date desc, sequence desc)."""
        pass

    @abstractmethod
    def count_transactions(
        self,
        owner_id: UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        """Count transactions matching the date filter."""
        pass

    @abstractmethod
    def list_account_transactions(
        self,
        account_id: UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List transactions touching an account, oldest first (date, sequence)."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: UUID,
        date: Optional[date] = None,
        num: Optional[str] = None,
        description: Optional[str] = None,
        notes: Optional[str] = None,
        update_num: bool = False,
        update_notes: bool = False,
    ) -> None:
        """Replace provided fields and bump updated_at.

        Args:
            update_num: If True, set num even if it's None (clear it)
            update_notes: If True, set notes even if they're None (clear them)
        """
        pass

    @abstractmethod
    def replace_splits(self, transaction_id: UUID, splits: Sequence[NewSplit]) -> None:
        """Delete all splits of a transaction and insert the given ones."""
        pass

    @abstractmethod
    def set_transaction_voided(
        self, transaction_id: UUID, voided: bool, reason: Optional[str] = None
    ) -> None:
        """Set the voided flag and reason."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: UUID) -> None:
        """Delete a transaction's splits, then the transaction."""
        pass

    # Split operations
    @abstractmethod
    def get_split(self, split_id: UUID, owner_id: Optional[UUID] = None) -> Optional[Split]:
        """Get split by ID, optionally restricted to the owner of its transaction."""
        pass

    @abstractmethod
    def update_split_reconcile_status(self, split_id: UUID, status: ReconcileStatus) -> None:
        """Set a split's reconcile status and bump its transaction's updated_at."""
        pass

    @abstractmethod
    def list_splits(
        self,
        owner_id: UUID,
        account_id: Optional[UUID] = None,
        include_voided: bool = False,
    ) -> list[Split]:
        """List the owner's splits, optionally for one account."""
        pass
