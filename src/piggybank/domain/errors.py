"""Shared domain error messages and error types."""

from decimal import Decimal
from uuid import UUID


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``kind`` is the
    machine-readable category reported to callers.
    """

    kind = "domain"


class ValidationError(DomainError):
    """A ledger rule was violated (zero-sum, type mismatch, void state...)."""

    kind = "validation"


class BadRequestError(DomainError):
    """Malformed input: bad id, decimal, enum value, date or name."""

    kind = "bad_request"


class NotFoundError(DomainError):
    """Requested entity does not exist or is not owned by the caller."""

    kind = "not_found"


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    kind = "conflict"


class DependencyError(ValidationError):
    """Operation blocked due to dependent domain data."""


def account_not_found(account_id: UUID) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def parent_account_not_found(parent_id: UUID) -> str:
    """Return message for missing parent account."""
    return f"Parent account {parent_id} not found"


def transaction_not_found(transaction_id: UUID) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def split_not_found(split_id: UUID) -> str:
    """Return message for missing split."""
    return f"Split {split_id} not found"


def duplicate_sibling_name(name: str) -> str:
    """Return message for a name already used under the same parent."""
    return f"An account named '{name}' already exists under this parent"


def account_type_mismatch(parent_type: str) -> str:
    """Return message when a child's type differs from its parent's."""
    return f"Account type must match parent account type ({parent_type})"


def unbalanced_splits(currency: str, total: Decimal) -> str:
    """Return message for a currency group that does not sum to zero."""
    return f"Transaction splits for {currency} must sum to zero. Current sum: {total}"


def placeholder_posting(names: list[str]) -> str:
    """Return message for splits targeting placeholder accounts."""
    return f"Cannot post to placeholder accounts: {', '.join(names)}"


def account_delete_blocked(
    account_id: UUID, split_count: int, child_count: int
) -> str:
    """Return message when account has dependent postings or child accounts."""
    parts = []
    if split_count > 0:
        parts.append(f"{split_count} posting{'s' if split_count != 1 else ''}")
    if child_count > 0:
        parts.append(
            f"{child_count} child account{'s' if child_count != 1 else ''}"
        )
    return (
        f"Cannot delete account {account_id}: it has {', '.join(parts)}. "
        "Please move or delete them first."
    )
