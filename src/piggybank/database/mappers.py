"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so the services only ever see
frozen domain entities.
"""

from piggybank.domain import entities as domain
from piggybank.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
    Split as ORMSplit,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner_id=orm_account.owner_id,
        parent_id=orm_account.parent_id,
        name=orm_account.name,
        full_name=orm_account.full_name,
        account_type=orm_account.account_type,
        currency=orm_account.currency,
        placeholder=bool(orm_account.placeholder),
        description=orm_account.description,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def split_to_domain(orm_split: ORMSplit) -> domain.Split:
    """Convert SQLAlchemy Split model to domain Split entity."""
    return domain.Split(
        id=orm_split.id,
        transaction_id=orm_split.transaction_id,
        account_id=orm_split.account_id,
        amount=orm_split.amount,
        currency=orm_split.currency,
        memo=orm_split.memo,
        reconcile_status=orm_split.reconcile_status,
        position=orm_split.position,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model (with its splits) to a domain entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        owner_id=orm_transaction.owner_id,
        date=orm_transaction.date,
        num=orm_transaction.num,
        description=orm_transaction.description,
        notes=orm_transaction.notes,
        voided=bool(orm_transaction.voided),
        void_reason=orm_transaction.void_reason,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
        sequence=orm_transaction.sequence,
        splits=tuple(
            split_to_domain(split)
            for split in sorted(orm_transaction.splits, key=lambda s: s.position)
        ),
    )
