"""Render domain entities as JSON-ready dicts.

Keys are camelCase. Amounts and balances are plain decimal strings, dates are
ISO-8601, IDs are strings and enums are rendered by name.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from piggybank.domain.entities import (
    Account,
    AccountRegister,
    AccountTreeNode,
    RegisterEntry,
    Split,
    Transaction,
    TransactionPage,
)
from piggybank.domain.errors import DomainError
from piggybank.utils.amount_parser import format_amount


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _id(value) -> Optional[str]:
    return str(value) if value is not None else None


def account_to_dict(account: Account) -> dict[str, Any]:
    return {
        "id": str(account.id),
        "parentId": _id(account.parent_id),
        "name": account.name,
        "fullName": account.full_name,
        "type": account.account_type.name,
        "normalBalance": account.normal_balance.name,
        "currency": account.currency.name,
        "placeholder": account.placeholder,
        "description": account.description,
        "createdAt": _iso(account.created_at),
        "updatedAt": _iso(account.updated_at),
    }


def balance_to_dict(account: Account, balance: Decimal) -> dict[str, Any]:
    return {
        "accountId": str(account.id),
        "fullName": account.full_name,
        "currency": account.currency.name,
        "balance": format_amount(balance),
    }


def tree_node_to_dict(node: AccountTreeNode) -> dict[str, Any]:
    data = account_to_dict(node.account)
    data["balance"] = format_amount(node.balance)
    data["totalBalance"] = format_amount(node.total_balance)
    data["children"] = [tree_node_to_dict(child) for child in node.children]
    return data


def split_to_dict(split: Split) -> dict[str, Any]:
    return {
        "id": str(split.id),
        "transactionId": str(split.transaction_id),
        "accountId": str(split.account_id),
        "amount": format_amount(split.amount),
        "currency": split.currency.name,
        "memo": split.memo,
        "reconcileStatus": split.reconcile_status.name,
    }


def transaction_to_dict(txn: Transaction) -> dict[str, Any]:
    return {
        "id": str(txn.id),
        "date": _iso(txn.date),
        "num": txn.num,
        "description": txn.description,
        "notes": txn.notes,
        "voided": txn.voided,
        "voidReason": txn.void_reason,
        "createdAt": _iso(txn.created_at),
        "updatedAt": _iso(txn.updated_at),
        "splits": [split_to_dict(split) for split in txn.splits],
    }


def transaction_page_to_dict(page: TransactionPage) -> dict[str, Any]:
    return {
        "transactions": [transaction_to_dict(txn) for txn in page.transactions],
        "total": page.total,
        "page": page.page,
        "pageSize": page.page_size,
    }


def register_entry_to_dict(entry: RegisterEntry) -> dict[str, Any]:
    return {
        "transactionId": str(entry.transaction_id),
        "splitId": str(entry.split_id),
        "date": _iso(entry.date),
        "num": entry.num,
        "description": entry.description,
        "memo": entry.memo,
        "amount": format_amount(entry.amount),
        "currency": entry.currency.name,
        "balance": format_amount(entry.balance),
        "reconcileStatus": entry.reconcile_status.name,
        "voided": entry.voided,
        "otherAccounts": list(entry.other_accounts),
        "isSplit": entry.is_split,
    }


def register_to_dict(register: AccountRegister) -> dict[str, Any]:
    return {
        "accountId": str(register.account_id),
        "accountName": register.account_name,
        "accountType": register.account_type.name,
        "normalBalance": register.normal_balance.name,
        "openingBalance": format_amount(register.opening_balance),
        "closingBalance": format_amount(register.closing_balance),
        "entries": [register_entry_to_dict(entry) for entry in register.entries],
    }


def error_to_dict(error: Exception) -> dict[str, str]:
    """Render an error as {"error": kind, "message": text}.

    Errors that are not DomainErrors are reported generically so internals
    never leak.
    """
    if isinstance(error, DomainError):
        return {"error": error.kind, "message": str(error)}
    return {"error": "internal", "message": "An unexpected error occurred"}
