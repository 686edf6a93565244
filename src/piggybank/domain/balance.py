"""Balance aggregation over the chart of accounts.

Balances are never stored. Every call recomputes them from the committed,
non-voided splits, so they cannot drift from the ledger.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Mapping, Optional
from uuid import UUID

from piggybank.database.base import Database
from piggybank.domain.entities import Account, AccountTreeNode, Split
from piggybank.domain.errors import NotFoundError, account_not_found
from piggybank.utils.id_parser import parse_uuid

ZERO = Decimal("0")


def sum_balances(splits: Iterable[Split]) -> dict[UUID, Decimal]:
    """Sum split amounts per account.

    Callers pass only the splits that count (non-voided).

    Args:
        splits: Splits to add up

    Returns:
        Mapping of account ID to the sum of its split amounts
    """
    totals: dict[UUID, Decimal] = defaultdict(lambda: ZERO)
    for split in splits:
        totals[split.account_id] += split.amount
    return dict(totals)


def build_account_tree(
    accounts: Iterable[Account], balances: Mapping[UUID, Decimal]
) -> list[AccountTreeNode]:
    """Build tree nodes from a flat account list.

    The hierarchy is rebuilt from ``parent_id`` through an adjacency map keyed
    by account ID. Children are ordered by name. An account whose parent is
    not in ``accounts`` is treated as a root.

    Args:
        accounts: Accounts of one owner
        balances: Own balance per account ID (missing means zero)

    Returns:
        Root nodes, each carrying its subtree with rolled-up totals
    """
    accounts = list(accounts)
    known_ids = {account.id for account in accounts}
    children_by_parent: dict[Optional[UUID], list[Account]] = defaultdict(list)
    for account in accounts:
        parent_id = account.parent_id if account.parent_id in known_ids else None
        children_by_parent[parent_id].append(account)

    def build(account: Account) -> AccountTreeNode:
        children = tuple(
            build(child)
            for child in sorted(children_by_parent.get(account.id, []), key=lambda a: a.name)
        )
        balance = balances.get(account.id, ZERO)
        return AccountTreeNode(
            account=account,
            balance=balance,
            total_balance=balance + sum((child.total_balance for child in children), ZERO),
            children=children,
        )

    return [build(root) for root in sorted(children_by_parent.get(None, []), key=lambda a: a.name)]


def rolled_up_balance(node: AccountTreeNode) -> Decimal:
    """Own balance plus the rolled-up balance of every child (post-order)."""
    return node.balance + sum((rolled_up_balance(child) for child in node.children), ZERO)


def flatten_tree(nodes: Iterable[AccountTreeNode], depth: int = 0) -> list[tuple[int, AccountTreeNode]]:
    """Flatten a tree depth-first into (depth, node) pairs for display."""
    rows: list[tuple[int, AccountTreeNode]] = []
    for node in nodes:
        rows.append((depth, node))
        rows.extend(flatten_tree(node.children, depth + 1))
    return rows


class BalanceService:
    """Service computing account balances and balance trees."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def balance(self, owner_id: UUID | str, account_id: UUID | str) -> Decimal:
        """Get the balance posted directly to an account.

        Args:
            owner_id: Caller's owner ID
            account_id: Account ID

        Returns:
            Sum of the account's non-voided split amounts

        Raises:
            NotFoundError: If the account does not exist or is not owned
        """
        owner_id = parse_uuid(owner_id, "owner id")
        account_id = parse_uuid(account_id, "account id")
        if self.db.get_account(account_id, owner_id=owner_id) is None:
            raise NotFoundError(account_not_found(account_id))
        splits = self.db.list_splits(owner_id, account_id=account_id)
        return sum((split.amount for split in splits), ZERO)

    def rolled_up_balance(self, owner_id: UUID | str, account_id: UUID | str) -> Decimal:
        """Get an account's balance including all of its descendants."""
        owner_id = parse_uuid(owner_id, "owner id")
        account_id = parse_uuid(account_id, "account id")
        for _, node in flatten_tree(self.get_account_tree(owner_id)):
            if node.account.id == account_id:
                return node.total_balance
        raise NotFoundError(account_not_found(account_id))

    def get_account_tree(self, owner_id: UUID | str) -> list[AccountTreeNode]:
        """Build the owner's chart of accounts with own and rolled-up balances.

        Args:
            owner_id: Caller's owner ID

        Returns:
            Root tree nodes ordered by name
        """
        owner_id = parse_uuid(owner_id, "owner id")
        accounts = self.db.list_accounts(owner_id)
        balances = sum_balances(self.db.list_splits(owner_id))
        return build_account_tree(accounts, balances)
