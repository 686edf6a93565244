"""Account domain service."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from piggybank.database.base import Database
from piggybank.domain.balance import BalanceService
from piggybank.domain.entities import (
    Account as AccountEntity,
    AccountTreeNode,
    AccountType,
    Currency,
)
from piggybank.domain.errors import (
    BadRequestError,
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    account_type_mismatch,
    duplicate_sibling_name,
    parent_account_not_found,
)
from piggybank.logging_config import get_logger
from piggybank.utils.id_parser import parse_enum, parse_uuid

logger = get_logger(__name__)

SEPARATOR = ":"

# Standard chart seeded for a new owner: (name, type, placeholder, children)
DEFAULT_ACCOUNTS = [
    ("Assets", AccountType.ASSET, True, [
        ("Cash", AccountType.ASSET, False, []),
        ("Bank", AccountType.ASSET, True, [
            ("Checking", AccountType.ASSET, False, []),
        ]),
        ("Investments", AccountType.ASSET, False, []),
    ]),
    ("Liabilities", AccountType.LIABILITY, True, [
        ("Credit Card", AccountType.LIABILITY, False, []),
        ("Loans", AccountType.LIABILITY, False, []),
    ]),
    ("Equity", AccountType.EQUITY, True, [
        ("Opening Balances", AccountType.EQUITY, False, []),
        ("Retained Earnings", AccountType.EQUITY, False, []),
    ]),
    ("Income", AccountType.INCOME, True, [
        ("Salary", AccountType.INCOME, False, []),
        ("Interest", AccountType.INCOME, False, []),
        ("Other Income", AccountType.INCOME, False, []),
    ]),
    ("Expenses", AccountType.EXPENSE, True, [
        ("Food", AccountType.EXPENSE, True, [
            ("Groceries", AccountType.EXPENSE, False, []),
            ("Restaurants", AccountType.EXPENSE, False, []),
        ]),
        ("Housing", AccountType.EXPENSE, True, [
            ("Rent", AccountType.EXPENSE, False, []),
            ("Utilities", AccountType.EXPENSE, False, []),
        ]),
        ("Transportation", AccountType.EXPENSE, False, []),
        ("Entertainment", AccountType.EXPENSE, False, []),
    ]),
]


def validate_account_name(name: Optional[str]) -> str:
    """Check a short account name and return it stripped.

    Raises:
        BadRequestError: If the name is blank or contains the path separator
    """
    if name is None or not name.strip():
        raise BadRequestError("Account name cannot be blank")
    name = name.strip()
    if SEPARATOR in name:
        raise BadRequestError(f"Account name cannot contain '{SEPARATOR}'")
    return name


def join_full_name(parent_full_name: Optional[str], name: str) -> str:
    """Full name of an account under a parent (None = root)."""
    if parent_full_name is None:
        return name
    return f"{parent_full_name}{SEPARATOR}{name}"


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceService(db)

    def _require_account(self, owner_id: UUID, account_id: UUID) -> AccountEntity:
        account = self.db.get_account(account_id, owner_id=owner_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _require_parent(
        self, owner_id: UUID, parent_id: UUID, account_type: AccountType
    ) -> AccountEntity:
        parent = self.db.get_account(parent_id, owner_id=owner_id)
        if parent is None:
            raise NotFoundError(parent_account_not_found(parent_id))
        if parent.account_type != account_type:
            raise ValidationError(account_type_mismatch(parent.account_type.name))
        return parent

    def _check_sibling_name(
        self,
        owner_id: UUID,
        parent_id: Optional[UUID],
        name: str,
        exclude_id: Optional[UUID] = None,
    ) -> None:
        existing = self.db.find_account_by_name(owner_id, parent_id, name)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(duplicate_sibling_name(name))

    def create_account(
        self,
        owner_id: UUID | str,
        name: str,
        account_type: AccountType | str,
        currency: Currency | str,
        parent_id: Optional[UUID | str] = None,
        placeholder: bool = False,
        description: Optional[str] = None,
    ) -> AccountEntity:
        """Create a root or child account.

        Args:
            owner_id: Caller's owner ID
            name: Short account name (no ':')
            account_type: Account type (must equal the parent's type)
            currency: Account currency
            parent_id: Optional parent account ID
            placeholder: If True, the account only groups other accounts
            description: Optional description

        Returns:
            The created account

        Raises:
            BadRequestError: If name, type, currency or an ID is malformed
            NotFoundError: If the parent does not exist or is not owned
            ValidationError: If the parent has a different type
            ConflictError: If a sibling already uses the name
        """
        owner_id = parse_uuid(owner_id, "owner id")
        name = validate_account_name(name)
        account_type = parse_enum(AccountType, account_type, "account type")
        currency = parse_enum(Currency, currency, "currency")
        if parent_id is not None:
            parent_id = parse_uuid(parent_id, "parent id")

        with self.db.unit_of_work():
            parent_full_name = None
            if parent_id is not None:
                parent = self._require_parent(owner_id, parent_id, account_type)
                parent_full_name = parent.full_name
            self._check_sibling_name(owner_id, parent_id, name)

            account = self.db.create_account(
                owner_id=owner_id,
                name=name,
                full_name=join_full_name(parent_full_name, name),
                account_type=account_type,
                currency=currency,
                parent_id=parent_id,
                placeholder=placeholder,
                description=description,
            )

        logger.info("Created account %s (%s)", account.full_name, account.id)
        return account

    def get_account(self, owner_id: UUID | str, account_id: UUID | str) -> AccountEntity:
        """Get an owned account by ID.

        Raises:
            NotFoundError: If the account does not exist or is not owned
        """
        return self._require_account(
            parse_uuid(owner_id, "owner id"), parse_uuid(account_id, "account id")
        )

    def list_accounts(self, owner_id: UUID | str) -> list[AccountEntity]:
        """List the owner's accounts ordered by full name."""
        return self.db.list_accounts(parse_uuid(owner_id, "owner id"))

    def find_account_by_full_name(
        self, owner_id: UUID | str, full_name: str
    ) -> Optional[AccountEntity]:
        """Find an account by its colon-joined full name (case-sensitive).

        Returns:
            The account or None if not found
        """
        owner_id = parse_uuid(owner_id, "owner id")
        for account in self.db.list_accounts(owner_id):
            if account.full_name == full_name:
                return account
        return None

    def _is_descendant_or_self(
        self, owner_id: UUID, account_id: UUID, candidate_id: UUID
    ) -> bool:
        """Walk up from candidate; True if account_id is on the path."""
        seen: set[UUID] = set()
        current_id: Optional[UUID] = candidate_id
        while current_id is not None and current_id not in seen:
            if current_id == account_id:
                return True
            seen.add(current_id)
            current = self.db.get_account(current_id, owner_id=owner_id)
            current_id = current.parent_id if current is not None else None
        return False

    def _propagate_full_names(self, account_id: UUID, full_name: str) -> None:
        """Store full_name on an account and recompute every descendant's."""
        self.db.update_account_full_name(account_id, full_name)
        for child in self.db.list_child_accounts(account_id):
            self._propagate_full_names(child.id, join_full_name(full_name, child.name))

    def update_account(
        self,
        owner_id: UUID | str,
        account_id: UUID | str,
        name: Optional[str] = None,
        parent_id: Optional[UUID | str] = None,
        description: Optional[str] = None,
        move_to_root: bool = False,
    ) -> AccountEntity:
        """Rename and/or reparent an account.

        The new full name is propagated through the whole subtree in the same
        unit of work.

        Args:
            owner_id: Caller's owner ID
            account_id: Account to update
            name: Optional new short name
            parent_id: Optional new parent ID
            description: Optional new description
            move_to_root: If True, make the account a root account

        Returns:
            The updated account

        Raises:
            BadRequestError: If input is malformed, or parent_id is combined
                with move_to_root
            NotFoundError: If the account or new parent is missing or not owned
            ValidationError: If the new parent has a different type or is the
                account itself or one of its descendants
            ConflictError: If the new location already has a sibling with the name
        """
        owner_id = parse_uuid(owner_id, "owner id")
        account_id = parse_uuid(account_id, "account id")
        if move_to_root and parent_id is not None:
            raise BadRequestError("Cannot set both parent and move to root")
        if name is not None:
            name = validate_account_name(name)
        if parent_id is not None:
            parent_id = parse_uuid(parent_id, "parent id")

        with self.db.unit_of_work():
            account = self._require_account(owner_id, account_id)

            new_parent_id = account.parent_id
            new_parent_full_name: Optional[str] = None
            if move_to_root:
                new_parent_id = None
            elif parent_id is not None:
                parent = self._require_parent(owner_id, parent_id, account.account_type)
                if self._is_descendant_or_self(owner_id, account_id, parent.id):
                    raise ValidationError(
                        "Cannot move account under itself or one of its descendants"
                    )
                new_parent_id = parent.id
                new_parent_full_name = parent.full_name
            elif account.parent_id is not None:
                current_parent = self.db.get_account(account.parent_id, owner_id=owner_id)
                new_parent_full_name = current_parent.full_name if current_parent else None

            new_name = name if name is not None else account.name
            parent_changed = new_parent_id != account.parent_id
            if parent_changed or new_name != account.name:
                self._check_sibling_name(owner_id, new_parent_id, new_name, exclude_id=account_id)

            self.db.update_account(
                account_id,
                name=name,
                description=description,
                parent_id=new_parent_id,
                update_parent=parent_changed,
            )
            self._propagate_full_names(account_id, join_full_name(new_parent_full_name, new_name))
            updated = self._require_account(owner_id, account_id)

        logger.info("Updated account %s (%s)", updated.full_name, updated.id)
        return updated

    def delete_account(self, owner_id: UUID | str, account_id: UUID | str) -> None:
        """Delete an account with no postings and no children.

        Raises:
            NotFoundError: If the account does not exist or is not owned
            DependencyError: If the account has splits or child accounts
        """
        owner_id = parse_uuid(owner_id, "owner id")
        account_id = parse_uuid(account_id, "account id")

        with self.db.unit_of_work():
            self._require_account(owner_id, account_id)
            split_count = self.db.get_account_split_count(account_id)
            child_count = self.db.get_account_child_count(account_id)
            if split_count > 0 or child_count > 0:
                raise DependencyError(account_delete_blocked(account_id, split_count, child_count))
            self.db.delete_account(account_id)

        logger.info("Deleted account %s", account_id)

    def get_account_balance(self, owner_id: UUID | str, account_id: UUID | str) -> Decimal:
        """Get the balance posted directly to an account."""
        return self.balances.balance(owner_id, account_id)

    def get_account_tree(self, owner_id: UUID | str) -> list[AccountTreeNode]:
        """Get the owner's account tree with own and rolled-up balances."""
        return self.balances.get_account_tree(owner_id)

    def create_default_accounts(
        self, owner_id: UUID | str, currency: Currency | str = Currency.USD
    ) -> int:
        """Seed the standard chart of accounts for a new owner.

        Args:
            owner_id: Caller's owner ID
            currency: Currency of the seeded accounts

        Returns:
            Number of accounts created

        Raises:
            ConflictError: If the owner already has accounts
        """
        owner_id = parse_uuid(owner_id, "owner id")
        currency = parse_enum(Currency, currency, "currency")

        with self.db.unit_of_work():
            if self.db.list_accounts(owner_id):
                raise ConflictError("Accounts already exist for this owner")
            created = self._create_default_nodes(owner_id, currency, DEFAULT_ACCOUNTS, None)

        logger.info("Created %d default accounts for owner %s", created, owner_id)
        return created

    def _create_default_nodes(
        self,
        owner_id: UUID,
        currency: Currency,
        nodes: list,
        parent: Optional[AccountEntity],
    ) -> int:
        count = 0
        for name, account_type, placeholder, children in nodes:
            account = self.db.create_account(
                owner_id=owner_id,
                name=name,
                full_name=join_full_name(parent.full_name if parent else None, name),
                account_type=account_type,
                currency=currency,
                parent_id=parent.id if parent else None,
                placeholder=placeholder,
            )
            count += 1 + self._create_default_nodes(owner_id, currency, children, account)
        return count
