"""Utility for resolving account references to accounts."""

from uuid import UUID

from piggybank.domain.account import AccountService
from piggybank.domain.entities import Account
from piggybank.domain.errors import BadRequestError, NotFoundError


def resolve_account(account_service: AccountService, owner_id: UUID, account: str | UUID) -> Account:
    """Resolve an account ID, full name or unique short name.

    Args:
        account_service: AccountService instance
        owner_id: Owner whose accounts are searched
        account: Account ID, full name (e.g. "Assets:Cash") or short name

    Returns:
        The account

    Raises:
        NotFoundError: If no account matches
        BadRequestError: If a short name matches more than one account
    """
    if isinstance(account, UUID):
        return account_service.get_account(owner_id, account)

    reference = account.strip()
    try:
        account_id = UUID(reference)
    except ValueError:
        pass
    else:
        return account_service.get_account(owner_id, account_id)

    accounts = account_service.list_accounts(owner_id)
    for acc in accounts:
        if acc.full_name == reference:
            return acc

    # Fall back to the short name when it is unambiguous
    matches = [acc for acc in accounts if acc.name == reference]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        names = ", ".join(acc.full_name for acc in matches)
        raise BadRequestError(f"Account name '{reference}' is ambiguous: {names}")

    raise NotFoundError(f"Account '{reference}' not found")
