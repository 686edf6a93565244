"""CLI helpers for account resolution."""

from __future__ import annotations

from uuid import UUID

import click

from piggybank.cli.error_handling import handle_domain_error
from piggybank.domain.account import AccountService
from piggybank.domain.entities import Account
from piggybank.domain.errors import DomainError
from piggybank.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, owner_id: UUID, account: str
) -> Account:
    """Resolve an account reference, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, owner_id, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
