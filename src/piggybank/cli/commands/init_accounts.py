"""Seed the default chart of accounts."""

import click

from piggybank.cli.error_handling import cli_errors
from piggybank.domain.account import AccountService
from piggybank.domain.balance import flatten_tree


@click.command("init-accounts")
@click.option(
    "--currency",
    type=click.Choice(["USD", "EUR", "RSD"], case_sensitive=False),
    default="USD",
    show_default=True,
    help="Currency of the created accounts",
)
@click.pass_context
@cli_errors
def init_accounts(ctx, currency: str):
    """Create the standard chart of accounts.

    Creates Assets, Liabilities, Equity, Income and Expenses with common
    sub-accounts. Grouping accounts are placeholders and cannot receive
    postings. Does nothing if accounts already exist.

    Examples:
        piggybank init-accounts
        piggybank init-accounts --currency EUR
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    service = AccountService(db)

    if service.list_accounts(owner_id):
        click.echo("Accounts already exist. Nothing to do.")
        return

    click.echo("Creating default chart of accounts...")
    created = service.create_default_accounts(owner_id, currency=currency)

    for depth, node in flatten_tree(service.get_account_tree(owner_id)):
        marker = " [placeholder]" if node.account.placeholder else ""
        click.echo(f"  {'  ' * depth}{node.account.name}{marker}")
    click.echo(f"\nCreated {created} account(s).")


def register_commands(cli):
    """Register init-accounts command with main CLI."""
    cli.add_command(init_accounts)
