"""Account management commands."""

import json

import click

from piggybank.cli.account_resolution import resolve_account_or_exit
from piggybank.cli.date_filters import (
    date_range_options,
    period_flags_from_kwargs,
    resolve_cli_date_range,
)
from piggybank.cli.error_handling import cli_errors
from piggybank.domain.account import AccountService
from piggybank.domain.balance import flatten_tree
from piggybank.domain.register import RegisterService
from piggybank.domain.serialization import (
    account_to_dict,
    balance_to_dict,
    register_to_dict,
    tree_node_to_dict,
)
from piggybank.utils.amount_parser import format_amount

ACCOUNT_TYPES = ["ASSET", "LIABILITY", "EQUITY", "INCOME", "EXPENSE"]
CURRENCIES = ["USD", "EUR", "RSD"]


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Account type (defaults to the parent's type; required for root accounts)",
)
@click.option("--parent", help="Parent account (full name or ID)")
@click.option(
    "--currency",
    type=click.Choice(CURRENCIES, case_sensitive=False),
    help="Currency (defaults to the parent's currency, or USD)",
)
@click.option("--placeholder", is_flag=True, help="Grouping account that cannot receive postings")
@click.option("--description", help="Account description")
@click.pass_context
@cli_errors
def create_account(
    ctx,
    name: str,
    account_type: str | None,
    parent: str | None,
    currency: str | None,
    placeholder: bool,
    description: str | None,
):
    """Create a new account.

    ACCOUNT_NAME is the short name; the full name is built from the parent.

    Examples:
        piggybank account create Assets --type ASSET --placeholder
        piggybank account create Bank --parent Assets --placeholder
        piggybank account create Checking --parent Assets:Bank
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    service = AccountService(db)

    parent_account = None
    if parent is not None:
        parent_account = resolve_account_or_exit(ctx, service, owner_id, parent)

    if account_type is None:
        if parent_account is None:
            click.echo("Error: --type is required for root accounts", err=True)
            ctx.exit(1)
        account_type = parent_account.account_type.name
    if currency is None:
        currency = parent_account.currency.name if parent_account is not None else "USD"

    account = service.create_account(
        owner_id,
        name=name,
        account_type=account_type,
        currency=currency,
        parent_id=parent_account.id if parent_account is not None else None,
        placeholder=placeholder,
        description=description,
    )
    click.echo(f"Created account '{account.full_name}' (ID: {account.id})")


@account_group.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
@cli_errors
def list_accounts(ctx, as_json: bool):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts(ctx.obj["owner_id"])
    if as_json:
        _echo_json([account_to_dict(acc) for acc in accounts])
        return

    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 100)
    click.echo(f"{'Full name':<45} {'Type':<10} {'Cur':<4} {'ID':<36}")
    click.echo("-" * 100)
    for acc in accounts:
        name = acc.full_name + (" *" if acc.placeholder else "")
        click.echo(f"{name:<45} {acc.account_type.name:<10} {acc.currency.name:<4} {str(acc.id):<36}")
    if any(acc.placeholder for acc in accounts):
        click.echo("\n* placeholder")


@account_group.command("tree")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
@cli_errors
def account_tree(ctx, as_json: bool):
    """Show the account tree with own and rolled-up balances."""
    db = ctx.obj["db"]
    service = AccountService(db)

    roots = service.get_account_tree(ctx.obj["owner_id"])
    if as_json:
        _echo_json([tree_node_to_dict(node) for node in roots])
        return

    if not roots:
        click.echo("No accounts found.")
        return

    click.echo(f"\n{'Account':<45} {'Balance':>14} {'Total':>14}")
    click.echo("-" * 75)
    for depth, node in flatten_tree(roots):
        label = f"{'  ' * depth}{node.account.name}"
        click.echo(
            f"{label:<45} {format_amount(node.balance):>14} {format_amount(node.total_balance):>14}"
        )


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
@cli_errors
def show_account(ctx, account: str, as_json: bool):
    """Show account details.

    ACCOUNT can be a full name (e.g. Assets:Cash) or an ID.
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    service = AccountService(db)

    acc = resolve_account_or_exit(ctx, service, owner_id, account)
    if as_json:
        _echo_json(account_to_dict(acc))
        return

    balance = service.get_account_balance(owner_id, acc.id)
    click.echo(f"\nAccount: {acc.full_name}")
    click.echo(f"  ID: {acc.id}")
    click.echo(f"  Type: {acc.account_type.name} (normal balance: {acc.normal_balance.name})")
    click.echo(f"  Currency: {acc.currency.name}")
    click.echo(f"  Placeholder: {'yes' if acc.placeholder else 'no'}")
    if acc.description:
        click.echo(f"  Description: {acc.description}")
    click.echo(f"  Balance: {format_amount(balance)} {acc.currency.name}")


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
@cli_errors
def account_balance(ctx, account: str, as_json: bool):
    """Show the balance posted directly to an account."""
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    service = AccountService(db)

    acc = resolve_account_or_exit(ctx, service, owner_id, account)
    balance = service.get_account_balance(owner_id, acc.id)
    if as_json:
        _echo_json(balance_to_dict(acc, balance))
        return
    click.echo(f"{acc.full_name}: {format_amount(balance)} {acc.currency.name}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New short name")
@click.option("--parent", help="New parent account (full name or ID)")
@click.option("--root", "move_to_root", is_flag=True, help="Move the account to the top level")
@click.option("--description", help="New description")
@click.pass_context
@cli_errors
def update_account(
    ctx,
    account: str,
    name: str | None,
    parent: str | None,
    move_to_root: bool,
    description: str | None,
) -> None:
    """Rename or move an account.

    Full names of the account and all of its sub-accounts are updated.

    Examples:
        piggybank account update Assets:Bank --name Banks
        piggybank account update Expenses:Dining --parent Expenses:Food
        piggybank account update Expenses:Food:Dining --root
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    service = AccountService(db)

    if name is None and parent is None and not move_to_root and description is None:
        click.echo("Error: Nothing to update. Use --name, --parent, --root or --description.", err=True)
        ctx.exit(1)

    acc = resolve_account_or_exit(ctx, service, owner_id, account)
    parent_id = None
    if parent is not None:
        parent_id = resolve_account_or_exit(ctx, service, owner_id, parent).id

    updated = service.update_account(
        owner_id,
        acc.id,
        name=name,
        parent_id=parent_id,
        description=description,
        move_to_root=move_to_root,
    )
    click.echo(f"Updated account '{updated.full_name}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
@cli_errors
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be a full name or an ID.

    The account can only be deleted if it has no postings and no
    sub-accounts.

    Examples:
        piggybank account delete Assets:Cash
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    service = AccountService(db)

    acc = resolve_account_or_exit(ctx, service, owner_id, account)

    # Confirm deletion
    if not yes and not click.confirm(f"Are you sure you want to delete account '{acc.full_name}'?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_account(owner_id, acc.id)
    click.echo(f"Deleted account '{acc.full_name}'")


@account_group.command("register")
@click.argument("account", metavar="ACCOUNT")
@date_range_options
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
@cli_errors
def account_register(ctx, account: str, start_date: str | None, end_date: str | None, as_json: bool, **periods):
    """Show the running-balance register of an account.

    Voided transactions are listed (marked V) but do not change the
    balance. Split transactions show "-- Split --" instead of the other
    account.

    Examples:
        piggybank account register Assets:Cash
        piggybank account register Assets:Cash --this-month
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from_kwargs(periods),
    )

    acc = resolve_account_or_exit(ctx, AccountService(db), owner_id, account)
    register = RegisterService(db).get_register(owner_id, acc.id, start_date=start, end_date=end)

    if as_json:
        _echo_json(register_to_dict(register))
        return

    click.echo(f"\nRegister: {register.account_name} ({register.account_type.name})")
    click.echo("-" * 110)
    click.echo(
        f"{'Date':<12} {'Num':<6} {'Description':<30} {'Transfer':<25} {'R':<2} {'Amount':>12} {'Balance':>12} {'V':<1}"
    )
    click.echo("-" * 110)
    for entry in register.entries:
        if entry.is_split:
            transfer = "-- Split --"
        else:
            transfer = entry.other_accounts[0] if entry.other_accounts else ""
        click.echo(
            f"{str(entry.date):<12} {(entry.num or ''):<6} {entry.description[:30]:<30} "
            f"{transfer[:25]:<25} {entry.reconcile_status.symbol:<2} "
            f"{format_amount(entry.amount):>12} {format_amount(entry.balance):>12} "
            f"{'V' if entry.voided else '':<1}"
        )
    click.echo("-" * 110)
    click.echo(f"Closing balance: {format_amount(register.closing_balance)}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
