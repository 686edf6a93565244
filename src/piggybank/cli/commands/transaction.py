"""Transaction management commands."""

import json
from decimal import Decimal
from uuid import UUID

import click

from piggybank.cli.account_resolution import resolve_account_or_exit
from piggybank.cli.date_filters import (
    date_range_options,
    period_flags_from_kwargs,
    resolve_cli_date_range,
)
from piggybank.cli.error_handling import cli_errors, handle_domain_error
from piggybank.domain.account import AccountService
from piggybank.domain.entities import SplitInput, Transaction
from piggybank.domain.errors import DomainError
from piggybank.domain.serialization import transaction_page_to_dict, transaction_to_dict
from piggybank.domain.transaction import DEFAULT_PAGE_SIZE, TransactionService
from piggybank.utils.amount_parser import format_amount
from piggybank.utils.date_parser import parse_date
from piggybank.utils.split_parser import parse_split_spec

SPLIT_HELP = (
    'Split as "ACCOUNT=AMOUNT[ CURRENCY][;MEMO]"; repeat for each split. '
    "Currency defaults to the account's currency."
)


def _build_splits(ctx, account_service: AccountService, owner_id: UUID, specs: tuple[str, ...]) -> list[SplitInput]:
    """Turn --split options into SplitInputs, resolving account names."""
    splits = []
    for spec in specs:
        try:
            parsed = parse_split_spec(spec)
        except DomainError as e:
            handle_domain_error(ctx, e)
        account = resolve_account_or_exit(ctx, account_service, owner_id, parsed.account)
        splits.append(
            SplitInput(
                account_id=account.id,
                amount=parsed.amount,
                currency=parsed.currency or account.currency,
                memo=parsed.memo,
            )
        )
    return splits


def _parse_cli_date(ctx, value: str):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def _echo_transaction(txn: Transaction, account_names: dict) -> None:
    status = " [VOID]" if txn.voided else ""
    click.echo(f"\nTransaction {txn.id}{status}")
    click.echo(f"  Date: {txn.date}")
    if txn.num:
        click.echo(f"  Num: {txn.num}")
    click.echo(f"  Description: {txn.description}")
    if txn.notes:
        click.echo(f"  Notes: {txn.notes}")
    if txn.voided and txn.void_reason:
        click.echo(f"  Void reason: {txn.void_reason}")
    click.echo("  Splits:")
    for split in txn.splits:
        name = account_names.get(split.account_id, str(split.account_id))
        memo = f"  ({split.memo})" if split.memo else ""
        click.echo(
            f"    {split.reconcile_status.symbol} {name:<35} {format_amount(split.amount):>12} "
            f"{split.currency.name}{memo}  [{split.id}]"
        )


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option(
    "--date",
    "txn_date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--description", required=True, help="Transaction description")
@click.option("--split", "splits", multiple=True, required=True, help=SPLIT_HELP)
@click.option("--num", help="Reference number (e.g. check number)")
@click.option("--notes", help="Notes")
@click.pass_context
@cli_errors
def add_transaction(
    ctx,
    txn_date: str,
    description: str,
    splits: tuple[str, ...],
    num: str | None,
    notes: str | None,
):
    """Record a balanced transaction.

    Splits of each currency must sum to zero. Positive amounts are debits,
    negative amounts are credits.

    Examples:
        piggybank transaction add --description "Lunch" \\
            --split "Expenses:Food=50.00" --split "Assets:Cash=-50.00"
        piggybank transaction add --date 2024-01-31 --description "Payday" \\
            --split "Assets:Bank:Checking=2000" --split "Income:Salary=-2000;January"
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    account_service = AccountService(db)

    parsed_date = _parse_cli_date(ctx, txn_date)
    split_inputs = _build_splits(ctx, account_service, owner_id, splits)

    txn = TransactionService(db).create_transaction(
        owner_id,
        date=parsed_date,
        description=description,
        splits=split_inputs,
        num=num,
        notes=notes,
    )
    click.echo(f"Created transaction {txn.id} ({len(txn.splits)} splits)")


@transaction_group.command("list")
@date_range_options
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@click.option("--page-size", type=int, default=DEFAULT_PAGE_SIZE, show_default=True, help="Transactions per page")
@click.option("--verbose", "-v", is_flag=True, help="Show splits of each transaction")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
@cli_errors
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    page: int,
    page_size: int,
    verbose: bool,
    as_json: bool,
    **periods,
):
    """List transactions, newest first.

    Examples:
        piggybank transaction list --this-month
        piggybank transaction list --start-date 2024-01-01 --page 2
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from_kwargs(periods),
    )

    result = TransactionService(db).list_transactions(
        owner_id, start_date=start, end_date=end, page=page, page_size=page_size
    )
    if as_json:
        click.echo(json.dumps(transaction_page_to_dict(result), indent=2))
        return

    if not result.transactions:
        click.echo("No transactions found.")
        return

    account_names = {acc.id: acc.full_name for acc in AccountService(db).list_accounts(owner_id)}

    if verbose:
        for txn in result.transactions:
            _echo_transaction(txn, account_names)
    else:
        click.echo(f"\n{'ID':<36} {'Date':<12} {'Num':<6} {'Description':<30} {'Amount':>12} {'V':<1}")
        click.echo("-" * 102)
        for txn in result.transactions:
            # Sum of the debit splits
            amount = sum((s.amount for s in txn.splits if s.amount > 0), Decimal("0"))
            click.echo(
                f"{str(txn.id):<36} {str(txn.date):<12} {(txn.num or ''):<6} "
                f"{txn.description[:30]:<30} {format_amount(amount):>12} {'V' if txn.voided else '':<1}"
            )

    shown_from = (result.page - 1) * result.page_size + 1
    shown_to = shown_from + len(result.transactions) - 1
    click.echo(f"\nShowing {shown_from}-{shown_to} of {result.total} transaction(s)")


@transaction_group.command("show")
@click.argument("transaction_id")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
@cli_errors
def show_transaction(ctx, transaction_id: str, as_json: bool):
    """Show a transaction and its splits."""
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]

    txn = TransactionService(db).get_transaction(owner_id, transaction_id)
    if as_json:
        click.echo(json.dumps(transaction_to_dict(txn), indent=2))
        return

    account_names = {acc.id: acc.full_name for acc in AccountService(db).list_accounts(owner_id)}
    _echo_transaction(txn, account_names)


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--date", "txn_date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", help="Transaction description")
@click.option("--num", help="Reference number")
@click.option("--notes", help="Notes")
@click.option("--split", "splits", multiple=True, help=SPLIT_HELP + " Replaces all splits.")
@click.pass_context
@cli_errors
def update_transaction(
    ctx,
    transaction_id: str,
    txn_date: str | None,
    description: str | None,
    num: str | None,
    notes: str | None,
    splits: tuple[str, ...],
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. When --split is given, the
    new splits replace the whole previous split set.

    Examples:
        piggybank transaction update <ID> --description "Dinner"
        piggybank transaction update <ID> --split "Expenses:Food=60" --split "Assets:Cash=-60"
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]

    parsed_date = _parse_cli_date(ctx, txn_date) if txn_date is not None else None
    split_inputs = _build_splits(ctx, AccountService(db), owner_id, splits) if splits else None

    txn = TransactionService(db).update_transaction(
        owner_id,
        transaction_id,
        date=parsed_date,
        description=description,
        num=num,
        notes=notes,
        splits=split_inputs,
    )
    click.echo(f"Updated transaction {txn.id}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
@cli_errors
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction and its splits permanently.

    Use 'transaction void' to keep the record but stop it counting.
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    service = TransactionService(db)

    txn = service.get_transaction(owner_id, transaction_id)

    # Confirm deletion
    if not yes and not click.confirm(f"Are you sure you want to delete transaction {txn.id}?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_transaction(owner_id, txn.id)
    click.echo(f"Deleted transaction {txn.id}")


@transaction_group.command("void")
@click.argument("transaction_id")
@click.option("--reason", help="Why the transaction is voided")
@click.pass_context
@cli_errors
def void_transaction(ctx, transaction_id: str, reason: str | None) -> None:
    """Void a transaction (it stays listed but no longer counts)."""
    txn = TransactionService(ctx.obj["db"]).void_transaction(
        ctx.obj["owner_id"], transaction_id, reason=reason
    )
    click.echo(f"Voided transaction {txn.id}")


@transaction_group.command("unvoid")
@click.argument("transaction_id")
@click.pass_context
@cli_errors
def unvoid_transaction(ctx, transaction_id: str) -> None:
    """Restore a voided transaction."""
    txn = TransactionService(ctx.obj["db"]).unvoid_transaction(ctx.obj["owner_id"], transaction_id)
    click.echo(f"Unvoided transaction {txn.id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
