"""Split commands."""

import json

import click

from piggybank.cli.error_handling import cli_errors
from piggybank.domain.serialization import split_to_dict
from piggybank.domain.transaction import TransactionService


@click.group()
def split_group():
    """Manage individual splits."""
    pass


@split_group.command("reconcile")
@click.argument("split_id")
@click.argument(
    "status",
    type=click.Choice(["NEW", "CLEARED", "RECONCILED"], case_sensitive=False),
)
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
@cli_errors
def reconcile_split(ctx, split_id: str, status: str, as_json: bool) -> None:
    """Set the reconciliation status of a split.

    STATUS is NEW, CLEARED or RECONCILED; any status can be set from any
    other.

    Examples:
        piggybank split reconcile <SPLIT_ID> CLEARED
    """
    split = TransactionService(ctx.obj["db"]).set_reconcile_status(
        ctx.obj["owner_id"], split_id, status
    )
    if as_json:
        click.echo(json.dumps(split_to_dict(split), indent=2))
        return
    click.echo(f"Split {split.id} is now {split.reconcile_status.name} ({split.reconcile_status.symbol})")


def register_commands(cli: click.Group) -> None:
    """Register split commands with main CLI."""
    cli.add_command(split_group, name="split")
