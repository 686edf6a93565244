"""CLI error handling helpers."""

import functools

import click

from piggybank.domain.errors import DomainError
from piggybank.logging_config import get_logger

logger = get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_unexpected_error(ctx: click.Context, error: Exception) -> None:
    """Log an unclassified failure and report it without internals."""
    logger.error("Unexpected error in '%s'", ctx.command_path, exc_info=error)
    click.echo("Error: An unexpected error occurred", err=True)
    ctx.exit(1)


def cli_errors(func):
    """Turn domain and unexpected errors raised by a command into exit code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except (click.exceptions.Exit, click.ClickException, click.Abort):
            raise
        except DomainError as e:
            handle_domain_error(ctx, e)
        except Exception as e:
            handle_unexpected_error(ctx, e)

    return wrapper
