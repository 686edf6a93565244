"""CLI helpers for date range options."""

from datetime import date

import click

from piggybank.utils.date_parser import get_date_range, parse_date

PERIODS = ("this-week", "this-month", "this-year", "last-week", "last-month", "last-year")


def date_range_options(func):
    """Add --start-date/--end-date and the period shortcut flags to a command.

    The command receives ``start_date``, ``end_date`` and one boolean keyword
    per period (``this_month`` and so on); pass them through
    ``period_flags_from_kwargs`` and ``resolve_cli_date_range``.
    """
    for period in reversed(PERIODS):
        func = click.option(
            f"--{period}",
            period.replace("-", "_"),
            is_flag=True,
            help=f"Limit to {period.replace('-', ' ')}",
        )(func)
    func = click.option(
        "--end-date", help="End date, inclusive (YYYY-MM-DD or relative like 'today')"
    )(func)
    func = click.option(
        "--start-date", help="Start date, inclusive (YYYY-MM-DD or relative like 'last month')"
    )(func)
    return func


def period_flags_from_kwargs(kwargs: dict) -> dict[str, bool]:
    """Pop the period flags added by date_range_options out of kwargs."""
    return {period: bool(kwargs.pop(period.replace("-", "_"), False)) for period in PERIODS}


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo(
            "Error: Only one period option (--"
            + ", --".join(PERIODS)
            + ") can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --last-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must not be after end date.", err=True)
        ctx.exit(1)

    if start is None and end is None and default_range is not None:
        start, end = default_range

    return start, end
