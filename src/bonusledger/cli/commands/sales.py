"""Sales report commands."""

import click
from bonusledger.cli.error_handling import handle_domain_error
from bonusledger.domain.errors import DomainError
from bonusledger.domain.sales import SalesService
from bonusledger.utils.date_parser import parse_date


@click.group()
def sales_group():
    """Review daily sales."""
    pass


@sales_group.command("summary")
@click.pass_context
def daily_summary(ctx):
    """Show per-day sales totals, most recent day first. Refunds are not counted."""
    service = SalesService(ctx.obj["db"])

    try:
        summaries = service.daily_summaries()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not summaries:
        click.echo("No sales found.")
        return

    click.echo(
        f"{'Date':10s} | {'Orders':>6s} | {'Amount':>12s} | {'Paid':>12s} | "
        f"{'Bonus used':>10s} | {'Bonus earned':>12s}"
    )
    click.echo("-" * 78)
    for s in summaries:
        click.echo(
            f"{s.date.isoformat():10s} | {s.orders_count:6d} | {s.total_purchase_amount:>12} | "
            f"{s.total_final_paid:>12} | {s.total_bonus_used:>10} | {s.total_bonus_earned:>12}"
        )


@sales_group.command("day")
@click.argument("day", metavar="DATE")
@click.pass_context
def day_transactions(ctx, day: str):
    """List purchases of one day (UTC).

    DATE can be YYYY-MM-DD or relative like 'today', 'yesterday'.
    Refunded purchases are marked.
    """
    service = SalesService(ctx.obj["db"])

    try:
        sales_date = parse_date(day)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        transactions = service.transactions_for_date(sales_date)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo(f"No purchases on {sales_date.isoformat()}.")
        return

    for t in transactions:
        marker = " [REFUNDED]" if t.is_refunded else ""
        click.echo(
            f"{t.created_at.isoformat()} | {t.id} | client {t.client_id} | amount {t.purchase_amount} | "
            f"bonus used {t.bonus_used} | paid {t.final_paid} | earned {t.bonus_earned}{marker}"
        )


def register_commands(cli):
    """Register sales commands with main CLI."""
    cli.add_command(sales_group, name="sales")
