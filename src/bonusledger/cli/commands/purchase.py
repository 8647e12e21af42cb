"""Purchase and refund commands."""

import click
from bonusledger.cli.client_resolution import resolve_client_or_exit
from bonusledger.cli.error_handling import handle_domain_error
from bonusledger.domain.bonus_policy import compute_max_redeemable
from bonusledger.domain.client import ClientService
from bonusledger.domain.errors import DomainError
from bonusledger.domain.purchase import PurchaseService
from bonusledger.domain.refund import RefundService
from bonusledger.utils.amount_parser import parse_amount
from bonusledger.utils.money import round_money


@click.command("purchase")
@click.argument("client", metavar="CLIENT")
@click.argument("amount", metavar="AMOUNT")
@click.option(
    "--bonus",
    default="0",
    show_default=True,
    help="Bonus to redeem: an amount or 'max' for the largest allowed redemption",
)
@click.option(
    "--no-accrue",
    is_flag=True,
    help="Redeem only: do not accrue bonus on this purchase",
)
@click.pass_context
def record_purchase(ctx, client: str, amount: str, bonus: str, no_accrue: bool):
    """Record a purchase for a client.

    CLIENT can be a client ID or phone number. Redemption is limited to 20% of
    the purchase and to the bonus available after the 10-hour hold.

    Examples:
        bonusledger purchase 89161234567 1500
        bonusledger purchase 89161234567 1500 --bonus max
        bonusledger purchase 89161234567 1500 --bonus 100 --no-accrue
    """
    db = ctx.obj["db"]
    client_service = ClientService(db)
    purchase_service = PurchaseService(db)

    client_obj = resolve_client_or_exit(ctx, client_service, client)

    # Parse amount
    try:
        purchase_amount = round_money(parse_amount(amount))
    except (ValueError, ArithmeticError) as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        available = client_service.available_bonus_balance(client_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    max_redeemable = compute_max_redeemable(purchase_amount, available)

    # Parse bonus
    if bonus.strip().lower() == "max":
        bonus_used = max_redeemable
    else:
        try:
            bonus_used = round_money(parse_amount(bonus))
        except (ValueError, ArithmeticError) as e:
            click.echo(f"Error: Invalid bonus format: {e}", err=True)
            ctx.exit(1)
        if bonus_used > max_redeemable:
            click.echo(
                f"Error: Bonus {bonus_used} exceeds the redeemable maximum {max_redeemable} "
                f"(available balance {available})",
                err=True,
            )
            ctx.exit(1)

    try:
        txn = purchase_service.record_purchase(
            client_id=client_obj.id,
            purchase_amount=purchase_amount,
            bonus_used=bonus_used,
            accrue_bonus=not no_accrue,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded purchase {txn.id} for '{client_obj.name}'")
    click.echo(f"  Amount:       {txn.purchase_amount}")
    click.echo(f"  Bonus used:   {txn.bonus_used}")
    click.echo(f"  Final paid:   {txn.final_paid}")
    click.echo(f"  Bonus earned: {txn.bonus_earned}")


@click.command("refund")
@click.argument("transaction_id", metavar="TRANSACTION_ID")
@click.pass_context
def refund_transaction(ctx, transaction_id: str):
    """Refund a purchase.

    The purchase stays in the history; a refund entry negating it is added and
    the client's bonus balance and statistics are adjusted.
    """
    service = RefundService(ctx.obj["db"])

    try:
        refund = service.refund(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Refunded transaction {transaction_id} (refund ID: {refund.id})")
    click.echo(f"  Amount returned:   {-refund.purchase_amount}")
    click.echo(f"  Bonus restored:    {-refund.bonus_used}")
    click.echo(f"  Bonus revoked:     {-refund.bonus_earned}")


def register_commands(cli):
    """Register purchase and refund commands with main CLI."""
    cli.add_command(record_purchase)
    cli.add_command(refund_transaction)
