"""Client management commands."""

import click
from bonusledger.cli.client_resolution import resolve_client_or_exit
from bonusledger.cli.error_handling import handle_domain_error
from bonusledger.domain.client import ClientService
from bonusledger.domain.errors import DomainError


@click.group()
def client_group():
    """Manage loyalty clients."""
    pass


@client_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--phone", required=True, help="Phone number in the form 8XXXXXXXXXX")
@click.option(
    "--role",
    type=click.Choice(["client", "master"]),
    default="client",
    show_default=True,
    help="Client role",
)
@click.option("--vin", help="Vehicle identification number (optional)")
@click.pass_context
def create_client(ctx, name: str, phone: str, role: str, vin: str | None):
    """Create a new client.

    Examples:
        bonusledger client create "Ivan Petrov" --phone 89161234567
        bonusledger client create "Garage Master" --phone 89990001122 --role master --vin WVWZZZ1JZXW000001
    """
    service = ClientService(ctx.obj["db"])

    try:
        client = service.create_client(name=name, phone=phone, role=role, vin=vin)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created client '{client.name}' (ID: {client.id})")


@client_group.command("list")
@click.pass_context
def list_clients(ctx):
    """List all clients with bonus balances."""
    service = ClientService(ctx.obj["db"])

    try:
        clients = service.list_clients()
        available = service.available_bonus_balances(
            [c.id for c in clients], best_effort=True
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    click.echo("-" * 100)
    for c in clients:
        vins = ", ".join(v.vin for v in c.vins) or "-"
        click.echo(
            f"{c.id} | {c.name:20s} | {c.phone or '-':11s} | {c.role.value:6s} | "
            f"Balance: {c.bonus_balance:>9} | Available: {available[c.id]:>9} | "
            f"Orders: {c.total_orders_count:3d} | Sum: {c.total_purchases_sum:>10} | VIN: {vins}"
        )


@client_group.command("update")
@click.argument("client", metavar="CLIENT")
@click.option("--name", help="New client name")
@click.option("--phone", help="New phone number")
@click.option("--role", type=click.Choice(["client", "master"]), help="New role")
@click.pass_context
def update_client(ctx, client: str, name: str | None, phone: str | None, role: str | None) -> None:
    """Update a client.

    CLIENT can be a client ID or phone number. Only the provided fields change.

    Examples:
        bonusledger client update 89161234567 --name "Ivan P."
    """
    service = ClientService(ctx.obj["db"])
    client_obj = resolve_client_or_exit(ctx, service, client)

    try:
        updated = service.update_client(client_obj.id, name=name, phone=phone, role=role)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated client '{updated.name}' (ID: {updated.id})")


@client_group.command("delete")
@click.argument("client", metavar="CLIENT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_client(ctx, client: str, yes: bool) -> None:
    """Delete a client and its whole transaction history.

    CLIENT can be a client ID or phone number.
    """
    service = ClientService(ctx.obj["db"])
    client_obj = resolve_client_or_exit(ctx, service, client)

    if not yes and not click.confirm(
        f"Delete client '{client_obj.name}' and {client_obj.total_orders_count} order(s) of history?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_client(client_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted client '{client_obj.name}'")


@client_group.command("balance")
@click.argument("client", metavar="CLIENT")
@click.pass_context
def client_balance(ctx, client: str) -> None:
    """Show bonus balance and the part of it available for redemption."""
    service = ClientService(ctx.obj["db"])
    client_obj = resolve_client_or_exit(ctx, service, client)

    try:
        available = service.available_bonus_balance(client_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Client: {client_obj.name} (ID: {client_obj.id})")
    click.echo(f"Bonus balance: {client_obj.bonus_balance}")
    click.echo(f"Available to redeem: {available}")
    click.echo(f"Orders: {client_obj.total_orders_count}")
    click.echo(f"Purchases sum: {client_obj.total_purchases_sum}")


@client_group.command("purchases")
@click.argument("client", metavar="CLIENT")
@click.pass_context
def client_purchases(ctx, client: str) -> None:
    """List a client's purchases, newest first."""
    service = ClientService(ctx.obj["db"])
    client_obj = resolve_client_or_exit(ctx, service, client)

    try:
        purchases = service.purchases_for_client(client_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not purchases:
        click.echo("No purchases found.")
        return

    for p in purchases:
        click.echo(f"{p.id} | {p.created_at.isoformat()} | {p.purchase_amount:>10}")


@client_group.command("check")
@click.argument("client", metavar="CLIENT")
@click.pass_context
def check_client(ctx, client: str) -> None:
    """Verify cached totals against a replay of the transaction log."""
    service = ClientService(ctx.obj["db"])
    client_obj = resolve_client_or_exit(ctx, service, client)

    try:
        totals = service.reconcile(client_obj.id)
        consistent = service.is_consistent(client_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Replayed: balance {totals.bonus_balance}, sum {totals.total_purchases_sum}, "
        f"orders {totals.total_orders_count}"
    )
    if consistent:
        click.echo("Cached totals are consistent with the transaction log.")
    else:
        click.echo("Cached totals DIFFER from the transaction log.", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register client commands with main CLI."""
    cli.add_command(client_group, name="client")
