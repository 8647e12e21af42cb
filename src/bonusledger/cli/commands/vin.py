"""VIN management commands."""

import click
from bonusledger.cli.client_resolution import resolve_client_or_exit
from bonusledger.cli.error_handling import handle_domain_error
from bonusledger.domain.client import ClientService
from bonusledger.domain.errors import DomainError
from bonusledger.domain.vin import VinService


@click.group()
def vin_group():
    """Manage vehicles registered to clients."""
    pass


@vin_group.command("add")
@click.argument("client", metavar="CLIENT")
@click.argument("vin", metavar="VIN")
@click.option("--label", help="Machine label, e.g. 'Blue Golf'")
@click.pass_context
def add_vin(ctx, client: str, vin: str, label: str | None):
    """Register a VIN for a client.

    CLIENT can be a client ID or phone number.
    """
    db = ctx.obj["db"]
    client_obj = resolve_client_or_exit(ctx, ClientService(db), client)

    try:
        record = VinService(db).add_vin(client_obj.id, vin, machine_label=label)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added VIN {record.vin} for '{client_obj.name}' (ID: {record.id})")


@vin_group.command("list")
@click.argument("client", metavar="CLIENT")
@click.pass_context
def list_vins(ctx, client: str):
    """List a client's VINs."""
    db = ctx.obj["db"]
    client_obj = resolve_client_or_exit(ctx, ClientService(db), client)

    records = VinService(db).list_vins(client_obj.id)
    if not records:
        click.echo("No VINs found.")
        return

    for r in records:
        click.echo(f"{r.id} | {r.vin} | {r.machine_label or '-'}")


@vin_group.command("label")
@click.argument("vin_id", metavar="VIN_ID")
@click.argument("label", metavar="LABEL")
@click.pass_context
def label_vin(ctx, vin_id: str, label: str):
    """Set a VIN's machine label. An empty LABEL clears it."""
    try:
        record = VinService(ctx.obj["db"]).update_label(vin_id, label)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated VIN {record.vin}: label {record.machine_label or '-'}")


@vin_group.command("delete")
@click.argument("vin_id", metavar="VIN_ID")
@click.pass_context
def delete_vin(ctx, vin_id: str):
    """Delete a VIN record."""
    try:
        VinService(ctx.obj["db"]).delete_vin(vin_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted VIN record {vin_id}")


def register_commands(cli):
    """Register VIN commands with main CLI."""
    cli.add_command(vin_group, name="vin")
