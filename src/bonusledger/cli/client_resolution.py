"""CLI helpers for client resolution and error handling."""

from __future__ import annotations

import click
from bonusledger.domain.client import ClientService
from bonusledger.domain.entities import Client
from bonusledger.domain.errors import NotFoundError


def resolve_client(client_service: ClientService, client: str) -> Client:
    """Resolve a client ID or phone number to a client.

    Args:
        client_service: ClientService instance
        client: Client ID or phone number

    Returns:
        Client entity

    Raises:
        NotFoundError: If no client matches
    """
    client = client.strip()
    found = client_service.get_client(client)
    if found is None:
        found = client_service.get_client_by_phone(client)
    if found is None:
        raise NotFoundError(f"Client '{client}' not found")
    return found


def resolve_client_or_exit(ctx: click.Context, client_service: ClientService, client: str) -> Client:
    """Resolve client ID or phone, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_client(client_service, client)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
