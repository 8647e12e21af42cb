"""CLI error handling helpers."""

import logging

import click

from bonusledger.domain.errors import DomainError, StorageError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Render a ledger error, log it and exit with failure.

    Storage failures are logged at ERROR; rejected input and conflicts at INFO.
    """
    level = logging.ERROR if isinstance(error, StorageError) else logging.INFO
    logger.log(level, "Command '%s' failed with %s: %s", ctx.info_name, type(error).__name__, error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
