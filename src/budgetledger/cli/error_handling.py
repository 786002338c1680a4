"""CLI error handling helpers."""

import click

from budgetledger.domain.errors import DomainError
from budgetledger.logger import get_logger

logger = get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error on stderr and exit with status 1.

    The error type and command path go to the debug log; the user only sees
    the message.
    """
    logger.debug(
        "command failed",
        command=ctx.command_path,
        error_type=type(error).__name__,
        error=str(error),
    )
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
