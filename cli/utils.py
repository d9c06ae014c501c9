"""Shared utilities for CLI commands."""

import sys

import click

from config import load_config, setup_logging, RunConfig


def load_app_config(ctx: click.Context) -> RunConfig:
    """Load the run configuration using overrides from the Click context.

    Raises:
        ConfigError: If a required environment variable is missing
    """
    return load_config(backup_root=ctx.obj.get('backup_root'))


def setup_logging_from_context(ctx: click.Context, config: RunConfig):
    """Configure logging from Click context."""
    setup_logging(config, ctx.obj.get('verbose', False))


def handle_error(error: Exception, verbose: bool = False):
    """Handle and display errors consistently.

    Args:
        error: Exception to handle
        verbose: Whether to show full traceback
    """
    click.echo(f"Error: {error}", err=True)
    if verbose:
        import traceback
        click.echo(traceback.format_exc(), err=True)
    sys.exit(1)


def mask_secret(value: str, visible: int = 4) -> str:
    """Mask all but the last few characters of a secret.

    Args:
        value: Secret to mask
        visible: Number of trailing characters to keep

    Returns:
        Masked string (e.g., "********abcd")
    """
    if len(value) <= visible:
        return '*' * len(value)
    return '*' * (len(value) - visible) + value[-visible:]
