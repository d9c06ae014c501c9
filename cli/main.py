"""Main CLI entry point - Root command group with global options."""

import click

from version import __version__


@click.group()
@click.option('--backup-root', default=None,
              help='Backup root directory (overrides BACKUP_ROOT)')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging on console')
@click.version_option(version=__version__, prog_name='Volume Backup')
@click.pass_context
def cli(ctx, backup_root, verbose):
    """Volume Backup - Docker volume backups to S3 with Telegram reports.

    Every run archives each docker volume, bundles the archives into one
    dated file, uploads it to an S3-compatible bucket and sends the admin
    chats a time-limited download link.

    Settings come from the environment:
        BOT_TOKEN, BOT_ADMIN_CHAT_IDS,
        S3_ACCESS_KEY_ID, S3_SECRET_ACCESS_KEY, S3_BUCKET, S3_ENDPOINT,
        BACKUP_RETENTION_DAYS (optional, default 7)

    Examples:
        # Run one backup
        python -m main run

        # List the volumes a run would archive
        python -m main volumes
    """
    ctx.ensure_object(dict)
    ctx.obj['backup_root'] = backup_root
    ctx.obj['verbose'] = verbose


def register_all_commands():
    """Register all command modules with the main CLI."""
    from cli import (
        backup_commands,
        config_commands,
        list_commands,
    )

    backup_commands.register_commands(cli)
    config_commands.register_commands(cli)
    list_commands.register_commands(cli)


# Register all commands when module is imported
register_all_commands()
