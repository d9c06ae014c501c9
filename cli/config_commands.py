"""Configuration inspection commands."""

import click

from cli.utils import (
    load_app_config,
    handle_error,
    mask_secret
)
from s3_backup.manager import BACKUP_PREFIX


def register_commands(cli):
    """Register config commands with main CLI."""

    @cli.group('config')
    @click.pass_context
    def config_group(ctx):
        """Configuration commands.

        Inspect the settings a backup run would use.
        """
        pass

    @config_group.command('show')
    @click.pass_context
    def show_config(ctx):
        """Display the effective configuration.

        Secrets are masked. Exits 1 naming the first missing variable
        when the environment is incomplete.

        Examples:
            python -m main config show
        """
        verbose = ctx.obj['verbose']

        try:
            config = load_app_config(ctx)
        except Exception as e:
            handle_error(e, verbose)

        click.echo("Telegram:")
        click.echo(f"  Bot token: {mask_secret(config.bot_token.get_secret_value())}")
        click.echo(f"  Admin chats: {', '.join(config.admin_chat_ids)}")

        click.echo("\nS3:")
        click.echo(f"  Endpoint: {config.s3_endpoint}")
        click.echo(f"  Region:   {config.s3_region}")
        click.echo(f"  Bucket:   {config.s3_bucket}")
        click.echo(f"  Prefix:   {BACKUP_PREFIX}/")
        click.echo(f"  Access key: {config.s3_access_key_id}")
        click.echo(f"  Secret key: {mask_secret(config.s3_secret_access_key.get_secret_value())}")

        click.echo("\nBackup:")
        click.echo(f"  Root:      {config.backup_root}")
        click.echo(f"  Image:     {config.archiver_image}")
        click.echo(f"  Retention: {config.retention_days} days")

        click.echo("\nLogging:")
        click.echo(f"  Level: {config.log_level}")
        click.echo(f"  File:  {config.log_file or '(console only)'}")

        click.echo("\n✓ Configuration is complete")
