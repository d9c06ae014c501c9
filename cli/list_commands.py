"""List commands for inspecting what a run would back up."""

import click

from cli.utils import handle_error
from docker_volumes import VolumeArchiver


def register_commands(cli):
    """Register list commands with main CLI."""

    @cli.command('volumes')
    @click.pass_context
    def list_volumes(ctx):
        """List the docker volumes a backup run would archive.

        Does not need the bot or S3 settings and sends no notification.

        Examples:
            python -m main volumes
        """
        verbose = ctx.obj['verbose']

        try:
            volumes = VolumeArchiver().list_volumes()
        except Exception as e:
            handle_error(e, verbose)

        if not volumes:
            click.echo("No Docker volumes found to backup")
            return

        click.echo(f"Volumes ({len(volumes)}):")
        for volume in volumes:
            click.echo(f"  {volume}")
