"""Backup run command."""

import sys

import click

from cli.utils import (
    load_app_config,
    setup_logging_from_context,
    handle_error
)
from config import ConfigError
from docker_volumes import VolumeArchiver
from notifications import TelegramNotifier
from orchestrator import BackupRun
from s3_backup import S3Uploader


def register_commands(cli):
    """Register backup commands with main CLI."""

    @cli.command('run')
    @click.option('--no-progress', is_flag=True, help='Hide the upload progress bar')
    @click.pass_context
    def run(ctx, no_progress):
        """Run one backup of every docker volume.

        Steps:
        - Create today's staging directory, remove yesterday's leftovers
        - Archive each docker volume into the staging directory
        - Bundle the archives into <backup-root>/<date>.tar.gz
        - Upload to s3://<bucket>/backups/<date>.tar.gz
        - Send the admin chats a download link valid for the retention period

        Exits 0 on success (including when there are no volumes), 1 otherwise.

        Examples:
            python -m main run
            python -m main --backup-root /srv/volume-backup run
        """
        verbose = ctx.obj['verbose']

        try:
            config = load_app_config(ctx)
        except ConfigError as e:
            handle_error(e, verbose)

        setup_logging_from_context(ctx, config)

        try:
            archiver = VolumeArchiver(image=config.archiver_image)
            uploader = S3Uploader.from_config(config, show_progress=not no_progress)
            notifier = TelegramNotifier.from_config(config)
        except Exception as e:
            handle_error(e, verbose)

        exit_code = BackupRun(config, archiver, uploader, notifier).run()
        sys.exit(exit_code)
