"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from cli import backup_commands, list_commands
from cli.main import cli
from config import REQUIRED_KEYS


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_env(base_env):
    env = {key: None for key in REQUIRED_KEYS}
    env.update(base_env)
    return env


def test_config_show_masks_secrets(runner, cli_env):
    result = runner.invoke(cli, ['config', 'show'], env=cli_env)

    assert result.exit_code == 0, result.output
    assert 'test-token' not in result.output
    assert 'secret-key-value' not in result.output
    assert '*' in result.output
    assert 'Bucket:   backups-bucket' in result.output
    assert 'Retention: 7 days' in result.output
    assert '1001, 1002' in result.output


def test_config_show_names_missing_key(runner, cli_env):
    cli_env['S3_BUCKET'] = None

    result = runner.invoke(cli, ['config', 'show'], env=cli_env)

    assert result.exit_code == 1
    assert 'Missing environment variable: S3_BUCKET' in result.output


def test_run_missing_key_fails_before_any_remote_call(runner, cli_env, monkeypatch):
    created = []
    monkeypatch.setattr(backup_commands, 'BackupRun',
                        lambda *args, **kwargs: created.append(args))
    cli_env['BOT_TOKEN'] = None

    result = runner.invoke(cli, ['run'], env=cli_env)

    assert result.exit_code == 1
    assert 'Missing environment variable: BOT_TOKEN' in result.output
    assert created == []


def test_run_exits_with_pipeline_code(runner, cli_env, monkeypatch, tmp_path):
    seen = {}

    class StubRun:
        def __init__(self, config, archiver, uploader, notifier):
            seen['config'] = config
            seen['archiver'] = archiver

        def run(self):
            return 1

    monkeypatch.setattr(backup_commands, 'BackupRun', StubRun)
    monkeypatch.setattr(backup_commands, 'setup_logging_from_context', lambda ctx, config: None)
    root = tmp_path / 'elsewhere'

    result = runner.invoke(cli, ['--backup-root', str(root), 'run', '--no-progress'], env=cli_env)

    assert result.exit_code == 1
    assert seen['config'].backup_root == root
    assert seen['archiver'].image == 'ubuntu'


def test_volumes_lists_names(runner, monkeypatch):
    monkeypatch.setattr(list_commands.VolumeArchiver, 'list_volumes',
                        lambda self: ['pgdata', 'redis'])

    result = runner.invoke(cli, ['volumes'])

    assert result.exit_code == 0
    assert 'Volumes (2):' in result.output
    assert '  pgdata' in result.output


def test_volumes_empty(runner, monkeypatch):
    monkeypatch.setattr(list_commands.VolumeArchiver, 'list_volumes', lambda self: [])

    result = runner.invoke(cli, ['volumes'])

    assert result.exit_code == 0
    assert 'No Docker volumes found to backup' in result.output


def test_volumes_takes_no_image_option(runner, monkeypatch):
    monkeypatch.setattr(list_commands.VolumeArchiver, 'list_volumes', lambda self: [])

    result = runner.invoke(cli, ['volumes', '--image', 'alpine'])

    assert result.exit_code == 2
    assert 'No such option' in result.output
