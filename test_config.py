"""Tests for environment configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config import (
    ConfigError,
    DEFAULT_RETENTION_DAYS,
    load_config,
    parse_chat_ids,
    parse_retention_days,
)


def test_load_complete_environment(base_env, tmp_path):
    config = load_config(base_env)

    assert config.bot_token.get_secret_value() == '123456:test-token'
    assert config.admin_chat_ids == ['1001', '1002']
    assert config.s3_bucket == 'backups-bucket'
    assert config.s3_endpoint == 'https://s3.example.com'
    assert config.s3_region == 'us-east-1'
    assert config.retention_days == 7
    assert config.retention_seconds == 7 * 86400
    assert config.backup_root == tmp_path / 'volume-backup'
    assert config.archiver_image == 'ubuntu'


@pytest.mark.parametrize('missing', [
    'BOT_TOKEN',
    'BOT_ADMIN_CHAT_IDS',
    'S3_ACCESS_KEY_ID',
    'S3_SECRET_ACCESS_KEY',
    'S3_BUCKET',
    'S3_ENDPOINT',
])
def test_missing_required_key_is_fatal(base_env, missing):
    env = dict(base_env)
    del env[missing]

    with pytest.raises(ConfigError, match=f"Missing environment variable: {missing}"):
        load_config(env)


def test_empty_required_key_is_missing(base_env):
    env = dict(base_env, S3_BUCKET='   ')

    with pytest.raises(ConfigError, match='S3_BUCKET'):
        load_config(env)


def test_first_missing_key_is_reported(required_keys):
    with pytest.raises(ConfigError, match=required_keys[0]):
        load_config({})


def test_chat_id_list_of_only_commas_is_missing(base_env):
    env = dict(base_env, BOT_ADMIN_CHAT_IDS=' , ,')

    with pytest.raises(ConfigError, match='BOT_ADMIN_CHAT_IDS'):
        load_config(env)


def test_parse_chat_ids_strips_and_drops_blanks():
    assert parse_chat_ids('1, 2,,-1003 ,@ops') == ['1', '2', '-1003', '@ops']


@pytest.mark.parametrize('raw', [None, '', '0', 'abc', '-3', '1.5', '  '])
def test_retention_falls_back_to_default(raw):
    assert parse_retention_days(raw) == DEFAULT_RETENTION_DAYS


@pytest.mark.parametrize('raw, expected', [('1', 1), ('14', 14), (' 30 ', 30)])
def test_retention_positive_integer(raw, expected):
    assert parse_retention_days(raw) == expected


def test_retention_from_environment(base_env):
    config = load_config(dict(base_env, BACKUP_RETENTION_DAYS='3'))

    assert config.retention_days == 3
    assert config.retention_seconds == 3 * 86400


def test_optional_settings(base_env):
    env = dict(
        base_env,
        S3_REGION='eu-central-1',
        BACKUP_ARCHIVER_IMAGE='alpine:3.20',
        LOG_LEVEL='debug',
        LOG_FILE='/tmp/volume-backup.log',
    )
    config = load_config(env)

    assert config.s3_region == 'eu-central-1'
    assert config.archiver_image == 'alpine:3.20'
    assert config.log_level == 'DEBUG'
    assert config.log_file == '/tmp/volume-backup.log'


def test_backup_root_override_wins(base_env, tmp_path):
    config = load_config(base_env, backup_root=str(tmp_path / 'other'))

    assert config.backup_root == tmp_path / 'other'


def test_invalid_log_level_is_config_error(base_env):
    with pytest.raises(ConfigError, match='Invalid configuration'):
        load_config(dict(base_env, LOG_LEVEL='LOUD'))


def test_config_is_immutable(run_config):
    with pytest.raises(ValidationError):
        run_config.retention_days = 30


def test_secrets_are_not_in_repr(run_config):
    text = repr(run_config)

    assert 'test-token' not in text
    assert 'secret-key-value' not in text
