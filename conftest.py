"""Shared pytest fixtures."""

import pytest

from config import load_config, REQUIRED_KEYS


@pytest.fixture
def base_env(tmp_path):
    """A complete environment for one run."""
    return {
        'BOT_TOKEN': '123456:test-token',
        'BOT_ADMIN_CHAT_IDS': '1001,1002',
        'S3_ACCESS_KEY_ID': 'AKIATEST',
        'S3_SECRET_ACCESS_KEY': 'secret-key-value',
        'S3_BUCKET': 'backups-bucket',
        'S3_ENDPOINT': 'https://s3.example.com',
        'BACKUP_ROOT': str(tmp_path / 'volume-backup'),
    }


@pytest.fixture
def run_config(base_env):
    return load_config(base_env)


@pytest.fixture
def required_keys():
    return REQUIRED_KEYS
