"""Configuration management for the volume backup job."""

import logging
import os
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, SecretStr, field_validator


DEFAULT_RETENTION_DAYS = 7
DEFAULT_BACKUP_ROOT = "volume-backup"

# Checked in this order; the first missing one is reported.
REQUIRED_KEYS = (
    'BOT_TOKEN',
    'BOT_ADMIN_CHAT_IDS',
    'S3_ACCESS_KEY_ID',
    'S3_SECRET_ACCESS_KEY',
    'S3_BUCKET',
    'S3_ENDPOINT',
)


class ConfigError(Exception):
    """Raised when a required setting is absent from the environment."""


class RunConfig(BaseModel):
    """Settings for a single backup run, loaded once at process start."""
    model_config = ConfigDict(frozen=True)

    bot_token: SecretStr
    admin_chat_ids: List[str]
    s3_access_key_id: str
    s3_secret_access_key: SecretStr
    s3_bucket: str
    s3_endpoint: str
    s3_region: str = "us-east-1"
    retention_days: int = DEFAULT_RETENTION_DAYS
    backup_root: Path = Path(DEFAULT_BACKUP_ROOT)
    archiver_image: str = "ubuntu"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator('backup_root', mode='before')
    @classmethod
    def expand_backup_root(cls, v):
        """Expand environment variables and user home directory."""
        return Path(os.path.expanduser(os.path.expandvars(str(v))))

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def retention_seconds(self) -> int:
        return self.retention_days * 24 * 60 * 60


def parse_chat_ids(raw: str) -> List[str]:
    """Split a comma separated list of chat ids, dropping blanks."""
    return [part.strip() for part in raw.split(',') if part.strip()]


def parse_retention_days(raw: Optional[str]) -> int:
    """Parse the retention period, falling back to the default.

    Anything that is not a positive integer (unset, empty, zero,
    negative, garbage) yields DEFAULT_RETENTION_DAYS.
    """
    try:
        days = int((raw or '').strip())
    except ValueError:
        return DEFAULT_RETENTION_DAYS
    return days if days > 0 else DEFAULT_RETENTION_DAYS


def load_config(environ: Optional[Mapping[str, str]] = None,
                backup_root: Optional[str] = None) -> RunConfig:
    """Build a RunConfig from the process environment.

    Args:
        environ: Mapping to read instead of os.environ
        backup_root: Override for BACKUP_ROOT (e.g. from the CLI)

    Returns:
        Validated RunConfig

    Raises:
        ConfigError: If a required variable is missing or empty
    """
    env = os.environ if environ is None else environ

    for key in REQUIRED_KEYS:
        if not env.get(key, '').strip():
            raise ConfigError(f"Missing environment variable: {key}")

    chat_ids = parse_chat_ids(env['BOT_ADMIN_CHAT_IDS'])
    if not chat_ids:
        raise ConfigError("Missing environment variable: BOT_ADMIN_CHAT_IDS")

    values = {
        'bot_token': env['BOT_TOKEN'].strip(),
        'admin_chat_ids': chat_ids,
        's3_access_key_id': env['S3_ACCESS_KEY_ID'].strip(),
        's3_secret_access_key': env['S3_SECRET_ACCESS_KEY'].strip(),
        's3_bucket': env['S3_BUCKET'].strip(),
        's3_endpoint': env['S3_ENDPOINT'].strip(),
        'retention_days': parse_retention_days(env.get('BACKUP_RETENTION_DAYS')),
    }

    optional = {
        's3_region': 'S3_REGION',
        'backup_root': 'BACKUP_ROOT',
        'archiver_image': 'BACKUP_ARCHIVER_IMAGE',
        'log_level': 'LOG_LEVEL',
        'log_file': 'LOG_FILE',
    }
    for field, key in optional.items():
        value = env.get(key, '').strip()
        if value:
            values[field] = value

    if backup_root:
        values['backup_root'] = backup_root

    try:
        return RunConfig(**values)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def setup_logging(config: RunConfig, verbose: bool = False):
    """Setup logging based on configuration."""
    log_level = logging.DEBUG if verbose else getattr(logging, config.log_level)
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.log_file:
        log_file = Path(config.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Quiet all libraries
    for name in ('boto3', 'botocore', 's3transfer', 'urllib3', 'httpx', 'httpcore'):
        logging.getLogger(name).setLevel(logging.WARNING)
