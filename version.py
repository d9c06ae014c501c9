import subprocess
import logging
from importlib.metadata import PackageNotFoundError, version

logger = logging.getLogger(__name__)

DISTRIBUTION = "volume-backup"


def get_version():
    """Get version from installed metadata, then git tags."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        pass

    try:
        # e.g. v1.2.0, v1.2.0-3-gabc1234, v1.2.0-dirty
        return subprocess.check_output(
            ['git', 'describe', '--tags', '--always', '--dirty=-dev'],
            stderr=subprocess.DEVNULL,
            text=True
        ).strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        logger.warning("Could not determine version from git, using fallback")
        return "v0.0.0"


__version__ = get_version()
