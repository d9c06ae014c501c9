"""Docker volume discovery and per-volume archiving."""

import logging
import subprocess
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


class VolumeDiscoveryError(Exception):
    """Raised when the docker volume list cannot be read."""


class VolumeArchiveError(Exception):
    """Raised when a volume could not be archived."""

    def __init__(self, volume: str, message: str):
        super().__init__(message)
        self.volume = volume


def _run(cmd: List[str]) -> subprocess.CompletedProcess:
    return subprocess.run(cmd, capture_output=True, text=True)


class VolumeArchiver:
    """Archive docker volumes with an ephemeral container.

    The volume is mounted read-only at /_data and the staging directory at
    /backup; the container writes /backup/<volume>.tar.gz and is removed.
    """

    def __init__(self, image: str = "ubuntu", docker: str = "docker"):
        self.image = image
        self.docker = docker

    def list_volumes(self) -> List[str]:
        """Return volume names in the order docker reports them."""
        cmd = [self.docker, 'volume', 'ls', '-q']
        try:
            result = _run(cmd)
        except FileNotFoundError as e:
            raise VolumeDiscoveryError(f"Docker CLI not found: {self.docker}") from e

        if result.returncode != 0:
            raise VolumeDiscoveryError(
                f"docker volume ls failed (exit {result.returncode}): {result.stderr.strip()}"
            )

        volumes = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        logger.info(f"Found {len(volumes)} docker volume(s)")
        return volumes

    def archive_command(self, volume: str, staging_dir: Path) -> List[str]:
        """Build the docker run command that archives one volume."""
        return [
            self.docker, 'run', '--rm',
            '-v', f"{volume}:/_data:ro",
            '-v', f"{Path(staging_dir).resolve()}:/backup",
            self.image,
            'tar', 'czf', f"/backup/{volume}.tar.gz", '-C', '/_data', '.',
        ]

    def archive_volume(self, volume: str, staging_dir: Path) -> Path:
        """Archive a volume to staging_dir/<volume>.tar.gz.

        Raises:
            VolumeArchiveError: If the archiving container exits non-zero
        """
        backup_file = Path(staging_dir) / f"{volume}.tar.gz"
        cmd = self.archive_command(volume, staging_dir)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = _run(cmd)
        except FileNotFoundError as e:
            raise VolumeArchiveError(volume, f"Docker CLI not found: {self.docker}") from e

        if result.returncode != 0:
            raise VolumeArchiveError(
                volume,
                f"archive container exited with {result.returncode}: {result.stderr.strip()}"
            )

        logger.info(f"Backup of volume '{volume}' completed: {backup_file}")
        return backup_file
