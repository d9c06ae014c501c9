"""Combine a run's per-volume archives into one dated bundle."""

import logging
import shutil
import tarfile
from pathlib import Path

logger = logging.getLogger(__name__)


def format_size(bytes_size: int) -> str:
    """Format bytes as human-readable size."""
    if bytes_size == 0:
        return "0 B"
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes_size < 1024.0:
            return f"{bytes_size:.2f} {unit}"
        bytes_size /= 1024.0
    return f"{bytes_size:.2f} PB"


def bundle_staging_dir(staging_dir: Path, output_path: Path,
                       compression_level: int = 6) -> Path:
    """Tar and gzip the contents of staging_dir, then remove staging_dir.

    Members are stored relative to the staging directory (./<volume>.tar.gz).
    Errors from either step propagate to the caller.

    Args:
        staging_dir: Directory holding the per-volume archives
        output_path: Bundle file to create
        compression_level: Gzip compression level (1-9)

    Returns:
        Path to the created bundle
    """
    staging_dir = Path(staging_dir)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    members = sorted(staging_dir.iterdir())
    logger.info(f"Creating bundle: {output_path}")
    logger.info(f"  Archives: {len(members)}")

    with tarfile.open(output_path, 'w:gz', compresslevel=compression_level) as tar:
        for member in members:
            tar.add(member, arcname=f"./{member.name}")

    logger.info(f"✓ Bundle created: {output_path} ({format_size(output_path.stat().st_size)})")

    shutil.rmtree(staging_dir)
    logger.info(f"Removed staging directory: {staging_dir}")

    return output_path
