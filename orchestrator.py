"""Backup run pipeline: prepare, discover, archive, bundle, publish.

One BackupRun executes once and returns a process exit code. Every fatal
failure is reported to the operators at most once; a failure while
reporting never replaces the error being reported.
"""

import html
import logging
import shutil
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List, Optional

from bundler import bundle_staging_dir

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class PipelineAborted(Exception):
    """A step failed and the operators have already been told."""


def best_effort(func: Callable, *args, **kwargs) -> bool:
    """Call func, logging and discarding any exception.

    Returns:
        True if the call completed, False if it raised
    """
    try:
        func(*args, **kwargs)
        return True
    except Exception as e:
        logger.error(f"Ignoring failure in {getattr(func, '__name__', func)}: {e}")
        return False


@dataclass(frozen=True)
class RunDates:
    """UTC calendar date of this run and of the run before it."""
    current: date
    previous: date

    @classmethod
    def today(cls, now: Optional[datetime] = None) -> 'RunDates':
        now = now or datetime.now(timezone.utc)
        current = now.astimezone(timezone.utc).date()
        return cls(current=current, previous=current - timedelta(days=1))

    @classmethod
    def for_date(cls, current: date) -> 'RunDates':
        return cls(current=current, previous=current - timedelta(days=1))


def success_message(run_date: date, volume_count: int, retention_days: int) -> str:
    return (
        "✅ Backup completed successfully!\n\n"
        f"📅 Date: {run_date.isoformat()}\n"
        f"📦 Volumes: {volume_count}\n"
        f"⏱ Link valid for: {retention_days} days"
    )


def _detail(error: Exception) -> str:
    # Messages are sent with HTML parse mode
    return html.escape(str(error) or error.__class__.__name__)


class BackupRun:
    """Sequence one backup run over injected collaborators.

    Args:
        config: RunConfig for this run
        archiver: object with list_volumes() and archive_volume(id, staging_dir)
        uploader: object with upload(local_path, key) -> UploadResult and key_for(date)
        notifier: object with notify(message, link=None)
        dates: RunDates, defaults to today (UTC)
        bundle: callable(staging_dir, output_path) producing the bundle
    """

    def __init__(self, config, archiver, uploader, notifier,
                 dates: Optional[RunDates] = None,
                 bundle: Callable[[Path, Path], Path] = bundle_staging_dir):
        self.config = config
        self.archiver = archiver
        self.uploader = uploader
        self.notifier = notifier
        self.dates = dates or RunDates.today()
        self.bundle = bundle

        self.backup_root = Path(config.backup_root)
        self.staging_dir = self.backup_root / self.dates.current.isoformat()
        self.previous_staging_dir = self.backup_root / self.dates.previous.isoformat()
        self.bundle_path = self.backup_root / f"{self.dates.current.isoformat()}.tar.gz"

    def run(self) -> int:
        """Execute the pipeline once and return the process exit code."""
        logger.info(f"Starting volume backup for {self.dates.current.isoformat()}")
        try:
            return self._run_pipeline()
        except PipelineAborted as e:
            logger.error(f"Backup aborted: {e}")
            return EXIT_FAILURE
        except Exception as e:
            logger.exception(f"Backup process failed: {e}")
            best_effort(self.notifier.notify, f"❌ Backup process failed: {_detail(e)}")
            return EXIT_FAILURE

    def _run_pipeline(self) -> int:
        self.prepare()

        volumes = self.archiver.list_volumes()
        if not volumes:
            msg = "No Docker volumes found to backup"
            logger.warning(msg)
            self.notifier.notify(f"⚠️ {msg}")
            return EXIT_SUCCESS

        self.archive_all(volumes)
        self.bundle(self.staging_dir, self.bundle_path)
        self.publish(len(volumes))

        logger.info("✓ Volume backup finished")
        return EXIT_SUCCESS

    def prepare(self):
        """Create today's staging dir and drop yesterday's leftovers."""
        self.staging_dir.mkdir(parents=True, exist_ok=True)

        try:
            if self.previous_staging_dir.exists():
                shutil.rmtree(self.previous_staging_dir)
                logger.info(f"Deleted previous backup directory: {self.previous_staging_dir}")
        except OSError as e:
            logger.error(f"Error handling previous backup directory: {e}")
            best_effort(
                self.notifier.notify,
                f"⚠️ Error handling previous backup directory: {_detail(e)}"
            )

    def archive_all(self, volumes: List[str]):
        """Archive volumes one at a time, stopping at the first failure."""
        for volume in volumes:
            try:
                self.archiver.archive_volume(volume, self.staging_dir)
            except Exception as e:
                logger.error(f"Error backing up volume {volume}: {e}")
                best_effort(
                    self.notifier.notify,
                    f"❌ Error backing up volume {html.escape(volume)}: {_detail(e)}"
                )
                raise PipelineAborted(f"volume {volume} failed: {e}") from e

    def publish(self, volume_count: int):
        """Upload the bundle, announce the download link, delete the local copy."""
        key = self.uploader.key_for(self.dates.current)
        result = self.uploader.upload(self.bundle_path, key)

        retention_days = self.config.retention_days
        download_url = result.presign(self.config.retention_seconds)

        self.notifier.notify(
            success_message(self.dates.current, volume_count, retention_days),
            download_url
        )
        logger.info(f"Download URL (valid for {retention_days} days): {download_url}")

        self.bundle_path.unlink()
        logger.info(f"Local backup file deleted: {self.bundle_path}")
