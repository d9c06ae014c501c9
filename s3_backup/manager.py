"""S3 Upload Manager - pushes run bundles to S3-compatible storage.

Objects are written under backups/<date>.tar.gz and shared through
presigned GET links; nothing here deletes remote objects.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Callable

import boto3
from botocore.config import Config as BotoConfig
from tqdm import tqdm

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "backups"

# SigV4 presigned URLs cannot outlive seven days
MAX_PRESIGN_SECONDS = 7 * 24 * 60 * 60


@dataclass
class UploadResult:
    """Result of a bundle upload."""
    key: str
    size: int
    upload_time: float
    presign: Callable[[int], str]


class S3Uploader:
    """Upload bundle archives and issue time-limited download links."""

    def __init__(self, bucket: str, endpoint_url: str,
                 access_key_id: str, secret_access_key: str,
                 region: str = "us-east-1", client=None,
                 show_progress: bool = True):
        self.bucket = bucket
        self.show_progress = show_progress

        if client is None:
            boto_config = BotoConfig(
                region_name=region,
                signature_version='s3v4',
                retries={'max_attempts': 3, 'mode': 'adaptive'}
            )
            client = boto3.client(
                's3',
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                config=boto_config
            )
        self.s3_client = client

        logger.info(f"S3 uploader initialized for bucket: {bucket} ({endpoint_url})")

    @classmethod
    def from_config(cls, config, **kwargs) -> 'S3Uploader':
        return cls(
            bucket=config.s3_bucket,
            endpoint_url=config.s3_endpoint,
            access_key_id=config.s3_access_key_id,
            secret_access_key=config.s3_secret_access_key.get_secret_value(),
            region=config.s3_region,
            **kwargs
        )

    @staticmethod
    def key_for(run_date: date) -> str:
        """S3 key for a run's bundle."""
        return f"{BACKUP_PREFIX}/{run_date.isoformat()}.tar.gz"

    def presign(self, key: str, expiry_seconds: int) -> str:
        """Generate a presigned GET URL for an uploaded object."""
        if expiry_seconds > MAX_PRESIGN_SECONDS:
            logger.warning(
                f"Requested link expiry {expiry_seconds}s exceeds the SigV4 limit "
                f"of {MAX_PRESIGN_SECONDS}s; the endpoint may reject it early"
            )
        return self.s3_client.generate_presigned_url(
            'get_object',
            Params={'Bucket': self.bucket, 'Key': key},
            ExpiresIn=expiry_seconds
        )

    def upload(self, local_path: Path, key: str) -> UploadResult:
        """Stream a local file to S3 under key.

        Errors from boto3 propagate unchanged.

        Returns:
            UploadResult whose presign(expiry_seconds) is bound to the object
        """
        local_path = Path(local_path)
        file_size = local_path.stat().st_size

        logger.info("Uploading bundle to S3...")
        logger.info(f"  Source: {local_path}")
        logger.info(f"  Destination: s3://{self.bucket}/{key}")

        start_time = datetime.now()

        with tqdm(total=file_size, unit='B', unit_scale=True,
                  desc="  Uploading", leave=False,
                  disable=not self.show_progress) as pbar:

            def upload_callback(bytes_amount):
                pbar.update(bytes_amount)

            with open(local_path, 'rb') as f:
                self.s3_client.upload_fileobj(
                    f,
                    self.bucket,
                    key,
                    ExtraArgs={
                        'ContentType': 'application/gzip',
                        'Metadata': {
                            'original_size': str(file_size),
                            'created_by': 'volume-backup'
                        }
                    },
                    Callback=upload_callback
                )

        upload_time = (datetime.now() - start_time).total_seconds()
        logger.info(f"Backup uploaded to S3: {key}")
        logger.info(f"  Time: {upload_time:.1f}s")

        def presign(expiry_seconds: int) -> str:
            return self.presign(key, expiry_seconds)

        return UploadResult(key=key, size=file_size, upload_time=upload_time, presign=presign)
