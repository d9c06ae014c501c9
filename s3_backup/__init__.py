"""S3 upload module for the volume backup job.

Uploads run bundles to S3-compatible storage and issues presigned links.
"""

from .manager import S3Uploader, UploadResult, MAX_PRESIGN_SECONDS

__all__ = [
    'S3Uploader',
    'UploadResult',
    'MAX_PRESIGN_SECONDS',
]
