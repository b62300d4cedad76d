"""Binary asset storage adapter.

Content never holds bytes, only the reference strings this adapter hands
out: an S3 key and the public URL derived from it.
"""

import os
import re

import boto3
import structlog
from botocore.exceptions import ClientError

logger = structlog.get_logger()

UPLOAD_URL_EXPIRES = 900

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str) -> str:
    """Reduce a client-supplied filename to characters safe in an S3 key."""
    name = _UNSAFE_FILENAME_CHARS.sub("-", filename.strip()).strip("-.")
    return name.lower() or "upload"


class AssetStore:
    """Presigned uploads and public URLs for the media bucket."""

    def __init__(self, bucket: str | None = None, public_base_url: str | None = None) -> None:
        """Initialize asset store.

        Args:
            bucket: Bucket name. Defaults to ASSET_BUCKET env var.
            public_base_url: CDN/base URL objects are served from. Defaults to
                ASSET_PUBLIC_BASE_URL, then the bucket's S3 URL.
        """
        self.bucket = bucket or os.environ.get("ASSET_BUCKET", "")
        self.public_base_url = (
            public_base_url
            or os.environ.get("ASSET_PUBLIC_BASE_URL")
            or f"https://{self.bucket}.s3.amazonaws.com"
        ).rstrip("/")
        self._s3 = None

    @property
    def s3(self):
        """Get S3 client (lazy initialization)."""
        if self._s3 is None:
            self._s3 = boto3.client("s3")
        return self._s3

    def object_key(self, media_id: str, filename: str) -> str:
        return f"media/{media_id}/{safe_filename(filename)}"

    def public_url(self, s3_key: str) -> str:
        """Public URL an object is served from."""
        return f"{self.public_base_url}/{s3_key}"

    def generate_upload_url(self, s3_key: str, content_type: str) -> str:
        """Presigned PUT URL for uploading one object directly to the bucket."""
        return self.s3.generate_presigned_url(
            "put_object",
            Params={
                "Bucket": self.bucket,
                "Key": s3_key,
                "ContentType": content_type,
            },
            ExpiresIn=UPLOAD_URL_EXPIRES,
        )

    def delete_object(self, s3_key: str) -> None:
        """Delete one object. A missing object is not an error."""
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=s3_key)
            logger.info("Asset deleted", bucket=self.bucket, key=s3_key)
        except ClientError as e:
            if e.response["Error"]["Code"] in ("NoSuchKey", "404"):
                return
            logger.error("Asset delete failed", bucket=self.bucket, key=s3_key, error=str(e))
            raise
