"""Object storage for uploaded content files and partner logos.

The backend exposes an S3-compatible endpoint, so uploads go through a boto3
S3 client. boto3 is blocking; async callers run these methods through
``asyncio.to_thread``.
"""

from typing import Any
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from thinktank_api.core.errors import RemoteError


def create_storage_client(
    endpoint_url: str,
    access_key_id: str | None,
    secret_access_key: str | None,
    region: str = "us-east-1",
) -> Any:
    """Create a boto3 S3 client for the backend's storage endpoint.

    Path-style addressing is required because bucket names are not DNS
    subdomains of the endpoint.

    Args:
        endpoint_url: S3-compatible endpoint URL.
        access_key_id: Storage access key.
        secret_access_key: Storage secret key.
        region: Signing region.

    Returns:
        Configured boto3 S3 client.
    """
    config = Config(
        s3={"addressing_style": "path"},
        request_checksum_calculation="when_required",
        response_checksum_validation="when_required",
    )
    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        region_name=region,
        config=config,
    )


class ObjectStorage:
    """Upload objects and compute their public URLs.

    Args:
        client: boto3 S3 client.
        public_url_base: Base URL for public objects, without a trailing slash.
    """

    def __init__(self, client: Any, public_url_base: str) -> None:
        self._client = client
        self._public_url_base = public_url_base.rstrip("/")

    def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        """Store ``content`` at ``bucket/path`` and return its public URL.

        Raises:
            RemoteError: If the storage service rejects the upload.
        """
        try:
            self._client.put_object(Bucket=bucket, Key=path, Body=content, ContentType=content_type)
        except ClientError as exc:
            message = exc.response.get("Error", {}).get("Message") or str(exc)
            logger.error("Upload of {}/{} failed: {}", bucket, path, message)
            raise RemoteError(message) from exc
        except BotoCoreError as exc:
            logger.error("Upload of {}/{} failed: {}", bucket, path, exc)
            raise RemoteError(str(exc)) from exc
        logger.info(f"Uploaded {bucket}/{path} ({len(content)} bytes)")
        return self.get_public_url(bucket, path)

    def get_public_url(self, bucket: str, path: str) -> str:
        """Return the public URL for ``bucket/path``. Pure; no network call."""
        return f"{self._public_url_base}/{bucket}/{quote(path)}"
