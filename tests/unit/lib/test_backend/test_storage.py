"""Tests for object storage uploads against a moto S3 backend."""

from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from thinktank_api.core.errors import RemoteError
from thinktank_api.lib.backend.storage import ObjectStorage, create_storage_client

PUBLIC_URL = "https://backend.test/storage/v1/object/public"


@pytest.fixture
def s3():
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket="admin-uploads")
        yield client


class TestObjectStorage:
    def test_upload_stores_object_and_returns_public_url(self, s3) -> None:
        storage = ObjectStorage(s3, PUBLIC_URL)

        url = storage.upload("admin-uploads", "content/abc-1700000000000.pdf", b"%PDF-1.7", "application/pdf")

        assert url == f"{PUBLIC_URL}/admin-uploads/content/abc-1700000000000.pdf"
        stored = s3.get_object(Bucket="admin-uploads", Key="content/abc-1700000000000.pdf")
        assert stored["Body"].read() == b"%PDF-1.7"
        assert stored["ContentType"] == "application/pdf"

    def test_missing_bucket_raises_remote_error(self, s3) -> None:
        storage = ObjectStorage(s3, PUBLIC_URL)
        with pytest.raises(RemoteError):
            storage.upload("no-such-bucket", "logos/x.png", b"png", "image/png")

    def test_client_error_message_passed_through(self) -> None:
        client = MagicMock()
        client.put_object.side_effect = ClientError(
            {"Error": {"Code": "EntityTooLarge", "Message": "The object exceeded the maximum allowed size"}},
            "PutObject",
        )
        storage = ObjectStorage(client, PUBLIC_URL)
        with pytest.raises(RemoteError, match="exceeded the maximum allowed size"):
            storage.upload("admin-uploads", "content/a.mp4", b"x", "video/mp4")

    def test_public_url_is_quoted(self) -> None:
        storage = ObjectStorage(MagicMock(), PUBLIC_URL + "/")
        assert storage.get_public_url("partner-logos", "logos/a b.png") == f"{PUBLIC_URL}/partner-logos/logos/a%20b.png"


class TestCreateStorageClient:
    def test_uses_path_style_addressing(self) -> None:
        client = create_storage_client("https://backend.test/storage/v1/s3", "key", "secret", "eu-west-1")
        assert client.meta.endpoint_url == "https://backend.test/storage/v1/s3"
        assert client.meta.region_name == "eu-west-1"
        assert client.meta.config.s3["addressing_style"] == "path"
