# tests/test_image_store.py
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from common.errors import UploadError
from services.image_store import S3Config, S3ImageStore


class FakeS3Client:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def put_object(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return {"ETag": '"abc"'}


@pytest.mark.asyncio
async def test_upload_puts_object_with_content_type():
    client = FakeS3Client()
    store = S3ImageStore(S3Config(bucket="media"), client=client)

    await store.upload("profile-images/u1.png", b"png", content_type="image/png")

    assert len(client.calls) == 1
    call = client.calls[0]
    assert call["Bucket"] == "media"
    assert call["Key"] == "profile-images/u1.png"
    assert call["Body"] == b"png"
    assert call["ContentType"] == "image/png"
    assert "IfNoneMatch" not in call


@pytest.mark.asyncio
async def test_upload_without_overwrite_is_conditional():
    client = FakeS3Client()
    store = S3ImageStore(S3Config(bucket="media"), client=client)
    await store.upload("/profile-images/u1.png", b"png", upsert=False)
    assert client.calls[0]["Key"] == "profile-images/u1.png"
    assert client.calls[0]["IfNoneMatch"] == "*"


@pytest.mark.asyncio
async def test_client_error_becomes_upload_error():
    err = ClientError({"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject")
    store = S3ImageStore(S3Config(bucket="media"), client=FakeS3Client(error=err))
    with pytest.raises(UploadError) as ei:
        await store.upload("profile-images/u1.png", b"png")
    assert ei.value.message == "Access Denied"
    assert ei.value.path == "profile-images/u1.png"


@pytest.mark.asyncio
async def test_botocore_error_becomes_upload_error():
    err = EndpointConnectionError(endpoint_url="http://minio:9000")
    store = S3ImageStore(S3Config(bucket="media"), client=FakeS3Client(error=err))
    with pytest.raises(UploadError):
        await store.upload("profile-images/u1.png", b"png")


def test_public_url_variants():
    assert (
        S3ImageStore(S3Config(bucket="media", public_base_url="https://cdn.test/")).public_url("profile-images/u1.png")
        == "https://cdn.test/profile-images/u1.png"
    )
    assert (
        S3ImageStore(S3Config(bucket="media", endpoint_url="http://minio:9000")).public_url("profile-images/u1.png")
        == "http://minio:9000/media/profile-images/u1.png"
    )
    assert (
        S3ImageStore(S3Config(bucket="media", region="us-west-2")).public_url("profile-images/u 1.png")
        == "https://media.s3.us-west-2.amazonaws.com/profile-images/u%201.png"
    )


def test_config_from_env(monkeypatch):
    monkeypatch.delenv("S3_BUCKET", raising=False)
    assert S3Config.from_env() is None
    with pytest.raises(UploadError):
        S3ImageStore.from_env()

    monkeypatch.setenv("S3_BUCKET", "media")
    monkeypatch.setenv("S3_REGION", "eu-central-1")
    monkeypatch.setenv("S3_FORCE_PATH_STYLE", "1")
    cfg = S3Config.from_env()
    assert cfg.bucket == "media"
    assert cfg.region == "eu-central-1"
    assert cfg.force_path_style is True
