# services/image_store.py
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from common.errors import UploadError

logger = logging.getLogger("contractor-profile")


# =========================
# S3 configuration
# =========================
@dataclass
class S3Config:
    bucket: str
    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    public_base_url: Optional[str] = None  # CDN / public bucket origin
    force_path_style: bool = False
    cache_control: Optional[str] = "public, max-age=3600"

    @staticmethod
    def from_env() -> Optional["S3Config"]:
        bucket = os.getenv("S3_BUCKET")
        if not bucket:
            return None
        return S3Config(
            bucket=bucket,
            region=os.getenv("S3_REGION"),
            endpoint_url=os.getenv("S3_ENDPOINT"),
            public_base_url=os.getenv("S3_PUBLIC_BASE_URL"),
            force_path_style=os.getenv("S3_FORCE_PATH_STYLE") == "1",
            cache_control=os.getenv("S3_CACHE_CONTROL", "public, max-age=3600"),
        )


def _make_client(cfg: S3Config) -> Any:
    session = boto3.session.Session(
        aws_access_key_id=os.getenv("S3_ACCESS_KEY_ID") or os.getenv("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=os.getenv("S3_SECRET_ACCESS_KEY") or os.getenv("AWS_SECRET_ACCESS_KEY"),
        aws_session_token=os.getenv("S3_SESSION_TOKEN") or os.getenv("AWS_SESSION_TOKEN"),
        region_name=cfg.region or "us-east-1",
    )
    return session.client(
        "s3",
        endpoint_url=cfg.endpoint_url,
        config=BotoConfig(
            s3={"addressing_style": "path" if cfg.force_path_style else "auto"}
        ),
    )


class S3ImageStore:
    """
    Profile image storage on S3 (or any S3-compatible endpoint).

    put_object always replaces the object at a key, so an upload to the
    same path is an overwrite. boto3 is blocking; calls run in a worker thread.
    """

    def __init__(self, cfg: S3Config, client: Any = None) -> None:
        self.cfg = cfg
        self._client = client

    @classmethod
    def from_env(cls) -> "S3ImageStore":
        cfg = S3Config.from_env()
        if cfg is None:
            raise UploadError("Image storage is not configured (S3_BUCKET unset)")
        return cls(cfg)

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = _make_client(self.cfg)
        return self._client

    async def upload(
        self, path: str, data: bytes, *, content_type: Optional[str] = None, upsert: bool = True
    ) -> None:
        key = path.lstrip("/")
        extra: dict[str, Any] = {}
        if content_type:
            extra["ContentType"] = content_type
        if self.cfg.cache_control:
            extra["CacheControl"] = self.cfg.cache_control
        if not upsert:
            # refuse to replace an existing object; the profile image flow always
            # overwrites its per-user key, so only direct callers take this path
            extra["IfNoneMatch"] = "*"
        try:
            await asyncio.to_thread(
                self.client.put_object, Bucket=self.cfg.bucket, Key=key, Body=data, **extra
            )
        except ClientError as e:
            msg = e.response.get("Error", {}).get("Message") or str(e)
            logger.warning("S3 upload failed for s3://%s/%s: %s", self.cfg.bucket, key, msg)
            raise UploadError(msg, path=key) from e
        except BotoCoreError as e:
            logger.warning("S3 upload failed for s3://%s/%s: %s", self.cfg.bucket, key, e)
            raise UploadError(str(e), path=key) from e
        logger.info("Uploaded %d bytes to s3://%s/%s", len(data), self.cfg.bucket, key)

    def public_url(self, path: str) -> str:
        key = quote(path.lstrip("/"))
        if self.cfg.public_base_url:
            return f"{self.cfg.public_base_url.rstrip('/')}/{key}"
        if self.cfg.endpoint_url:
            return f"{self.cfg.endpoint_url.rstrip('/')}/{self.cfg.bucket}/{key}"
        region = self.cfg.region or "us-east-1"
        return f"https://{self.cfg.bucket}.s3.{region}.amazonaws.com/{key}"
