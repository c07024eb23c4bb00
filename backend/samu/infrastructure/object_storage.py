"""Object Storage — uploaded media on Cloudflare R2 (S3 API) or local disk.

Invariants:
    - Objects are addressed by key `uploads/<name>`; callers only ever pass the bare name
    - save() returns the public URL the client should store (R2 public URL or /uploads/<name>)
    - info() returns None for a missing object, never raises for "not found"
    - Blocking boto3 / filesystem calls run in a worker thread (asyncio.to_thread)

Design Decisions:
    - One small interface, two backends: routes and services never branch on R2 vs local
    - boto3 client cached per credentials tuple (lru_cache), adaptive retries via botocore Config
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from samu.config import Settings
from samu.core.errors import ExternalServiceError
from samu.core.upload_rules import KEY_PREFIX

logger = logging.getLogger(__name__)

LOCAL_URL_PREFIX = "/uploads/"


@dataclass(frozen=True)
class StoredObjectInfo:
    filename: str
    size: int
    created_at: datetime
    modified_at: datetime

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "size": self.size,
            "created": self.created_at.isoformat(),
            "modified": self.modified_at.isoformat(),
        }


def name_from_url(url: str) -> str | None:
    """Bare object name for a URL produced by either backend, None for foreign URLs."""
    if not url:
        return None
    marker = f"/{KEY_PREFIX}"
    if marker not in url:
        return None
    name = url.rsplit("/", 1)[-1]
    return name or None


class LocalObjectStorage:
    """Stores uploads under a directory served at /uploads."""

    def __init__(self, upload_dir: str):
        self.root = Path(upload_dir)

    def _path(self, name: str) -> Path:
        return self.root / name

    async def save(self, name: str, data: bytes, content_type: str) -> str:
        def _write() -> None:
            self.root.mkdir(parents=True, exist_ok=True)
            self._path(name).write_bytes(data)

        await asyncio.to_thread(_write)
        return f"{LOCAL_URL_PREFIX}{name}"

    async def delete(self, name: str) -> bool:
        path = self._path(name)

        def _unlink() -> bool:
            if not path.is_file():
                return False
            path.unlink()
            return True

        return await asyncio.to_thread(_unlink)

    async def info(self, name: str) -> StoredObjectInfo | None:
        path = self._path(name)

        def _stat() -> StoredObjectInfo | None:
            if not path.is_file():
                return None
            st = path.stat()
            return StoredObjectInfo(
                filename=name,
                size=st.st_size,
                created_at=datetime.fromtimestamp(st.st_ctime, tz=timezone.utc),
                modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            )

        return await asyncio.to_thread(_stat)


@lru_cache(maxsize=4)
def _r2_client(account_id: str, access_key_id: str, secret_access_key: str):
    return boto3.client(
        "s3",
        endpoint_url=f"https://{account_id}.r2.cloudflarestorage.com",
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        region_name="auto",
        config=Config(
            retries={"max_attempts": 5, "mode": "adaptive"},
            connect_timeout=5,
            read_timeout=30,
        ),
    )


class R2ObjectStorage:
    """Stores uploads in an R2 bucket and returns public bucket URLs."""

    def __init__(
        self, account_id: str, access_key_id: str, secret_access_key: str,
        bucket: str, public_url: str,
    ):
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")
        self._credentials = (account_id, access_key_id, secret_access_key)

    @property
    def client(self):
        return _r2_client(*self._credentials)

    async def save(self, name: str, data: bytes, content_type: str) -> str:
        key = f"{KEY_PREFIX}{name}"
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket, Key=key, Body=data, ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise ExternalServiceError("storage", f"upload failed: {e}")
        logger.info(f"Uploaded {key} to R2 ({len(data)} bytes)")
        return f"{self.public_url}/{key}"

    async def delete(self, name: str) -> bool:
        key = f"{KEY_PREFIX}{name}"
        if await self.info(name) is None:
            return False
        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise ExternalServiceError("storage", f"delete failed: {e}")
        return True

    async def info(self, name: str) -> StoredObjectInfo | None:
        key = f"{KEY_PREFIX}{name}"
        try:
            meta = await asyncio.to_thread(
                self.client.head_object, Bucket=self.bucket, Key=key,
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return None
            raise ExternalServiceError("storage", f"head failed: {e}")
        except BotoCoreError as e:
            raise ExternalServiceError("storage", f"head failed: {e}")
        modified = meta.get("LastModified") or datetime.now(timezone.utc)
        return StoredObjectInfo(
            filename=name,
            size=int(meta.get("ContentLength") or 0),
            created_at=modified,
            modified_at=modified,
        )


ObjectStorage = LocalObjectStorage | R2ObjectStorage


def build_object_storage(settings: Settings) -> ObjectStorage:
    if settings.r2_enabled:
        return R2ObjectStorage(
            settings.r2_account_id,
            settings.r2_access_key_id,
            settings.r2_secret_access_key,
            settings.r2_bucket_name,
            settings.r2_public_url,
        )
    return LocalObjectStorage(os.path.abspath(settings.upload_dir))
