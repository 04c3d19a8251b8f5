"""
Object storage: generated assets and documents keyed by (bucket, key).

Remote: S3 (FF_USE_S3). Logical buckets ("marketing-assets", "product-docs")
are key prefixes inside S3_BUCKET_NAME. Local: FallbackStore mapping
bucket → {key: {data, metadata, timestamp}}.
"""

import asyncio
import logging
import mimetypes
from typing import Any, Optional

from .fallback import FallbackStore, ResilientStore
from ..core.config import get_settings
from ..core.flags import get_flags
from ..models.base import epoch_ms

logger = logging.getLogger(__name__)


def _guess_content_type(filename: str) -> str:
    ct, _ = mimetypes.guess_type(filename)
    return ct or "application/octet-stream"


class BucketStore(ResilientStore):
    name = "buckets"

    def __init__(
        self,
        remote: Any = None,
        fallback: Optional[FallbackStore] = None,
        s3_bucket: str = "",
    ):
        super().__init__(remote=remote, fallback=fallback)
        self.s3_bucket = s3_bucket

    def _bucket(self, bucket: str) -> dict:
        objects = self._local.get(bucket)
        if objects is None:
            objects = {}
            self._local.set(bucket, objects)
        return objects

    async def upload(
        self, bucket: str, key: str, data: Any, metadata: Optional[dict] = None
    ) -> None:
        body = data.encode("utf-8") if isinstance(data, str) else data
        try:
            client = self._remote()
            await asyncio.to_thread(
                client.put_object,
                Bucket=self.s3_bucket,
                Key=f"{bucket}/{key}",
                Body=body,
                ContentType=_guess_content_type(key),
                # S3 user metadata is str → str
                Metadata={k: str(v) for k, v in (metadata or {}).items()},
            )
            logger.info("Uploaded to S3: %s/%s", bucket, key)
        except Exception as e:
            self._degrade("upload", e)

        self._bucket(bucket)[key] = {
            "data": data,
            "metadata": metadata,
            "timestamp": epoch_ms(),
        }

    async def download(self, bucket: str, key: str) -> Any:
        """Object content (str when UTF-8), or None."""
        try:
            client = self._remote()
            obj = await asyncio.to_thread(
                client.get_object, Bucket=self.s3_bucket, Key=f"{bucket}/{key}"
            )
            body = obj["Body"].read()
            try:
                return body.decode("utf-8")
            except UnicodeDecodeError:
                return body
        except Exception as e:
            self._degrade("download", e)

        item = self._bucket(bucket).get(key)
        return item["data"] if item else None

    async def delete(self, bucket: str, key: str) -> None:
        try:
            client = self._remote()
            await asyncio.to_thread(
                client.delete_object, Bucket=self.s3_bucket, Key=f"{bucket}/{key}"
            )
        except Exception as e:
            self._degrade("delete", e)
        self._bucket(bucket).pop(key, None)

    async def get_metadata(self, bucket: str, key: str) -> Optional[dict]:
        try:
            client = self._remote()
            head = await asyncio.to_thread(
                client.head_object, Bucket=self.s3_bucket, Key=f"{bucket}/{key}"
            )
            return head.get("Metadata", {})
        except Exception as e:
            self._degrade("get_metadata", e)

        item = self._bucket(bucket).get(key)
        return item["metadata"] if item else None

    async def list(self, bucket: str, prefix: Optional[str] = None) -> list[str]:
        """Keys in a bucket (without the bucket prefix), optionally filtered."""
        root = f"{bucket}/"
        try:
            client = self._remote()

            def _list_keys() -> list[str]:
                keys = []
                paginator = client.get_paginator("list_objects_v2")
                pages = paginator.paginate(Bucket=self.s3_bucket, Prefix=f"{root}{prefix or ''}")
                for page in pages:
                    for obj in page.get("Contents", []):
                        keys.append(obj["Key"][len(root):])
                return keys

            return await asyncio.to_thread(_list_keys)
        except Exception as e:
            self._degrade("list", e)

        return [key for key in self._bucket(bucket) if not prefix or key.startswith(prefix)]


# ── Process-wide instance ────────────────────────────────────────────

_store: Optional[BucketStore] = None


def _get_s3_client():
    import boto3

    settings = get_settings()
    kwargs = {"region_name": settings.aws_region}
    if settings.aws_access_key_id:
        kwargs["aws_access_key_id"] = settings.aws_access_key_id
        kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    return boto3.client("s3", **kwargs)


def get_bucket_store(fallback: Optional[FallbackStore] = None) -> BucketStore:
    global _store
    if _store is None:
        remote = _get_s3_client() if get_flags().use_s3 else None
        _store = BucketStore(
            remote=remote,
            fallback=fallback,
            s3_bucket=get_settings().s3_bucket_name,
        )
        logger.info("Bucket store ready (remote=%s)", "s3" if remote else "off")
    return _store
