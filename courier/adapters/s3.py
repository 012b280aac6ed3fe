"""
S3ObjectStore — AWS S3 adapter for attachments, using aioboto3.

  exists() → head_object; a 404 / NotFound / NoSuchKey code means "absent",
             anything else is raised as TransportError
  put()    → put_object with ContentType application/json
  get()    → get_object, body read fully into memory

Requests are signed with SigV4. Compatible with S3-compatible storage
(MinIO, Cloudflare R2, ...) through endpoint_url.
"""
from __future__ import annotations

import dataclasses
from typing import Any

import aioboto3
from botocore.config import Config

from courier.domain.errors import CourierError, TransportError
from courier.log import get_logger

logger = get_logger(__name__)

_NOT_FOUND_CODES = ("404", "NotFound", "NoSuchKey")


@dataclasses.dataclass
class S3ObjectStore:
    """
    AWS S3 object store bound to one bucket.

    Parameters
    ----------
    bucket       : S3 bucket name
    session      : aioboto3.Session — created lazily from env vars if omitted
    region_name  : AWS region passed to the S3 client
    endpoint_url : custom endpoint for S3-compatible backends (e.g. MinIO)
    """

    bucket: str
    session: aioboto3.Session | None = None
    region_name: str | None = None
    endpoint_url: str | None = None

    def _get_session(self) -> aioboto3.Session:
        if self.session is None:
            self.session = aioboto3.Session()
        return self.session

    def _client_kwargs(self) -> dict[str, Any]:
        """Build kwargs forwarded to the S3 client constructor."""
        kwargs: dict[str, Any] = {"config": Config(signature_version="s3v4")}
        if self.region_name:
            kwargs["region_name"] = self.region_name
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        return kwargs

    async def exists(self, key: str) -> bool:
        """True if the key exists, False if S3 reports it as not found."""
        session = self._get_session()
        try:
            async with session.client("s3", **self._client_kwargs()) as s3:
                try:
                    await s3.head_object(Bucket=self.bucket, Key=key)
                    return True
                except Exception as exc:
                    if s3_error_code(exc) in _NOT_FOUND_CODES:
                        return False
                    raise
        except CourierError:
            raise
        except Exception as exc:
            logger.error("S3 head_object failed", bucket=self.bucket, key=key)
            raise TransportError("S3 head_object failed", exc) from exc

    async def put(self, key: str, body: bytes) -> None:
        session = self._get_session()
        try:
            async with session.client("s3", **self._client_kwargs()) as s3:
                await s3.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=body,
                    ContentType="application/json",
                )
        except CourierError:
            raise
        except Exception as exc:
            logger.error("S3 put_object failed", bucket=self.bucket, key=key)
            raise TransportError("S3 put_object failed", exc) from exc

    async def get(self, key: str) -> bytes:
        session = self._get_session()
        try:
            async with session.client("s3", **self._client_kwargs()) as s3:
                response = await s3.get_object(Bucket=self.bucket, Key=key)
                content: bytes = await response["Body"].read()
                return content
        except CourierError:
            raise
        except Exception as exc:
            logger.error("S3 get_object failed", bucket=self.bucket, key=key)
            raise TransportError("S3 get_object failed", exc) from exc


def s3_error_code(exc: Exception) -> str:
    """Extract the error code from a botocore ClientError, or return ''."""
    response = getattr(exc, "response", None)
    if isinstance(response, dict):
        error = response.get("Error", {})
        if isinstance(error, dict):
            code = error.get("Code", "")
            return str(code) if code else ""
    return ""
