"""
StorageClient — offloads oversized payloads ("attachments") to object storage.

Attachments are stored as JSON under a freshly generated key,
prefix + uuid1(). The key is the caller's handle for reading the
attachment back later.

Unique keys
-----------
Each candidate key gets a metadata-only existence check before use:

  not found      → the candidate is returned
  found          → collision; a new suffix is generated and checked
  check failure  → raised unchanged, never treated as a collision

Checking stops after `settings.max_key_attempts` collisions with
KeyGenerationExhaustedError. With time-based UUIDs a single collision is
already unlikely.
"""
from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Callable
from typing import Any, cast

from courier.adapters.s3 import S3ObjectStore
from courier.config import CourierSettings, get_settings
from courier.core import codec
from courier.domain.errors import KeyGenerationExhaustedError
from courier.log import get_logger
from courier.ports.transport import ObjectStorePort

logger = get_logger(__name__)


def _uuid1() -> str:
    return str(uuid.uuid1())


@dataclasses.dataclass
class StorageClient:
    """
    Attachment storage bound to one bucket.

    Parameters
    ----------
    bucket_name : bucket holding the attachments
    store       : any ObjectStorePort; an S3ObjectStore for bucket_name if omitted
    settings    : library settings; process settings if omitted
    id_factory  : unique suffix generator (default: uuid1)
    """

    bucket_name: str
    store: ObjectStorePort | None = None
    settings: CourierSettings | None = None
    id_factory: Callable[[], str] = _uuid1

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()
        if self.store is None:
            self.store = S3ObjectStore(
                bucket=self.bucket_name,
                region_name=self.settings.account_for(
                    self.settings.default_environment
                ).region,
            )

    @property
    def _store(self) -> ObjectStorePort:
        return cast(ObjectStorePort, self.store)

    async def generate_unique_key(self, prefix: str) -> str:
        """Return prefix + a fresh suffix that does not exist in the bucket yet."""
        attempts = cast(CourierSettings, self.settings).max_key_attempts
        for _ in range(attempts):
            key = prefix + self.id_factory()
            if not await self._store.exists(key):
                return key
            logger.warning("Attachment key collision", bucket=self.bucket_name, key=key)
        raise KeyGenerationExhaustedError(prefix, attempts)

    async def put_attachment(self, prefix: str, attachments: Any) -> str:
        """
        Store `attachments` as JSON under a unique key and return the key.

        `prefix` is usually the recipient the attachments belong to. Any
        failure is logged and re-raised unchanged.
        """
        try:
            key = await self.generate_unique_key(prefix)
            await self._store.put(key, codec.encode_bytes(attachments))
        except Exception:
            logger.exception(
                "An error was thrown putting object on S3",
                bucket=self.bucket_name,
                prefix=prefix,
            )
            raise
        logger.debug("Attachment stored", bucket=self.bucket_name, key=key)
        return key

    async def get_attachment(self, key: str) -> Any:
        """Read back and decode the attachments stored under `key`."""
        return codec.decode(await self._store.get(key))
