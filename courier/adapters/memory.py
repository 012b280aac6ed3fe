"""
In-memory transports for testing and development.

InMemoryQueueTransport keeps a FIFO of visible messages plus a table of
in-flight deliveries keyed by receipt handle. A received message stays
in-flight (invisible) until deleted; there is no visibility timeout and
receive() never waits.

InMemoryObjectStore is a dict of key → bytes.

Zero external dependencies. Safe for multiple concurrent coroutines in a
single event loop. NOT safe across processes or threads.
"""
from __future__ import annotations

import asyncio
import dataclasses
import hashlib
import uuid
from collections import deque
from typing import Any

from courier.domain.errors import TransportError


@dataclasses.dataclass
class InMemoryQueueTransport:
    """In-process queue backed by a deque of visible messages."""

    def __post_init__(self) -> None:
        self._visible: deque[dict[str, Any]] = deque()
        self._in_flight: dict[str, dict[str, Any]] = {}
        self._lock: asyncio.Lock = asyncio.Lock()

    async def send(self, body: str) -> dict[str, Any]:
        async with self._lock:
            message_id = str(uuid.uuid4())
            self._visible.append(
                {
                    "MessageId": message_id,
                    "Body": body,
                    "MD5OfBody": hashlib.md5(body.encode("utf-8")).hexdigest(),
                    "Attributes": {},
                }
            )
            return {"MessageId": message_id}

    async def receive(
        self,
        max_count: int,
        attribute_names: list[str],
        wait_seconds: int,
    ) -> dict[str, Any]:
        async with self._lock:
            messages: list[dict[str, Any]] = []
            while self._visible and len(messages) < max_count:
                message = self._visible.popleft()
                receipt_handle = str(uuid.uuid4())
                self._in_flight[receipt_handle] = message
                messages.append({**message, "ReceiptHandle": receipt_handle})
            if not messages:
                return {}
            return {"Messages": messages}

    async def delete(self, receipt_handle: str) -> dict[str, Any]:
        async with self._lock:
            if self._in_flight.pop(receipt_handle, None) is None:
                raise TransportError(
                    "ReceiptHandleIsInvalid", KeyError(receipt_handle)
                )
            return {}

    async def purge(self) -> dict[str, Any]:
        async with self._lock:
            self._visible.clear()
            self._in_flight.clear()
            return {}

    @property
    def visible_count(self) -> int:
        return len(self._visible)

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)


@dataclasses.dataclass
class InMemoryObjectStore:
    """
    In-process object store.

    Parameters
    ----------
    objects : optional pre-populated key → bytes mapping (useful for test setup)
    """

    objects: dict[str, bytes] = dataclasses.field(default_factory=dict)

    async def exists(self, key: str) -> bool:
        return key in self.objects

    async def put(self, key: str, body: bytes) -> None:
        self.objects[key] = body

    async def get(self, key: str) -> bytes:
        try:
            return self.objects[key]
        except KeyError as exc:
            raise TransportError("NoSuchKey", exc) from exc
