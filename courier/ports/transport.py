"""
Transport ports — the two seams between courier core and the network.

Any object satisfying these structural Protocols can act as a transport.
No base class or registration is required.

QueueTransportPort is bound to a single queue at construction; none of its
methods take a queue address. ObjectStorePort is bound to a single bucket.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class QueueTransportPort(Protocol):
    """
    Message-queue operations against one bound queue.

    Implementing adapters (built-in):
      - SQSTransport            — AWS SQS (aioboto3)
      - InMemoryQueueTransport  — for tests and local development
    """

    async def send(self, body: str) -> dict[str, Any]:
        """Submit a message body. Returns the transport acknowledgment."""
        ...

    async def receive(
        self,
        max_count: int,
        attribute_names: list[str],
        wait_seconds: int,
    ) -> dict[str, Any]:
        """
        Long-poll for up to max_count messages without removing them.

        Returns
        -------
        dict : raw response. Delivered messages are listed under "Messages",
               each carrying a "Body" and a "ReceiptHandle". The key is absent
               when nothing arrived within the wait window.
        """
        ...

    async def delete(self, receipt_handle: str) -> dict[str, Any]:
        """Delete the delivery identified by receipt_handle."""
        ...

    async def purge(self) -> dict[str, Any]:
        """Remove every message from the queue. Irreversible."""
        ...


@runtime_checkable
class ObjectStorePort(Protocol):
    """
    Key/value object storage within one bound bucket.

    Implementing adapters (built-in):
      - S3ObjectStore        — AWS S3 (aioboto3)
      - InMemoryObjectStore  — for tests and local development
    """

    async def exists(self, key: str) -> bool:
        """
        Metadata-only existence check.

        Returns False only when the store reports the key as not found.
        Any other failure is raised, never reported as absence.
        """
        ...

    async def put(self, key: str, body: bytes) -> None:
        """Write body under key, replacing any existing object."""
        ...

    async def get(self, key: str) -> bytes:
        """Read the object stored under key."""
        ...
