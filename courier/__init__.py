"""
courier — async helpers for an SQS queue and an S3 attachment bucket.

  - QueueClient sends, receives, deletes and purges messages on one queue
    addressed by naming convention, and long-polls it in the background.
  - StorageClient stores oversized payloads ("attachments") in S3 under a
    collision-free key that can travel in a queue message instead.
  - Provider holds one of each.

Quick start
-----------
    import asyncio
    from courier import Provider

    async def main():
        provider = Provider("my-attachments", "alfred", "ons-123", "staging", "work-items")

        key = await provider.storage.put_attachment("user@example.com/", {"report.pdf": "..."})
        await provider.queue.send({"to": "user@example.com", "attachments": key})

        sub = provider.queue.start_polling(30)
        sub.on_message(lambda event: print(event.response["Messages"]))
        sub.on_error(lambda event: print("poll failed:", event.error))
        await asyncio.sleep(120)
        await provider.queue.stop_polling()

    asyncio.run(main())

Configuration
-------------
The environment tag maps to an AWS account and region through
CourierSettings.environments ("staging" and "production" by default;
unrecognised tags use default_environment). Override with COURIER_*
environment variables or pass a CourierSettings instance.

Architecture
------------
Follows the Ports & Adapters pattern:
  domain/   — value types (QueueAddress, events) and errors
  ports/    — Protocol interfaces (QueueTransportPort, ObjectStorePort)
  core/     — QueueClient, StorageClient, PollSubscription, codec
  adapters/ — aioboto3 SQS/S3 transports and in-memory doubles
"""
from __future__ import annotations

from courier.adapters.memory import InMemoryObjectStore, InMemoryQueueTransport
from courier.adapters.s3 import S3ObjectStore
from courier.adapters.sqs import SQSTransport
from courier.config import CourierSettings, get_settings
from courier.core.poller import PollSubscription
from courier.core.queue import QueueClient
from courier.core.storage import StorageClient
from courier.domain.errors import (
    ConfigurationError,
    CourierError,
    KeyGenerationExhaustedError,
    MissingReceiptHandleError,
    PollingActiveError,
    TransportError,
    ValidationError,
)
from courier.domain.models import AccountTarget, FailureEvent, MessageEvent, QueueAddress
from courier.log import configure_logging
from courier.ports.transport import ObjectStorePort, QueueTransportPort
from courier.provider import Provider

__all__ = [
    # Domain models
    "AccountTarget",
    "QueueAddress",
    "MessageEvent",
    "FailureEvent",
    # Errors
    "CourierError",
    "ConfigurationError",
    "ValidationError",
    "MissingReceiptHandleError",
    "TransportError",
    "KeyGenerationExhaustedError",
    "PollingActiveError",
    # Ports
    "QueueTransportPort",
    "ObjectStorePort",
    # Clients
    "Provider",
    "QueueClient",
    "StorageClient",
    "PollSubscription",
    # Adapters
    "SQSTransport",
    "S3ObjectStore",
    "InMemoryQueueTransport",
    "InMemoryObjectStore",
    # Configuration
    "CourierSettings",
    "get_settings",
    "configure_logging",
]
