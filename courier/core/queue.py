"""
QueueClient — convenience wrapper around one pre-provisioned queue.

The queue is addressed by naming convention ({app_name}-{slice}-{queue_name})
and environment; see QueueAddress. The derived URL is bound to the transport
once, at construction.

Errors
------
ConfigurationError         any naming input missing or empty (construction)
MissingReceiptHandleError  delete_message() without a receipt handle,
                           raised before the transport is called
TransportError             any transport failure, never retried here
"""
from __future__ import annotations

import dataclasses
from collections.abc import Awaitable
from datetime import timedelta
from typing import Any, TypeVar, cast

from courier.adapters.sqs import SQSTransport
from courier.config import CourierSettings, get_settings
from courier.core import codec
from courier.core.poller import PollSubscription
from courier.domain.errors import (
    CourierError,
    MissingReceiptHandleError,
    PollingActiveError,
    TransportError,
)
from courier.domain.models import QueueAddress
from courier.log import get_logger
from courier.ports.transport import QueueTransportPort

logger = get_logger(__name__)

T = TypeVar("T")

WAIT_TIME_SECONDS = 10
POLL_BATCH_SIZE = 10
# Long polling more often than this hits request-rate limits.
MIN_POLL_INTERVAL = timedelta(seconds=20)


@dataclasses.dataclass
class QueueClient:
    """
    Send, receive, delete, purge and poll against a single queue.

    Parameters
    ----------
    app_name, slice, environment, queue_name : naming inputs, all required.
                They default to None only so a missing one raises
                ConfigurationError instead of TypeError.
    settings  : environment → account mapping; process settings if omitted
    transport : any QueueTransportPort; an SQSTransport for the derived URL
                if omitted
    """

    app_name: str | None = None
    slice: str | None = None
    environment: str | None = None
    queue_name: str | None = None
    settings: CourierSettings | None = None
    transport: QueueTransportPort | None = None

    address: QueueAddress = dataclasses.field(init=False)
    url: str = dataclasses.field(init=False)
    _subscription: PollSubscription | None = dataclasses.field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self.address = QueueAddress.build(
            self.app_name, self.slice, self.environment, self.queue_name
        )
        if self.settings is None:
            self.settings = get_settings()
        self.url = self.address.url(self.settings)
        if self.transport is None:
            self.transport = SQSTransport(
                queue_url=self.url,
                region_name=self.address.target(self.settings).region,
            )
        logger.debug("Queue client initialized", queue_url=self.url)

    # ------------------------------------------------------------------ #
    # Queue operations                                                     #
    # ------------------------------------------------------------------ #

    async def send(self, message: Any) -> dict[str, Any]:
        """JSON-encode `message` and put it on the queue."""
        return await self._call("send", self._transport.send(codec.encode(message)))

    async def receive(self, max_count: int = 1) -> dict[str, Any]:
        """
        Long-poll (10 s) for up to `max_count` messages with all attributes.

        Messages stay on the queue. A response without "Messages" means
        nothing arrived during the wait and is not an error.
        """
        return await self._call(
            "receive",
            self._transport.receive(max_count, ["All"], WAIT_TIME_SECONDS),
        )

    async def delete_message(self, message: dict[str, Any]) -> dict[str, Any]:
        """
        Delete one delivery.

        `message` is either a received message carrying "ReceiptHandle" or a
        receive() response holding exactly one message.
        """
        receipt_handle = _receipt_handle(message)
        return await self._call("delete", self._transport.delete(receipt_handle))

    async def dequeue(self) -> dict[str, Any]:
        """Receive one message and delete it. Returns the receive() response."""
        data = await self.receive()
        await self.delete_message(data)
        return data

    async def purge(self) -> dict[str, Any]:
        """
        !!! CAUTION !!!
        Remove every message from the queue. This cannot be undone, and the
        service allows it at most once every 60 seconds.
        """
        logger.warning("Purging queue", queue_url=self.url)
        return await self._call("purge", self._transport.purge())

    # ------------------------------------------------------------------ #
    # Polling                                                              #
    # ------------------------------------------------------------------ #

    def start_polling(self, interval_seconds: float) -> PollSubscription:
        """
        Poll for up to 10 messages every `interval_seconds` (at least 20).

        Returns the running subscription; attach handlers with on_message()
        and on_error(). Raises PollingActiveError if this client is already
        polling. Must be called from inside a running event loop.
        """
        if self._subscription is not None and self._subscription.running:
            raise PollingActiveError(
                f"Already polling {self.url}; call stop_polling() first"
            )
        interval = max(timedelta(seconds=interval_seconds), MIN_POLL_INTERVAL)
        subscription = PollSubscription(
            receive=self.receive, interval=interval, batch_size=POLL_BATCH_SIZE
        )
        subscription.start()
        self._subscription = subscription
        return subscription

    async def stop_polling(self) -> None:
        """Stop the active subscription, if any. Safe to call repeatedly."""
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await subscription.stop()

    # ------------------------------------------------------------------ #
    # Internals                                                            #
    # ------------------------------------------------------------------ #

    @property
    def _transport(self) -> QueueTransportPort:
        return cast(QueueTransportPort, self.transport)

    async def _call(self, operation: str, request: Awaitable[T]) -> T:
        try:
            result = await request
        except CourierError:
            raise
        except Exception as exc:
            logger.error(
                "Queue request failed",
                operation=operation,
                queue_url=self.url,
                error=str(exc),
            )
            raise TransportError("An error occurred", exc) from exc
        logger.debug("Queue request completed", operation=operation, queue_url=self.url)
        return result


def _receipt_handle(message: Any) -> str:
    if isinstance(message, dict):
        handle = message.get("ReceiptHandle")
        if handle:
            return str(handle)
        messages = message.get("Messages")
        if isinstance(messages, list) and len(messages) == 1:
            handle = messages[0].get("ReceiptHandle")
            if handle:
                return str(handle)
    raise MissingReceiptHandleError()
