"""
PollSubscription — a cancellable repeating long-poll with typed notifications.

Every `interval` the subscription calls receive(batch_size) and publishes
the outcome to its subscribers:

  response has Messages  → one MessageEvent carrying the full response
  response is empty      → nothing
  receive raised         → one FailureEvent carrying the exception

Failures never escape the background task. Publishing is fire-and-forget:
with no subscribers the network calls still happen and results are dropped.
Messages are not deleted; subscribers delete what they have processed.

Usage
-----
    sub = queue.start_polling(30)
    sub.on_message(handle_batch)
    sub.on_error(report)
    ...
    await queue.stop_polling()

Stopping waits for an in-progress tick to finish; it is safe to call more
than once and before start().
"""
from __future__ import annotations

import asyncio
import dataclasses
import inspect
import math
from collections.abc import Awaitable, Callable
from datetime import timedelta
from types import TracebackType
from typing import Any, TypeVar

from courier.domain.errors import PollingActiveError
from courier.domain.models import FailureEvent, MessageEvent
from courier.log import get_logger

logger = get_logger(__name__)

ReceiveFn = Callable[[int], Awaitable[dict[str, Any]]]
E = TypeVar("E", MessageEvent, FailureEvent)
Handler = Callable[[E], Awaitable[None] | None]


@dataclasses.dataclass
class PollSubscription:
    """
    Repeatedly long-polls through `receive` and publishes the results.

    Parameters
    ----------
    receive    : async callable taking a max message count
    interval   : time between polls
    batch_size : max messages requested per poll (default 10)
    """

    receive: ReceiveFn
    interval: timedelta
    batch_size: int = 10

    _message_handlers: list[Handler[MessageEvent]] = dataclasses.field(
        default_factory=list, init=False, repr=False
    )
    _error_handlers: list[Handler[FailureEvent]] = dataclasses.field(
        default_factory=list, init=False, repr=False
    )
    _task: asyncio.Task[None] | None = dataclasses.field(
        default=None, init=False, repr=False
    )
    _stopping: asyncio.Event | None = dataclasses.field(
        default=None, init=False, repr=False
    )

    # ------------------------------------------------------------------ #
    # Subscribers                                                          #
    # ------------------------------------------------------------------ #

    def on_message(self, handler: Handler[MessageEvent]) -> Handler[MessageEvent]:
        """Subscribe to MessageEvent. Returns the handler, so it works as a decorator."""
        self._message_handlers.append(handler)
        return handler

    def on_error(self, handler: Handler[FailureEvent]) -> Handler[FailureEvent]:
        """Subscribe to FailureEvent. Returns the handler."""
        self._error_handlers.append(handler)
        return handler

    # ------------------------------------------------------------------ #
    # Lifecycle                                                            #
    # ------------------------------------------------------------------ #

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background poll task. Must be called inside a running loop."""
        if self.running:
            raise PollingActiveError("Poll subscription is already running")
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(
            self._run(self._stopping), name="courier-poll"
        )
        logger.info(
            "Polling started", interval_seconds=self.interval.total_seconds()
        )

    async def stop(self) -> None:
        """Stop polling after any in-progress tick. Idempotent."""
        if self._task is None:
            return
        if self._stopping is not None:
            self._stopping.set()
        task, self._task = self._task, None
        await task
        logger.info("Polling stopped")

    async def __aenter__(self) -> PollSubscription:
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.stop()

    # ------------------------------------------------------------------ #
    # Poll loop                                                            #
    # ------------------------------------------------------------------ #

    async def _run(self, stopping: asyncio.Event) -> None:
        # Ticks are scheduled on a fixed grid so the period does not drift by
        # the receive time. Slots missed by an overrunning tick are skipped.
        loop = asyncio.get_running_loop()
        period = self.interval.total_seconds()
        next_due = loop.time() + period
        while True:
            try:
                await asyncio.wait_for(
                    stopping.wait(), timeout=max(next_due - loop.time(), 0)
                )
                return
            except TimeoutError:
                pass
            await self.tick()
            next_due += period
            now = loop.time()
            if next_due <= now:
                next_due += period * (math.floor((now - next_due) / period) + 1)

    async def tick(self) -> None:
        """Poll once and publish the outcome."""
        try:
            response = await self.receive(self.batch_size)
        except Exception as exc:
            logger.warning("Poll failed", error=str(exc))
            await self._publish(
                self._error_handlers, FailureEvent.model_construct(error=exc)
            )
            return
        # Long polling returns no Messages key when nothing arrived.
        if response.get("Messages"):
            # model_construct keeps the response object itself, not a validated copy.
            await self._publish(
                self._message_handlers, MessageEvent.model_construct(response=response)
            )

    async def _publish(self, handlers: list[Handler[E]], event: E) -> None:
        for handler in list(handlers):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Poll subscriber failed", event_type=type(event).__name__
                )
