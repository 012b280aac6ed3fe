"""
SQSTransport — AWS SQS adapter using aioboto3.

The queue URL is bound at construction and passed as QueueUrl on every call;
the API version is locked to 2012-11-05. Any SDK failure is raised as
TransportError carrying the original exception.
"""
from __future__ import annotations

import dataclasses
from typing import Any

import aioboto3

from courier.domain.errors import CourierError, TransportError
from courier.log import get_logger

logger = get_logger(__name__)

API_VERSION = "2012-11-05"


@dataclasses.dataclass
class SQSTransport:
    """
    AWS SQS transport bound to one queue.

    Parameters
    ----------
    queue_url    : fully addressed queue URL
    session      : aioboto3.Session — created lazily from env vars if omitted
    region_name  : AWS region passed to the SQS client
    endpoint_url : custom endpoint (e.g. LocalStack, ElasticMQ)
    """

    queue_url: str
    session: aioboto3.Session | None = None
    region_name: str | None = None
    endpoint_url: str | None = None

    def _get_session(self) -> aioboto3.Session:
        if self.session is None:
            self.session = aioboto3.Session()
        return self.session

    def _client_kwargs(self) -> dict[str, str]:
        kwargs: dict[str, str] = {"api_version": API_VERSION}
        if self.region_name:
            kwargs["region_name"] = self.region_name
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        return kwargs

    async def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        session = self._get_session()
        try:
            async with session.client("sqs", **self._client_kwargs()) as sqs:
                response: dict[str, Any] = await getattr(sqs, operation)(
                    QueueUrl=self.queue_url, **params
                )
                return response
        except CourierError:
            raise
        except Exception as exc:
            logger.error(
                "SQS call failed",
                operation=operation,
                queue_url=self.queue_url,
                error=str(exc),
            )
            raise TransportError(f"SQS {operation} failed", exc) from exc

    async def send(self, body: str) -> dict[str, Any]:
        return await self._call("send_message", MessageBody=body)

    async def receive(
        self,
        max_count: int,
        attribute_names: list[str],
        wait_seconds: int,
    ) -> dict[str, Any]:
        return await self._call(
            "receive_message",
            MaxNumberOfMessages=max_count,
            AttributeNames=attribute_names,
            WaitTimeSeconds=wait_seconds,
        )

    async def delete(self, receipt_handle: str) -> dict[str, Any]:
        return await self._call("delete_message", ReceiptHandle=receipt_handle)

    async def purge(self) -> dict[str, Any]:
        return await self._call("purge_queue")
