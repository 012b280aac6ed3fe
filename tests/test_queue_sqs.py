from unittest.mock import AsyncMock, MagicMock

import pytest

from courier.adapters.sqs import API_VERSION, SQSTransport
from courier.domain.errors import TransportError

URL = "https://sqs.ap-southeast-2.amazonaws.com/384553929753/appName-slice-name"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _AsyncCM:
    """Minimal async context manager wrapping a return value."""

    def __init__(self, value: object) -> None:
        self._value = value

    async def __aenter__(self) -> object:
        return self._value

    async def __aexit__(self, *args: object) -> None:
        pass


def _make_transport() -> tuple[SQSTransport, AsyncMock, MagicMock]:
    sqs = AsyncMock()
    session = MagicMock()
    session.client.return_value = _AsyncCM(sqs)
    transport = SQSTransport(queue_url=URL, session=session, region_name="ap-southeast-2")
    return transport, sqs, session


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


async def test_send_binds_queue_url():
    transport, sqs, _ = _make_transport()
    sqs.send_message.return_value = {"MessageId": "m1"}

    assert await transport.send('"test"') == {"MessageId": "m1"}
    sqs.send_message.assert_awaited_once_with(QueueUrl=URL, MessageBody='"test"')


async def test_receive_passes_long_poll_parameters():
    transport, sqs, _ = _make_transport()
    sqs.receive_message.return_value = {}

    await transport.receive(10, ["All"], 10)

    sqs.receive_message.assert_awaited_once_with(
        QueueUrl=URL,
        MaxNumberOfMessages=10,
        AttributeNames=["All"],
        WaitTimeSeconds=10,
    )


async def test_delete_by_receipt_handle():
    transport, sqs, _ = _make_transport()
    sqs.delete_message.return_value = {}

    await transport.delete("123")

    sqs.delete_message.assert_awaited_once_with(QueueUrl=URL, ReceiptHandle="123")


async def test_purge():
    transport, sqs, _ = _make_transport()
    sqs.purge_queue.return_value = {}

    await transport.purge()

    sqs.purge_queue.assert_awaited_once_with(QueueUrl=URL)


async def test_failure_raises_transport_error():
    transport, sqs, _ = _make_transport()
    cause = RuntimeError("ERR")
    sqs.send_message.side_effect = cause

    with pytest.raises(TransportError) as excinfo:
        await transport.send("{}")

    assert excinfo.value.cause is cause
    assert str(excinfo.value) == "SQS send_message failed: ERR"


# ---------------------------------------------------------------------------
# Client construction
# ---------------------------------------------------------------------------


async def test_client_locks_api_version_and_region():
    transport, sqs, session = _make_transport()
    sqs.purge_queue.return_value = {}

    await transport.purge()

    assert session.client.call_args.args == ("sqs",)
    assert session.client.call_args.kwargs == {
        "api_version": API_VERSION,
        "region_name": "ap-southeast-2",
    }


def test_api_version():
    assert API_VERSION == "2012-11-05"


def test_client_kwargs_with_endpoint_url():
    transport = SQSTransport(queue_url=URL, endpoint_url="http://localhost:4566")
    assert transport._client_kwargs()["endpoint_url"] == "http://localhost:4566"
