import json
import uuid
from unittest.mock import AsyncMock

import pytest

from courier.adapters.memory import InMemoryObjectStore
from courier.adapters.s3 import S3ObjectStore
from courier.config import CourierSettings
from courier.core.storage import StorageClient
from courier.domain.errors import KeyGenerationExhaustedError, TransportError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _ids(*values: str):
    return iter(values).__next__


def _client(
    store: AsyncMock | InMemoryObjectStore,
    *ids: str,
    settings: CourierSettings | None = None,
) -> StorageClient:
    return StorageClient(
        "bucket_name",
        store=store,
        settings=settings or CourierSettings(),
        id_factory=_ids(*ids) if ids else StorageClient.id_factory,
    )


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def test_default_store_is_s3_for_bucket():
    client = StorageClient("bucket_name", settings=CourierSettings())
    assert isinstance(client.store, S3ObjectStore)
    assert client.store.bucket == "bucket_name"
    assert client.store.region_name == "ap-southeast-2"


def test_default_id_factory_is_time_based_uuid():
    client = StorageClient("bucket_name", store=InMemoryObjectStore(), settings=CourierSettings())
    assert uuid.UUID(client.id_factory()).version == 1


# ---------------------------------------------------------------------------
# generate_unique_key()
# ---------------------------------------------------------------------------


async def test_generates_prefixed_key():
    store = AsyncMock()
    store.exists.return_value = False
    client = _client(store, "some-guid")

    assert await client.generate_unique_key("prefix") == "prefixsome-guid"
    store.exists.assert_awaited_once_with("prefixsome-guid")


async def test_generates_another_key_when_found():
    store = AsyncMock()
    store.exists.side_effect = [True, False]
    client = _client(store, "some-guid-x", "some-guid-y")

    assert await client.generate_unique_key("prefix") == "prefixsome-guid-y"


async def test_third_attempt_returns_third_suffix():
    store = AsyncMock()
    store.exists.side_effect = [True, True, False]
    client = _client(store, "a", "b", "c")

    key = await client.generate_unique_key("prefix")

    assert key == "prefixc"
    assert store.exists.await_count == 3
    assert [c.args[0] for c in store.exists.await_args_list] == [
        "prefixa",
        "prefixb",
        "prefixc",
    ]


async def test_existence_error_is_raised_unchanged_after_one_attempt():
    error = TransportError("S3 head_object failed", RuntimeError("BadError"))
    store = AsyncMock()
    store.exists.side_effect = error
    client = _client(store, "a", "b")

    with pytest.raises(TransportError) as excinfo:
        await client.generate_unique_key("prefix")

    assert excinfo.value is error
    assert store.exists.await_count == 1


async def test_exhausted_after_max_attempts():
    store = AsyncMock()
    store.exists.return_value = True
    client = _client(store, "a", "b", "c", "d", settings=CourierSettings(max_key_attempts=3))

    with pytest.raises(KeyGenerationExhaustedError) as excinfo:
        await client.generate_unique_key("prefix")

    assert excinfo.value.attempts == 3
    assert excinfo.value.prefix == "prefix"
    assert store.exists.await_count == 3


async def test_skips_keys_already_in_memory_store():
    store = InMemoryObjectStore(objects={"prefixa": b"{}"})
    client = _client(store, "a", "b")

    assert await client.generate_unique_key("prefix") == "prefixb"


# ---------------------------------------------------------------------------
# put_attachment()
# ---------------------------------------------------------------------------


async def test_put_attachment_returns_written_key():
    store = AsyncMock()
    store.exists.return_value = False
    client = _client(store, "some-guid")

    key = await client.put_attachment("prefix", {"one": "foo"})

    assert key == "prefixsome-guid"
    store.put.assert_awaited_once()
    written_key, body = store.put.await_args.args
    assert written_key == key
    assert json.loads(body) == {"one": "foo"}


async def test_put_attachment_rejects_with_write_failure():
    error = TransportError("S3 put_object failed", RuntimeError("exterminate...exterminate"))
    store = AsyncMock()
    store.exists.return_value = False
    store.put.side_effect = error
    client = _client(store, "some-guid")

    with pytest.raises(TransportError) as excinfo:
        await client.put_attachment("prefix", {"one": "foo"})

    assert excinfo.value is error


async def test_put_attachment_rejects_with_key_generation_failure():
    error = TransportError("S3 head_object failed", RuntimeError("AccessDenied"))
    store = AsyncMock()
    store.exists.side_effect = error
    client = _client(store, "some-guid")

    with pytest.raises(TransportError) as excinfo:
        await client.put_attachment("prefix", {"one": "foo"})

    assert excinfo.value is error
    store.put.assert_not_called()


# ---------------------------------------------------------------------------
# get_attachment()
# ---------------------------------------------------------------------------


async def test_get_attachment_reads_back_stored_value():
    store = InMemoryObjectStore()
    client = _client(store, "some-guid")
    attachments = [{"name": "report.pdf", "data": "aGVsbG8="}]

    key = await client.put_attachment("user@example.com/", attachments)

    assert await client.get_attachment(key) == attachments


async def test_get_attachment_missing_key_raises_transport_error():
    client = _client(InMemoryObjectStore())

    with pytest.raises(TransportError):
        await client.get_attachment("missing")
