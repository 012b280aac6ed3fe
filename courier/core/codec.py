"""
Codec — JSON text encoding for message bodies and attachments.

pydantic_core does the work, so anything pydantic can serialise is accepted:
plain JSON values, datetimes (ISO-8601), bytes, and BaseModel instances.
"""
from __future__ import annotations

from typing import Any

from pydantic_core import from_json, to_json


def encode(value: Any) -> str:
    """Serialize a value to JSON text."""
    return to_json(value).decode("utf-8")


def encode_bytes(value: Any) -> bytes:
    """Serialize a value to UTF-8 JSON bytes."""
    return to_json(value)


def decode(data: str | bytes) -> Any:
    """Deserialize JSON text or bytes."""
    return from_json(data)


def decode_body(message: dict[str, Any]) -> Any:
    """Decode the JSON body of a single received message."""
    return from_json(message["Body"])
