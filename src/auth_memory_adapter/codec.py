"""Text encodings for values JSON cannot carry natively.

Raw bytes are written as ``{"type": "uint8array", "data": <base64>}`` and
datetimes as ISO-8601 strings.  Authenticator credential ids are keyed by
their standard base64 text.
"""

from __future__ import annotations

import base64
import binascii
from datetime import datetime
from typing import Any

BINARY_TAG = "uint8array"


def encode_bytes(value: bytes) -> dict[str, str]:
    """Wrap raw bytes in the tagged structure."""
    return {"type": BINARY_TAG, "data": base64.b64encode(value).decode("ascii")}


def is_tagged_bytes(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and value.get("type") == BINARY_TAG
        and isinstance(value.get("data"), str)
    )


def decode_bytes(value: Any) -> bytes:
    """Restore raw bytes from a tagged structure.

    Raises:
        ValueError: If *value* is not a tagged structure or its payload is
            not valid base64.
    """
    if not is_tagged_bytes(value):
        raise ValueError(f"Expected a tagged {BINARY_TAG} value, got {value!r}")
    try:
        return base64.b64decode(value["data"], validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 payload: {exc}") from exc


def encode_datetime(value: datetime) -> str:
    return value.isoformat()


def decode_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


def credential_key(credential_id: bytes) -> str:
    """Store key for an authenticator: standard base64 of the raw credential id."""
    return base64.b64encode(credential_id).decode("ascii")
