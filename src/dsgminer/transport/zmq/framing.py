"""ZMQ multipart framing for object posts.

Requests (DEALER -> ROUTER)
    version, request_id, b"DEVICE"
    version, request_id, b"POST", req_path, dec_id, level, target, object_id, object_raw

Replies (ROUTER -> DEALER)
    version, request_id, b"OK", device_id                   (DEVICE)
    version, request_id, b"OK", object_id, object_raw       (POST)
    version, request_id, b"ERR", error_json

ROUTER sockets prepend an identity frame on receipt and expect it back on
send; an empty ``target`` or ``object_id`` frame stands for None.
"""

from __future__ import annotations

import itertools
import threading
from typing import Optional, Sequence, Tuple

import msgspec

from ... import json
from ...protocol.objectid import ObjectId
from ..base import ObjectInfo, PostObjectRequest


PROTOCOL_VERSION = b"a"

DEVICE = b"DEVICE"
POST = b"POST"
OK = b"OK"
ERR = b"ERR"


_id_min = 0
_id_max = 0xFFFFFFFF
_id_lock = threading.Lock()
_id_ticker = itertools.count(_id_min)


def next_id() -> bytes:
    """Return the next locally unique request id."""

    global _id_ticker
    with _id_lock:
        value = next(_id_ticker)
        if value >= _id_max:
            _id_ticker = itertools.count(_id_min)

    return b"%08x" % (value,)


def _optional_id(frame: bytes) -> Optional[ObjectId]:
    if frame in (b"", None):
        return None
    return ObjectId(frame)


def to_device_frames(request_id: bytes) -> Tuple[bytes, ...]:
    return (PROTOCOL_VERSION, request_id, DEVICE)


def to_post_frames(request_id: bytes, request: PostObjectRequest) -> Tuple[bytes, ...]:
    target = b"" if request.target is None else request.target.raw
    info = request.object
    object_id = b"" if info.object_id is None else info.object_id.raw

    return (
        PROTOCOL_VERSION,
        request_id,
        POST,
        request.req_path.encode(),
        request.dec_id.raw,
        request.level.encode(),
        target,
        object_id,
        info.object_raw,
    )


def from_request_frames(parts: Sequence[bytes]) -> Tuple[bytes, bytes, Optional[PostObjectRequest]]:
    """Decode request parts, without any ROUTER identity prefix.

    Returns (request_id, command, post); post is None for DEVICE.
    """

    if len(parts) < 3:
        raise ValueError("truncated request")

    if parts[0] != PROTOCOL_VERSION:
        raise ValueError(
            f"message is protocol {parts[0]!r}, recipient expects {PROTOCOL_VERSION!r}"
        )

    request_id = parts[1]
    command = parts[2]

    if command == DEVICE:
        return request_id, command, None

    if command != POST:
        raise ValueError(f"unknown command: {command!r}")

    if len(parts) != 9:
        raise ValueError(f"POST request has {len(parts)} parts, expected 9")

    post = PostObjectRequest(
        req_path=parts[3].decode(),
        dec_id=ObjectId(parts[4]),
        level=parts[5].decode(),
        target=_optional_id(parts[6]),
        object=ObjectInfo(_optional_id(parts[7]), parts[8]),
    )
    return request_id, command, post


def to_device_reply(request_id: bytes, device_id: ObjectId) -> Tuple[bytes, ...]:
    return (PROTOCOL_VERSION, request_id, OK, device_id.raw)


def to_post_reply(request_id: bytes, info: Optional[ObjectInfo]) -> Tuple[bytes, ...]:
    if info is None:
        return (PROTOCOL_VERSION, request_id, OK, b"", b"")

    object_id = b"" if info.object_id is None else info.object_id.raw
    return (PROTOCOL_VERSION, request_id, OK, object_id, info.object_raw)


def to_error_reply(request_id: bytes, error: dict) -> Tuple[bytes, ...]:
    return (PROTOCOL_VERSION, request_id, ERR, json.dumps(error))


def from_reply_frames(parts: Sequence[bytes]) -> Tuple[bytes, bytes, Tuple[bytes, ...]]:
    """Decode reply parts into (request_id, status, remaining parts)."""

    if len(parts) < 3:
        raise ValueError("truncated reply")

    if parts[0] != PROTOCOL_VERSION:
        raise ValueError(
            f"message is protocol {parts[0]!r}, recipient expects {PROTOCOL_VERSION!r}"
        )

    status = parts[2]
    if status not in (OK, ERR):
        raise ValueError(f"unknown reply status: {status!r}")

    return parts[1], status, tuple(parts[3:])


def device_from_reply(fields: Sequence[bytes]) -> ObjectId:
    if len(fields) != 1:
        raise ValueError("DEVICE reply must carry exactly one id")
    return ObjectId(fields[0])


def object_from_reply(fields: Sequence[bytes]) -> Optional[ObjectInfo]:
    if len(fields) != 2:
        raise ValueError("POST reply must carry an id and an object")

    object_id, object_raw = fields
    if object_id == b"" and object_raw == b"":
        return None

    return ObjectInfo(_optional_id(object_id), object_raw)


def error_from_reply(fields: Sequence[bytes]) -> dict:
    if len(fields) != 1:
        return {"type": "RuntimeError", "text": "malformed error reply"}

    try:
        error = json.loads(fields[0])
    except msgspec.DecodeError:
        error = None

    if not isinstance(error, dict):
        return {"type": "RuntimeError", "text": "malformed error reply"}

    return error
