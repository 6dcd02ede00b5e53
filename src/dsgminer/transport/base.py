"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`dsgminer.protocol` so the protocol remains
transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..protocol import fields
from ..protocol.errors import (
    TransportError,
    TransportConnectionError,
    TransportPortError,
)
from ..protocol.objectid import ObjectId


@dataclass(frozen=True)
class ObjectInfo:
    """An encoded object and its identifier, as carried by the transport."""

    object_id: ObjectId
    object_raw: bytes


@dataclass(frozen=True)
class PostObjectRequest:
    """An addressed object post.

    ``target`` is None when the transport should pick the destination
    itself, which in practice means the local device.
    """

    req_path: str
    dec_id: ObjectId
    object: ObjectInfo
    level: str = fields.LEVEL_ROUTER
    target: Optional[ObjectId] = None

    def __post_init__(self):
        if self.level not in fields.LEVELS:
            raise ValueError(f"unknown API level: {self.level!r}")


class Transport(ABC):
    """Minimal contract for the peer-to-peer transport."""

    @abstractmethod
    async def resolve_local_device(self) -> ObjectId:
        """Return the identity of the local device."""

    @abstractmethod
    async def post_object(self, request: PostObjectRequest) -> Optional[ObjectInfo]:
        """Deliver an object and return the object sent back, if any."""

    async def close(self) -> None:
        """Release any resources held by the transport."""
