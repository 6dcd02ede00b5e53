"""ZeroMQ client transport.

Issues DEVICE and POST requests via an asyncio DEALER socket, correlating
replies to outstanding requests by request id. There is no internal
timeout; a caller that wants one wraps the call in ``asyncio.wait_for``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Tuple

import zmq
import zmq.asyncio

from ...protocol.errors import IdentityResolutionError
from ...protocol.objectid import ObjectId
from ..base import (
    ObjectInfo,
    PostObjectRequest,
    Transport,
    TransportConnectionError,
    TransportError,
)
from . import framing

logger = logging.getLogger(__name__)


def endpoint(address: str, port: Optional[int] = None) -> str:
    """Return a ZeroMQ endpoint; a bare *address* is assumed complete."""

    if port is None:
        return address
    return f"tcp://{address}:{int(port)}"


class Client(Transport):
    """Post objects to a :class:`Server` reachable at *address*:*port*.

    If *port* is None, *address* is taken as a complete ZeroMQ endpoint,
    such as ``inproc://miner``; in that case the same *context* must be
    shared with the server.
    """

    def __init__(self, address: str, port: Optional[int] = None, *, context: Optional[zmq.asyncio.Context] = None):
        self.endpoint = endpoint(address, port)
        self.context = context if context is not None else zmq.asyncio.Context.instance()

        self.socket: Optional[zmq.asyncio.Socket] = None
        self._pending: Dict[bytes, asyncio.Future] = {}
        self._reader: Optional[asyncio.Task] = None

    def open(self) -> None:
        if self.socket is not None:
            return

        identity = f"dsgminer.Client.{id(self)}".encode()

        socket = self.context.socket(zmq.DEALER)
        socket.setsockopt(zmq.LINGER, 0)
        socket.identity = identity

        try:
            socket.connect(self.endpoint)
        except zmq.ZMQError as exc:
            socket.close()
            raise TransportConnectionError(f"cannot connect to {self.endpoint}: {exc}") from exc

        self.socket = socket

    def _ensure_reader(self) -> None:
        self.open()
        if self._reader is None or self._reader.done():
            self._reader = asyncio.ensure_future(self._run())

    async def _run(self) -> None:
        try:
            while True:
                parts = await self.socket.recv_multipart()
                self._handle_incoming(parts)
        except zmq.ZMQError as exc:
            logger.error("receive failed on %s: %s", self.endpoint, exc)
            self._fail_pending(TransportConnectionError(f"receive failed: {exc}"))

    def _handle_incoming(self, parts) -> None:
        try:
            request_id, status, fields = framing.from_reply_frames(parts)
        except ValueError as exc:
            logger.warning("discarding malformed reply from %s: %s", self.endpoint, exc)
            return

        future = self._pending.pop(request_id, None)
        if future is None or future.done():
            # The original caller is gone, no further processing is possible.
            return

        future.set_result((status, fields))

    def _fail_pending(self, exc: Exception) -> None:
        pending = self._pending
        self._pending = {}
        for future in pending.values():
            if not future.done():
                future.set_exception(exc)

    async def _call(self, request_id: bytes, frames) -> Tuple[bytes, ...]:
        self._ensure_reader()

        future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future

        try:
            try:
                await self.socket.send_multipart(frames)
            except zmq.ZMQError as exc:
                raise TransportConnectionError(f"send to {self.endpoint} failed: {exc}") from exc

            status, fields = await future
        finally:
            self._pending.pop(request_id, None)

        if status == framing.ERR:
            error = framing.error_from_reply(fields)
            raise TransportError(f"{error.get('type')}: {error.get('text')}")

        return fields

    async def resolve_local_device(self) -> ObjectId:
        request_id = framing.next_id()

        try:
            fields = await self._call(request_id, framing.to_device_frames(request_id))
            return framing.device_from_reply(fields)
        except (TransportError, ValueError) as exc:
            raise IdentityResolutionError(f"DEVICE @ {self.endpoint}: {exc}") from exc

    async def post_object(self, request: PostObjectRequest) -> Optional[ObjectInfo]:
        request_id = framing.next_id()
        fields = await self._call(request_id, framing.to_post_frames(request_id, request))

        try:
            return framing.object_from_reply(fields)
        except ValueError as exc:
            raise TransportError(f"POST @ {self.endpoint}: {exc}") from exc

    async def close(self) -> None:
        reader = self._reader
        self._reader = None

        if reader is not None and not reader.done():
            reader.cancel()
            await asyncio.gather(reader, return_exceptions=True)

        self._fail_pending(TransportConnectionError("transport closed"))

        if self.socket is not None:
            self.socket.close(linger=0)
            self.socket = None
