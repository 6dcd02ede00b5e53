"""ZeroMQ server transport.

Receives DEVICE and POST requests via an asyncio ROUTER socket on behalf of
one device, and hands posted objects to a :class:`dsgminer.service.Service`.
Each request is handled in its own task, so a slow handler does not hold up
the requests queued behind it.
"""

from __future__ import annotations

import asyncio
import logging
import traceback
from typing import Optional, Set

import zmq
import zmq.asyncio

from ...protocol.objectid import ObjectId
from ..base import (
    ObjectInfo,
    PostObjectRequest,
    TransportConnectionError,
    TransportError,
    TransportPortError,
)
from . import framing

logger = logging.getLogger(__name__)


minimum_port = 10079
maximum_port = 13679


class Server:
    """Answer requests for the device *device_id* using *service*.

    The default behavior is to listen on every interface, on the first
    available port within the default range; the *avoid* set enumerates
    port numbers that should not be automatically assigned. A fixed *port*
    may be requested instead, or a complete ZeroMQ *endpoint*.

    :ivar port: The port on which this server is listening, if TCP.
    """

    def __init__(self, service, device_id: ObjectId, address: str = "*", port: Optional[int] = None,
                 *, endpoint: Optional[str] = None, avoid: Optional[set] = None,
                 context: Optional[zmq.asyncio.Context] = None):

        self.service = service
        self.device_id = device_id
        self.address = address
        self.avoid = set(avoid or ())
        self.context = context if context is not None else zmq.asyncio.Context.instance()

        self.socket = self.context.socket(zmq.ROUTER)
        self.socket.setsockopt(zmq.LINGER, 0)

        if endpoint is not None:
            try:
                self.socket.bind(endpoint)
            except zmq.ZMQError as exc:
                self.socket.close()
                raise TransportPortError(f"cannot bind {endpoint}: {exc}") from exc
            self.endpoint = endpoint
            self.port = None
        elif port is None:
            self.port = self._bind_any()
            self.endpoint = f"tcp://{address}:{self.port}"
        else:
            self.port = int(port)
            self.endpoint = f"tcp://{address}:{self.port}"
            try:
                self.socket.bind(self.endpoint)
            except zmq.ZMQError as exc:
                self.socket.close()
                raise TransportPortError(f"port already in use: {self.port}") from exc

        self._runner: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    def _bind_any(self) -> int:
        for port in range(minimum_port, maximum_port + 1):
            if port in self.avoid:
                continue
            try:
                self.socket.bind(f"tcp://{self.address}:{port}")
                return port
            except zmq.ZMQError:
                # Assume this port is in use.
                continue

        self.socket.close()
        raise TransportPortError(
            f"no ports available in range {minimum_port}:{maximum_port}"
        )

    def start(self) -> asyncio.Task:
        """Start serving in the background of the running event loop."""

        if self._runner is None or self._runner.done():
            self._runner = asyncio.ensure_future(self.run())
        return self._runner

    async def run(self) -> None:
        while True:
            parts = await self.socket.recv_multipart()
            task = asyncio.ensure_future(self._req_incoming(parts))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _req_incoming(self, parts) -> None:
        ident = parts[0]
        body = parts[1:]

        try:
            request_id, command, post = framing.from_request_frames(body)
        except ValueError as exc:
            logger.warning("malformed request: %s", exc)
            if len(body) >= 2:
                error = {"type": "ValueError", "text": str(exc)}
                await self.socket.send_multipart((ident,) + framing.to_error_reply(body[1], error))
            return

        try:
            if command == framing.DEVICE:
                reply = framing.to_device_reply(request_id, self.device_id)
            else:
                reply = framing.to_post_reply(request_id, await self._post(post))
        except Exception as exc:
            error = {
                "type": type(exc).__name__,
                "text": str(exc),
                "debug": traceback.format_exc(),
            }
            logger.error("request %s failed: %s: %s", request_id.decode(errors="replace"), error["type"], exc)
            reply = framing.to_error_reply(request_id, error)

        await self.socket.send_multipart((ident,) + reply)

    async def _post(self, post: PostObjectRequest) -> Optional[ObjectInfo]:
        if post.target is not None and post.target != self.device_id:
            raise TransportConnectionError(f"no route to device {post.target}")

        if post.req_path != self.service.req_path:
            raise TransportError(f"no service listening on {post.req_path!r}")

        return await self.service.handle(post.object)

    async def close(self) -> None:
        tasks = list(self._tasks)
        if self._runner is not None:
            tasks.append(self._runner)
            self._runner = None

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self.socket.close(linger=0)
