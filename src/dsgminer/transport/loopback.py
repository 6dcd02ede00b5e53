"""In-process transport.

Posts are handed directly to a local :class:`dsgminer.service.Service`,
without leaving the process. Useful for tests, and for applications that
host the service and its client side by side.
"""

from __future__ import annotations

from typing import Optional

from ..protocol.objectid import ObjectId
from .base import (
    ObjectInfo,
    PostObjectRequest,
    Transport,
    TransportConnectionError,
    TransportError,
)


class Loopback(Transport):
    """Deliver every post to *service*, as the device *device_id*."""

    def __init__(self, device_id: ObjectId, service=None):
        self.device_id = device_id
        self.service = service

    async def resolve_local_device(self) -> ObjectId:
        return self.device_id

    async def post_object(self, request: PostObjectRequest) -> Optional[ObjectInfo]:
        if request.target is not None and request.target != self.device_id:
            raise TransportConnectionError(f"no route to device {request.target}")

        service = self.service
        if service is None or service.req_path != request.req_path:
            raise TransportError(f"no service listening on {request.req_path!r}")

        # Anything the service raises is a failure on the remote end, as far
        # as the caller can tell.
        try:
            return await service.handle(request.object)
        except Exception as ex:
            raise TransportError(f"remote service failed: {type(ex).__name__}: {ex}") from ex
