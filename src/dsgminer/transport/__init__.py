"""Transport layer implementations."""

from .base import (
    ObjectInfo,
    PostObjectRequest,
    Transport,
    TransportError,
    TransportConnectionError,
    TransportPortError,
)
from .loopback import Loopback
