"""ZeroMQ request/response transport."""

from .client import Client, endpoint
from .server import Server
