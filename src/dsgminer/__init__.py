""" Python client for the DSG miner command channel. Requests are typed
    envelopes posted to a device over a peer-to-peer transport; replies come
    back the same way and are decoded into structured values.
"""

# Utility components.

from . import json

# Submodules used by multiple other components.

from . import protocol
from . import config
from . import transport
home = config.directory

# Primary public-facing interfaces.

from . import begin
connect = begin.connect

from .client import Client
from .service import Service
from .protocol.errors import (
    ProtocolError,
    IdentityResolutionError,
    TransportError,
    EncodingError,
    DecodingError,
    PayloadFormatError,
)
from .protocol.objectid import ObjectId
from .protocol.payload import MinerStat

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
