"""
dsgminer Protocol Layer
=======================

This package defines the transport-agnostic pieces of the request/response
exchange: the binary object envelope, the identifiers it carries, the
payload schemas, and the registry of discriminators.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Client (client.py)
    One full exchange per call
    - resolve the local device
    - build, post, and decode envelopes
    - typed payload decoding

    │
    ▼
Discriminator Registry (registry.py)
    Extensible enumeration of obj_type values
    - request/response schemas
    - expected reply discriminator

    │
    ▼
Payload Codec (payload.py)
    Request value <-> UTF-8 JSON body
    - MinerStat and other schemas

    │
    ▼
Envelope Codec (envelope.py)
    (creator, owner, obj_type, body) <-> bytes
    - content-derived object id
    - exact size measurement

    │
    ▼
Identifiers (objectid.py)
    32-byte ObjectId, pluggable content hash

---------------------------------------------------------------------
"""

from . import errors
from . import fields
from . import objectid
from . import envelope
from . import payload
from . import registry

from .errors import (
    ProtocolError,
    IdentityResolutionError,
    TransportError,
    EncodingError,
    DecodingError,
    PayloadFormatError,
    NotSupported,
)
from .objectid import ObjectId
from .envelope import Envelope
from .payload import MinerStat, SetDMCAccount
from .registry import Discriminator


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
