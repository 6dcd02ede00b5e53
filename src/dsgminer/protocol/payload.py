""" Payload schemas and the JSON body codec. A request value becomes the
    UTF-8 JSON body of an envelope; a response body is decoded against an
    explicit schema, and anything that does not match the schema exactly
    is rejected rather than partially accepted.
"""

import msgspec

from .. import json
from .errors import EncodingError, PayloadFormatError


class MinerStat(msgspec.Struct):
    """ Miner counters. The values are decimal numbers encoded as strings,
        so that arbitrary precision survives the round trip.
    """

    bill_count: str
    order_count: str
    billed_space: str
    selled_space: str
    used_space: str


class SetDMCAccount(msgspec.Struct):
    dmc_account: str
    dmc_key: str


def encode(value, obj_type=None):
    """ Serialize a request *value* as UTF-8 JSON bytes. A *value* of None
        means there is no request payload, and yields an empty body.
    """

    if value is None:
        return b''

    try:
        return json.dumps(value)
    except (TypeError, msgspec.EncodeError) as e:
        raise EncodingError('cannot serialize request value: ' + str(e), obj_type) from e


def decode(body, type=None, obj_type=None):
    """ Decode a response *body* as UTF-8 JSON, validated against *type*
        if one is given. Returns the decoded value.
    """

    try:
        text = bytes(body).decode('utf-8')
    except UnicodeDecodeError as e:
        raise PayloadFormatError('response body is not UTF-8: ' + str(e), obj_type) from e

    try:
        return json.loads_as(text, type)
    except msgspec.DecodeError as e:
        raise PayloadFormatError('invalid response payload: ' + str(e), obj_type) from e


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
