""" Implementation of the top-level :func:`connect` method. This is intended
    to be the principal entry point for users talking to a miner.
"""

from . import config
from .client import Client
from .transport import zmq


_cache = dict()


def _clear(key):
    """ Remove a cached :class:`Client` from the cache, returning it if one
        was present, so that the caller can close its transport.
    """

    try:
        existing = _cache[key]
    except KeyError:
        return

    del _cache[key]
    return existing


def connect(address=None, port=None, dec_id=None):
    """ Return a :class:`dsgminer.client.Client` talking to the ZeroMQ
        transport service at *address*:*port*, acting as the application
        *dec_id*. Any argument left as None is taken from
        :func:`dsgminer.config.load`.

        Repeated calls with the same effective arguments return the same
        :class:`Client` instance.
    """

    settings = config.load()

    if address is not None:
        settings['address'] = address
    if port is not None:
        settings['port'] = port
    if dec_id is not None:
        settings['dec_id'] = dec_id

    settings = config.validate(settings)

    if settings['dec_id'] is None:
        raise ValueError('no dec_id configured; set DSGMINER_DEC_ID or pass dec_id')

    key = (settings['address'], settings['port'], settings['dec_id'], settings['req_path'])

    try:
        return _cache[key]
    except KeyError:
        pass

    transport = zmq.Client(settings['address'], settings['port'])
    client = Client(transport, settings['dec_id'], settings['req_path'])
    _cache[key] = client
    return client


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
