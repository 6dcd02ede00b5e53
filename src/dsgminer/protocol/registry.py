""" Registry of request discriminators. Each registered discriminator is an
    :class:`int` subclass, so it can be used anywhere a bare ``obj_type`` is
    expected, carrying with it the request and response payload schemas
    and, where the remote side answers with a distinct discriminator, the
    discriminator of the reply.

    Callers may register their own discriminators; the protocol itself
    places no limit on which values are used.
"""

import threading

from . import fields
from .payload import MinerStat, SetDMCAccount


_registry = dict()
_registry_lock = threading.Lock()


class Discriminator(int):
    """ A named discriminator. *request* and *response* are the payload
        types (anything :mod:`msgspec` can decode into), or None for an
        untyped or absent payload. *reply* is the discriminator the remote
        side is expected to answer with, or None if it is not checked.
    """

    def __new__(cls, value, name, request=None, response=None, reply=None):

        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError('discriminator value must be an integer')

        if value < fields.OBJ_TYPE_MIN or value > fields.OBJ_TYPE_MAX:
            raise ValueError("discriminator %d outside of %d:%d" % (value, fields.OBJ_TYPE_MIN, fields.OBJ_TYPE_MAX))

        instance = int.__new__(cls, value)
        instance.name = name
        instance.request = request
        instance.response = response
        instance.reply = reply
        return instance


    def __repr__(self):
        return "<Discriminator %s=%d>" % (self.name, int(self))


# end of class Discriminator



def register(value, name, request=None, response=None, reply=None, replace=False):
    """ Register and return a new :class:`Discriminator`. Registering the
        same value twice is an error unless *replace* is True.
    """

    discriminator = Discriminator(value, name, request, response, reply)

    with _registry_lock:
        if replace == False and int(value) in _registry:
            existing = _registry[int(value)]
            raise ValueError("discriminator %d already registered as %s" % (int(value), existing.name))

        _registry[int(value)] = discriminator

    return discriminator


def unregister(value):
    with _registry_lock:
        del _registry[int(value)]


def lookup(value):
    """ Return the registered :class:`Discriminator` for *value*, or None
        if nothing is registered for it.
    """

    if isinstance(value, Discriminator):
        return value

    if isinstance(value, bool) or not isinstance(value, int):
        return None

    return _registry.get(value)


def registered():
    return dict(_registry)


# Discriminators answered by the miner. The DMC account calls come in pairs,
# the reply discriminator immediately following the request.

GET_DMC_KEY_RESP = register(1, 'GET_DMC_KEY_RESP', response=str)
GET_DMC_KEY = register(0, 'GET_DMC_KEY', request=str, response=str, reply=GET_DMC_KEY_RESP)

GET_DMC_ACCOUNT_RESP = register(3, 'GET_DMC_ACCOUNT_RESP', response=str)
GET_DMC_ACCOUNT = register(2, 'GET_DMC_ACCOUNT', response=str, reply=GET_DMC_ACCOUNT_RESP)

SET_DMC_ACCOUNT_RESP = register(5, 'SET_DMC_ACCOUNT_RESP', response=str)
SET_DMC_ACCOUNT = register(4, 'SET_DMC_ACCOUNT', request=SetDMCAccount, response=str, reply=SET_DMC_ACCOUNT_RESP)

SET_HTTP_DOMAIN_RESP = register(7, 'SET_HTTP_DOMAIN_RESP', response=str)
SET_HTTP_DOMAIN = register(6, 'SET_HTTP_DOMAIN', request=str, response=str, reply=SET_HTTP_DOMAIN_RESP)

GET_STAT = register(12, 'GET_STAT', response=MinerStat)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
