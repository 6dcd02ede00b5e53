""" The remote side of the exchange: a :class:`Service` owns a routing path,
    accepts posted envelopes, dispatches them by discriminator to registered
    handlers, and wraps whatever the handler returns in a reply envelope.
    Both :class:`dsgminer.transport.Loopback` and the ZeroMQ
    :class:`dsgminer.transport.zmq.Server` deliver posted objects here.
"""

import inspect
import logging

from .protocol import envelope
from .protocol import fields
from .protocol import payload
from .protocol import registry
from .protocol.errors import DecodingError, NotSupported
from .transport.base import ObjectInfo

logger = logging.getLogger(__name__)


class Service:
    """ Answer requests on behalf of the application identified by *dec_id*,
        running on the device identified by *owner_id*. Reply envelopes are
        created by *dec_id* and owned by *owner_id*.
    """

    def __init__(self, dec_id, owner_id, req_path=fields.REQ_PATH):

        self.dec_id = dec_id
        self.owner_id = owner_id
        self.req_path = req_path
        self._handlers = dict()


    def on(self, obj_type, handler):
        """ Register a *handler* for the discriminator *obj_type*. The
            handler receives the decoded request value, or None if the
            request had no body, and returns the reply value; it may be a
            plain function or a coroutine function.
        """

        self._handlers[int(obj_type)] = handler


    def handles(self, obj_type):
        return int(obj_type) in self._handlers


    async def handle(self, info):
        """ Decode the posted :class:`ObjectInfo`, dispatch it, and return
            the reply as another :class:`ObjectInfo`.
        """

        obj_type, body, request = envelope.decode(info.object_raw)

        if info.object_id is not None and info.object_id != request.object_id:
            raise DecodingError('posted object id does not match its descriptor', obj_type)

        logger.info("received obj_type %d from %s", obj_type, request.creator_id)

        if not self.handles(obj_type):
            raise NotSupported('no handler for request', obj_type)

        handler = self._handlers[obj_type]

        discriminator = registry.lookup(obj_type)

        if discriminator is None:
            request_type = None
            reply_type = obj_type
        else:
            request_type = discriminator.request
            reply_type = discriminator.reply
            if reply_type is None:
                reply_type = obj_type

        if body == b'':
            value = None
        else:
            value = payload.decode(body, request_type, obj_type)

        result = handler(value)

        if inspect.isawaitable(result):
            result = await result

        reply_body = payload.encode(result, reply_type)
        reply = envelope.Envelope(self.dec_id, self.owner_id, reply_type, reply_body)

        return ObjectInfo(reply.object_id, reply.to_bytes())


# end of class Service


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
