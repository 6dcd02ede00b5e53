""" Classes and methods implemented here implement the client side of the
    request/response exchange with a miner. Each public call is a single,
    sequential pipeline: resolve the local device, build the request
    envelope, post it, decode the reply envelope, and decode its payload.
    Any failure aborts the call with a typed
    :class:`dsgminer.protocol.errors.ProtocolError`; nothing is retried.
"""

import logging

from .protocol import envelope
from .protocol import fields
from .protocol import payload
from .protocol import registry
from .protocol.errors import (
    DecodingError,
    IdentityResolutionError,
    PayloadFormatError,
    ProtocolError,
    TransportError,
)
from .protocol.objectid import ObjectId
from .protocol.payload import SetDMCAccount
from .transport.base import ObjectInfo, PostObjectRequest

logger = logging.getLogger(__name__)


class Client:
    """ Issue requests on behalf of the application *dec_id* via the
        supplied :class:`dsgminer.transport.Transport`. The client holds no
        state between calls; concurrent calls on one instance are fine, and
        are as independent as the transport makes them.
    """

    def __init__(self, transport, dec_id, req_path=fields.REQ_PATH):

        if isinstance(dec_id, str):
            dec_id = ObjectId.from_string(dec_id)

        self.transport = transport
        self.dec_id = dec_id
        self.req_path = req_path


    async def request(self, obj_type, value=None, target=None, response_type=None):
        """ Perform one exchange and return the decoded response value.
            *value* is the request payload, None for an empty body. *target*
            is the :class:`ObjectId` of the destination device; None lets
            the transport decide. The response is decoded as *response_type*
            if given, otherwise as the type registered for *obj_type*, and
            as untyped JSON if nothing is registered.
        """

        try:
            return await self._request(obj_type, value, target, response_type)
        except ProtocolError as e:
            if e.obj_type is None and isinstance(obj_type, int):
                e.obj_type = int(obj_type)

            logger.error("request failed at the %s step: %s", e.step, e)
            raise


    async def _request(self, obj_type, value, target, response_type):

        if isinstance(target, str):
            target = ObjectId.from_string(target)

        discriminator = registry.lookup(obj_type)

        if response_type is None and discriminator is not None:
            response_type = discriminator.response

        try:
            device_id = await self.transport.resolve_local_device()
        except IdentityResolutionError:
            raise
        except Exception as e:
            raise IdentityResolutionError('cannot resolve local device: ' + str(e), obj_type) from e

        if not isinstance(device_id, ObjectId):
            raise IdentityResolutionError('transport resolved the local device as ' + repr(device_id), obj_type)

        body = payload.encode(value, obj_type)
        object_id, object_raw = envelope.encode(self.dec_id, device_id, obj_type, body)

        post = PostObjectRequest(
            req_path=self.req_path,
            dec_id=self.dec_id,
            object=ObjectInfo(object_id, object_raw),
            level=fields.LEVEL_ROUTER,
            target=target,
        )

        try:
            result = await self.transport.post_object(post)
        except TransportError:
            raise
        except Exception as e:
            raise TransportError('post_object failed: ' + str(e), obj_type) from e

        if result is None or result.object_raw is None:
            raise DecodingError('transport response carried no object', obj_type)

        reply_type, reply_body, reply = envelope.decode(result.object_raw)

        if discriminator is not None and discriminator.reply is not None:
            if reply_type != discriminator.reply:
                raise PayloadFormatError("expected a reply of obj_type %d, got %d" % (discriminator.reply, reply_type), obj_type)

        decoded = payload.decode(reply_body, response_type, obj_type)
        logger.debug("obj_type %d answered by %s", obj_type, reply.owner_id)
        return decoded


    async def get_stat(self, target=None):
        """ Return the miner's :class:`dsgminer.protocol.payload.MinerStat`.
        """

        return await self.request(registry.GET_STAT, target=target)


    async def get_dmc_key(self, dmc_account, target=None):
        return await self.request(registry.GET_DMC_KEY, dmc_account, target)


    async def get_dmc_account(self, target=None):
        return await self.request(registry.GET_DMC_ACCOUNT, target=target)


    async def set_dmc_account(self, dmc_account, dmc_key, target=None):
        """ Bind the miner to a DMC account, with *dmc_key* as its private
            key.
        """

        value = SetDMCAccount(dmc_account=dmc_account, dmc_key=dmc_key)
        return await self.request(registry.SET_DMC_ACCOUNT, value, target)


    async def set_http_domain(self, domain, target=None):
        return await self.request(registry.SET_HTTP_DOMAIN, domain, target)


# end of class Client


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
