""" Shared helpers for the unit tests: deterministic identifiers, canned
    reply envelopes, and a scripted transport.
"""

import hashlib

import dsgminer
from dsgminer.protocol import envelope
from dsgminer.transport.base import ObjectInfo, Transport


STAT_BODY = b'{"bill_count":"3","order_count":"3","billed_space":"1024","selled_space":"512","used_space":"256"}'


def make_id(seed):
    """ Deterministic test identifier derived from a short string.
    """

    return dsgminer.ObjectId(hashlib.sha256(seed.encode()).digest())


def reply_object(creator_id, owner_id, obj_type, body):
    """ Encode a reply envelope the way a remote service would.
    """

    object_id, raw = envelope.encode(creator_id, owner_id, obj_type, body)
    return ObjectInfo(object_id, raw)


class Scripted(Transport):
    """ A transport that resolves a fixed device, records every post, and
        answers with a canned *reply* or raises a canned *error*.
    """

    def __init__(self, device_id, reply=None, error=None, identity_error=None):

        self.device_id = device_id
        self.reply = reply
        self.error = error
        self.identity_error = identity_error
        self.posts = list()


    async def resolve_local_device(self):

        if self.identity_error is not None:
            raise self.identity_error

        return self.device_id


    async def post_object(self, request):

        self.posts.append(request)

        if self.error is not None:
            raise self.error

        return self.reply


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
