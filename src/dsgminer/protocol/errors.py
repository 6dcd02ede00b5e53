""" Exception hierarchy for the request/response exchange. Every failure in
    a :func:`dsgminer.client.Client.request` pipeline surfaces as exactly one
    of these, with the original exception chained as ``__cause__``.
"""


class ProtocolError(Exception):
    """ Base class for all exchange failures. The *step* is a short label
        for the stage of the pipeline that failed ('identity', 'encode',
        'transport', 'decode', 'payload'); *obj_type* is the discriminator
        of the request in flight, if known.
    """

    step = None

    def __init__(self, message, obj_type=None, step=None):

        if step is not None:
            self.step = step

        if isinstance(obj_type, int):
            obj_type = int(obj_type)

        self.obj_type = obj_type
        Exception.__init__(self, message)


    def __str__(self):

        message = Exception.__str__(self)

        if self.obj_type is None:
            return message

        return "%s (obj_type %s)" % (message, self.obj_type)


class IdentityResolutionError(ProtocolError):
    """The local device identity could not be resolved."""

    step = 'identity'


class TransportError(ProtocolError):
    """Base class for all transport-layer errors."""

    step = 'transport'


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class TransportPortError(TransportError):
    """No suitable port could be bound or connected."""


class EncodingError(ProtocolError):
    """An outbound envelope or payload could not be constructed."""

    step = 'encode'


class DecodingError(ProtocolError):
    """An inbound envelope is truncated, malformed, or fails verification."""

    step = 'decode'


class PayloadFormatError(ProtocolError):
    """A response body is not valid UTF-8 JSON of the expected shape."""

    step = 'payload'


class NotSupported(ProtocolError):
    """A service received a discriminator it has no handler for."""

    step = 'dispatch'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
