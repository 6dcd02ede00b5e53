''' Wrapper module around :mod:`msgspec` to provide the equivalent of
    :func:`json.loads` and :func:`json.dumps`, along with a typed decode
    for the payload schemas declared in :mod:`dsgminer.protocol.payload`.
'''

import msgspec


# The msgspec 'encode' operation returns bytes; everything in dsgminer that
# puts JSON on the wire expects bytes, never str.

encoder = msgspec.json.Encoder()
decoder = msgspec.json.Decoder()

dumps = encoder.encode
loads = decoder.decode

_typed_decoders = dict()


def loads_as(data, type):
    """ Decode the supplied JSON *data* as the requested *type*. Decoders
        are cached per type, since building one is not free. A *type* of
        None is equivalent to :func:`loads`.
    """

    if type is None:
        return loads(data)

    try:
        typed = _typed_decoders[type]
    except KeyError:
        typed = msgspec.json.Decoder(type)
        _typed_decoders[type] = typed

    return typed.decode(data)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
