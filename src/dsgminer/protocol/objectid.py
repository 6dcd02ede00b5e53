""" Fixed-width object identifiers, and the content-addressing function used
    to derive them. The identifier is 32 bytes on the wire; the text form is
    lowercase hexadecimal.
"""

import hashlib


width = 32


def _sha256(data):
    return hashlib.sha256(data).digest()


hash_function = _sha256


def set_hash_function(function):
    """ Replace the content-addressing function used by :func:`digest`. The
        *function* must accept bytes and return exactly :data:`width` bytes;
        it must be deterministic, and should be collision resistant, since
        the resulting identifiers are used as routing and dedup keys. Passing
        None restores the default SHA-256 function.
    """

    global hash_function

    if function is None:
        function = _sha256

    hash_function = function


def digest(data):
    """ Return the content hash of *data* as bytes, checking that the active
        hash function honored the identifier width.
    """

    result = hash_function(bytes(data))

    if len(result) != width:
        raise ValueError("hash function returned %d bytes, expected %d" % (len(result), width))

    return result


class ObjectId:
    """ An immutable identifier for an object, device, or application. The
        *raw* argument is the 32-byte binary form; use :func:`from_string`
        to parse the hexadecimal text form.
    """

    __slots__ = ('raw',)

    def __init__(self, raw):

        if not isinstance(raw, (bytes, bytearray, memoryview)):
            raise TypeError('ObjectId requires bytes, got ' + type(raw).__name__)

        raw = bytes(raw)

        if len(raw) != width:
            raise ValueError("an ObjectId is %d bytes, got %d" % (width, len(raw)))

        object.__setattr__(self, 'raw', raw)


    def __setattr__(self, name, value):
        raise AttributeError('ObjectId instances are immutable')


    def __bytes__(self):
        return self.raw


    def __eq__(self, other):

        if isinstance(other, ObjectId):
            return self.raw == other.raw

        return NotImplemented


    def __hash__(self):
        return hash(self.raw)


    def __repr__(self):
        return "ObjectId('%s')" % (self.raw.hex())


    def __str__(self):
        return self.raw.hex()


    @classmethod
    def from_string(cls, text):
        """ Parse the hexadecimal text form of an identifier.
        """

        try:
            raw = bytes.fromhex(text)
        except (TypeError, ValueError):
            raise ValueError('not a hexadecimal object id: ' + repr(text))

        return cls(raw)


    @classmethod
    def calculate(cls, data):
        """ Derive an identifier from the content hash of *data*.
        """

        return cls(digest(data))


# end of class ObjectId


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
