""" The binary object envelope that carries every request and response. An
    envelope wraps an opaque body with the identities of its creator and
    owner and a type discriminator; its identifier is derived from the
    descriptor, which commits to the body through a content hash.

    The on-the-wire layout, all integers big-endian::

        version         1 byte
        category        2 bytes, always 50001 (JSON object)
        total length    4 bytes, including this header
        obj_type        2 bytes
        content hash   32 bytes
        owner id       32 bytes
        creator id     32 bytes
        body length     4 bytes
        body            variable
"""

import struct

from . import fields
from . import objectid
from .errors import DecodingError, EncodingError
from .objectid import ObjectId


_header = struct.Struct('!BHIH32s32s32sI')
_descriptor = struct.Struct('!HH32s32s32s')

header_size = _header.size
maximum_body = 0xFFFFFFFF - header_size


class Envelope:
    """ An immutable, fully validated envelope. The *creator_id* and
        *owner_id* must be :class:`ObjectId` instances, *obj_type* an
        integer in the unsigned 16-bit range, and *body* a bytes-like
        object. The *content_hash* is computed from the body unless
        provided, which only happens when decoding an envelope received
        from elsewhere; use :func:`verify_body` to check it.

        Invalid arguments raise :class:`EncodingError`, since the only
        reason to construct an envelope is to put it on the wire.
    """

    def __init__(self, creator_id, owner_id, obj_type, body=b'', content_hash=None):

        if isinstance(obj_type, bool) or not isinstance(obj_type, int):
            raise EncodingError('obj_type must be an integer, got ' + repr(obj_type))

        if obj_type < fields.OBJ_TYPE_MIN or obj_type > fields.OBJ_TYPE_MAX:
            raise EncodingError("obj_type %d outside of %d:%d" % (obj_type, fields.OBJ_TYPE_MIN, fields.OBJ_TYPE_MAX))

        if not isinstance(creator_id, ObjectId):
            raise EncodingError('creator_id must be an ObjectId, got ' + repr(creator_id), obj_type)

        if not isinstance(owner_id, ObjectId):
            raise EncodingError('owner_id must be an ObjectId, got ' + repr(owner_id), obj_type)

        if not isinstance(body, (bytes, bytearray, memoryview)):
            raise EncodingError('body must be bytes, got ' + type(body).__name__, obj_type)

        body = bytes(body)

        if len(body) > maximum_body:
            raise EncodingError("body of %d bytes exceeds the %d byte limit" % (len(body), maximum_body), obj_type)

        if content_hash is None:
            try:
                content_hash = objectid.digest(body)
            except ValueError as e:
                raise EncodingError(str(e), obj_type) from e

        self._creator_id = creator_id
        self._owner_id = owner_id
        self._obj_type = int(obj_type)
        self._body = body
        self._content_hash = bytes(content_hash)
        self._object_id = self.calculate_id()


    def __repr__(self):
        return "Envelope(obj_type=%d, creator=%s, owner=%s, body=%d bytes)" % (self._obj_type, self._creator_id, self._owner_id, len(self._body))


    @property
    def creator_id(self):
        return self._creator_id

    @property
    def owner_id(self):
        return self._owner_id

    @property
    def obj_type(self):
        return self._obj_type

    @property
    def body(self):
        return self._body

    @property
    def content_hash(self):
        return self._content_hash


    @property
    def object_id(self):
        """ The content-derived identifier of this envelope, fixed when the
            envelope is constructed.
        """

        return self._object_id


    def descriptor(self):
        """ Return the bytes committed to by the object identifier: the
            object category, the discriminator, the body content hash, and
            the owner and creator identities, in that order.
        """

        return _descriptor.pack(fields.JSON_OBJECT_CATEGORY, self._obj_type,
                                self._content_hash, self._owner_id.raw,
                                self._creator_id.raw)


    def calculate_id(self):
        try:
            return ObjectId.calculate(self.descriptor())
        except ValueError as e:
            raise EncodingError(str(e), self._obj_type) from e


    def verify_body(self):
        """ Return True if the body matches the content hash committed to
            by the descriptor.
        """

        try:
            return objectid.digest(self._body) == self._content_hash
        except ValueError:
            return False


    def raw_measure(self):
        """ Return the exact number of bytes :func:`raw_encode` will write.
        """

        return header_size + len(self._body)


    def raw_encode(self, buffer):
        """ Encode this envelope into the start of the supplied writable
            *buffer*, which must be at least :func:`raw_measure` bytes long.
            Returns the number of bytes written.
        """

        size = self.raw_measure()

        if len(buffer) < size:
            raise EncodingError("buffer of %d bytes cannot hold a %d byte envelope" % (len(buffer), size), self._obj_type)

        try:
            _header.pack_into(buffer, 0, fields.FORMAT_VERSION,
                              fields.JSON_OBJECT_CATEGORY, size, self._obj_type,
                              self._content_hash, self._owner_id.raw,
                              self._creator_id.raw, len(self._body))
        except struct.error as e:
            raise EncodingError('cannot pack envelope header: ' + str(e), self._obj_type) from e

        offset = header_size
        end = offset + len(self._body)
        buffer[offset:end] = self._body

        return end


    def to_bytes(self):
        """ Measure, allocate, and encode; the measured and written sizes
            must agree.
        """

        size = self.raw_measure()
        buffer = bytearray(size)
        written = self.raw_encode(buffer)

        if written != size:
            raise EncodingError("measured %d bytes, encoded %d" % (size, written), self._obj_type)

        return bytes(buffer)


    @classmethod
    def raw_decode(cls, data):
        """ Parse a complete envelope from *data*. The buffer must contain
            exactly one envelope, nothing more and nothing less, and the
            body must match the descriptor's content hash.
        """

        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise DecodingError('envelope must be bytes, got ' + type(data).__name__)

        data = bytes(data)

        if len(data) < header_size:
            raise DecodingError("truncated envelope: %d bytes, the header alone is %d" % (len(data), header_size))

        unpacked = _header.unpack_from(data, 0)
        version, category, length, obj_type, content_hash, owner, creator, body_length = unpacked

        if version != fields.FORMAT_VERSION:
            raise DecodingError("envelope format version %d, expected %d" % (version, fields.FORMAT_VERSION))

        if category != fields.JSON_OBJECT_CATEGORY:
            raise DecodingError("object category %d is not a JSON envelope" % (category))

        if length != len(data):
            raise DecodingError("envelope declares %d bytes, buffer holds %d" % (length, len(data)), obj_type)

        if header_size + body_length != length:
            raise DecodingError("body length %d inconsistent with envelope length %d" % (body_length, length), obj_type)

        body = data[header_size:]
        try:
            envelope = cls(ObjectId(creator), ObjectId(owner), obj_type, body, content_hash)
        except EncodingError as e:
            raise DecodingError(str(e), obj_type) from e

        if not envelope.verify_body():
            raise DecodingError('envelope body does not match its content hash', obj_type)

        return envelope


# end of class Envelope



def encode(creator_id, owner_id, obj_type, body):
    """ Build an envelope and return its (object_id, serialized bytes).
    """

    envelope = Envelope(creator_id, owner_id, obj_type, body)
    return envelope.object_id, envelope.to_bytes()


def decode(data):
    """ Parse serialized bytes and return (obj_type, body, envelope); the
        envelope carries the remaining metadata, such as the creator, owner
        and object identifier.
    """

    envelope = Envelope.raw_decode(data)
    return envelope.obj_type, envelope.body, envelope


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
