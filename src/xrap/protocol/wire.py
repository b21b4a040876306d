""" Primitive encoding and decoding for XRAP frames.

    All integers are big-endian. There are two length-prefixed string forms:
    a short string has a one byte unsigned length, and a long string has a
    four byte signed length. A hash is a four byte count followed by that
    many (short string name, long string value) pairs. An absent (None)
    string is encoded as a zero length.
"""

import struct

from . import fields
from .errors import EncodingBoundViolation, InvalidSignature, MalformedFrame


_uint8 = struct.Struct('>B')
_uint16 = struct.Struct('>H')
_int16 = struct.Struct('>h')
_int32 = struct.Struct('>i')
_int64 = struct.Struct('>q')


def as_bytes(value):
    """ Return the wire representation of a string value. Strings are always
        encoded as UTF-8; bytes are passed through unmodified.
    """

    if value is None:
        return b''

    try:
        value.encode
    except AttributeError:
        return bytes(memoryview(value))

    return value.encode('utf-8')


class Writer:
    """ Accumulate the encoded fields of a single frame. Each method returns
        the :class:`Writer` instance so that calls can be chained; the
        finished frame is returned by :func:`getvalue`.
    """

    def __init__(self):
        self.buffer = bytearray()


    def _pack(self, packer, value, name):

        try:
            self.buffer += packer.pack(value)
        except struct.error as e:
            raise EncodingBoundViolation('%s out of range: %r' % (name, value)) from e

        return self


    def uint8(self, value):
        return self._pack(_uint8, value, 'unsigned byte')

    def uint16(self, value):
        return self._pack(_uint16, value, 'unsigned short')

    def int16(self, value):
        return self._pack(_int16, value, 'short')

    def int32(self, value):
        return self._pack(_int32, value, 'int')

    def int64(self, value):
        return self._pack(_int64, value, 'long')


    def header(self, command, request_id):
        """ Every frame starts with the same three fields. """

        self.uint16(fields.SIGNATURE)
        self.uint8(command)
        self.int32(request_id)
        return self


    def string(self, value):
        """ Append a short string. Anything longer than 255 bytes, after
            UTF-8 encoding, cannot be represented on the wire.
        """

        value = as_bytes(value)
        length = len(value)

        if length > fields.short_max:
            raise EncodingBoundViolation('short string is %d bytes, maximum is %d' % (length, fields.short_max))

        self.buffer += _uint8.pack(length)
        self.buffer += value
        return self


    def long_string(self, value):

        value = as_bytes(value)
        length = len(value)

        if length > fields.int32_max:
            raise EncodingBoundViolation('long string is %d bytes, maximum is %d' % (length, fields.int32_max))

        self.buffer += _int32.pack(length)
        self.buffer += value
        return self


    def hash(self, pairs):
        """ Append a hash. The *pairs* are any iterable of (name, value)
            tuples; order is preserved and duplicate names are permitted.
        """

        if pairs is None:
            pairs = ()

        pairs = tuple(pairs)
        self.int32(len(pairs))

        for name, value in pairs:
            self.string(name)
            self.long_string(value)

        return self


    def getvalue(self):
        return bytes(self.buffer)


# end of class Writer



class Reader:
    """ A cursor over a single received frame. Every read checks that the
        frame holds enough bytes to satisfy it, raising
        :class:`MalformedFrame` otherwise.
    """

    def __init__(self, frame):
        self.frame = memoryview(frame)
        self.offset = 0


    @property
    def remaining(self):
        return len(self.frame) - self.offset


    def _take(self, length):

        if length < 0:
            raise MalformedFrame('negative length %d at offset %d' % (length, self.offset))

        if length > self.remaining:
            raise MalformedFrame('frame truncated: %d bytes requested at offset %d, %d remain' % (length, self.offset, self.remaining))

        start = self.offset
        self.offset += length
        return self.frame[start:self.offset]


    def _unpack(self, unpacker):
        chunk = self._take(unpacker.size)
        return unpacker.unpack(chunk)[0]


    def uint8(self):
        return self._unpack(_uint8)

    def uint16(self):
        return self._unpack(_uint16)

    def int16(self):
        return self._unpack(_int16)

    def int32(self):
        return self._unpack(_int32)

    def int64(self):
        return self._unpack(_int64)


    def binary(self):
        """ Read a short string, returning the raw bytes. """

        length = self.uint8()
        return bytes(self._take(length))


    def string(self):
        """ Read a short string and decode it as UTF-8. """

        raw = self.binary()

        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedFrame('short string is not valid UTF-8') from e


    def long_binary(self):

        length = self.int32()
        return bytes(self._take(length))


    def hash(self):
        """ Read a hash, returning a list of (name, value) tuples. Each entry
            occupies at least five bytes; a count that cannot possibly fit in
            what remains of the frame is rejected before reading any entry.
        """

        count = self.int32()

        if count < 0:
            raise MalformedFrame('negative hash count %d' % (count))

        if count * 5 > self.remaining:
            raise MalformedFrame('hash declares %d entries, only %d bytes remain' % (count, self.remaining))

        pairs = list()
        for index in range(count):
            name = self.string()
            value = self.long_binary()
            pairs.append((name, value))

        return pairs


# end of class Reader



def check_signature(reader):
    """ Consume and verify the signature at the start of a frame. """

    signature = reader.uint16()

    if signature != fields.SIGNATURE:
        raise InvalidSignature(signature)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
