""" XRAP replies. A single :class:`Reply` class represents the response to
    any of the four request verbs; fields that a given reply command does
    not carry are left at their defaults (None, zero, or an empty list).
"""

from .. import json
from . import fields
from .errors import ServerError, UnknownResponseCode
from .wire import Reader, Writer, check_signature


class NameValuePair:
    """ One entry from a metadata hash. The *name* is always a string; the
        *value* is raw bytes, use :ivar:`text` to interpret it as UTF-8.
    """

    def __init__(self, name, value):

        try:
            value = value.encode('utf-8')
        except AttributeError:
            pass

        self.name = name
        self.value = value


    def __eq__(self, other):
        try:
            return self.name == other.name and self.value == other.value
        except AttributeError:
            return NotImplemented


    def __iter__(self):
        return iter((self.name, self.value))


    def __repr__(self):
        return 'NameValuePair(%r, %r)' % (self.name, self.value)


    @property
    def text(self):
        return self.value.decode('utf-8')


# end of class NameValuePair



class Reply:
    """ The decoded response to a request. Errors reported by the server,
        as opposed to errors in the protocol or transport, are not raised
        as exceptions: they arrive as a :class:`Reply` with the
        *status_code* and *error_text* populated, and it is up to the caller
        to decide how to proceed. :func:`raise_for_status` is available for
        callers that would rather see an exception.

        :ivar command: The reply command this instance was decoded from.
        :ivar date_modified: UNIX milliseconds, zero if absent.
        :ivar metadata: A list of :class:`NameValuePair` instances, in the
            order received; duplicate names are possible.
    """

    def __init__(self, command, request_id, status_code, error_text=None, etag=None, location=None, date_modified=0, content_type=None, body=None, metadata=None):

        if metadata is None:
            metadata = list()
        else:
            metadata = [NameValuePair(name, value) for name, value in metadata]

        self.command = command
        self.request_id = request_id
        self.status_code = status_code
        self.error_text = error_text
        self.etag = etag
        self.location = location
        self.date_modified = date_modified
        self.content_type = content_type
        self.body = body
        self.metadata = metadata


    def __eq__(self, other):
        try:
            return vars(self) == vars(other)
        except TypeError:
            return NotImplemented


    def __repr__(self):

        try:
            command = fields.names[self.command]
        except KeyError:
            command = str(self.command)

        return '<Reply %s id=%d status=%d>' % (command, self.request_id, self.status_code)


    @property
    def ok(self):
        """ True if the server did not report an error. """
        return self.command != fields.ERROR and self.status_code < 400


    @property
    def modified(self):
        """ The modification date as a UTC :class:`datetime.datetime`, or
            None if the server did not provide one.
        """

        return fields.timestamp(self.date_modified)


    def header(self, name):
        """ Return the first metadata value whose name matches *name*,
            ignoring case. Returns None if there is no such entry.
        """

        name = name.lower()

        for pair in self.metadata:
            if pair.name.lower() == name:
                return pair.value

        return None


    def json(self):
        """ Decode the body as JSON. """

        if not self.body:
            return None

        return json.loads(self.body)


    def raise_for_status(self):
        """ Raise :class:`ServerError` if the server reported an error. """

        if self.ok == False:
            raise ServerError(self)


# end of class Reply



def _optional(value):
    if value == '':
        return None
    return value


def _decode_error(reader, command):

    reply = Reply(command, reader.int32(), reader.int16())
    reply.error_text = reader.string()
    return reply


def _decode_get_ok(reader, command):

    reply = Reply(command, reader.int32(), reader.int16())
    reply.etag = _optional(reader.string())
    reply.date_modified = reader.int64()
    reply.content_type = _optional(reader.string())
    reply.body = reader.long_binary()
    reply.metadata = [NameValuePair(*pair) for pair in reader.hash()]
    return reply


def _decode_get_empty(reader, command):
    return Reply(command, reader.int32(), reader.int16())


def _decode_post_ok(reader, command):

    reply = Reply(command, reader.int32(), reader.int16())
    reply.location = _optional(reader.string())
    reply.etag = _optional(reader.string())
    reply.date_modified = reader.int64()
    reply.content_type = _optional(reader.string())
    reply.body = reader.long_binary()
    reply.metadata = [NameValuePair(*pair) for pair in reader.hash()]
    return reply


def _decode_put_ok(reader, command):

    reply = Reply(command, reader.int32(), reader.int16())
    reply.location = _optional(reader.string())
    reply.etag = _optional(reader.string())
    reply.date_modified = reader.int64()
    reply.metadata = [NameValuePair(*pair) for pair in reader.hash()]
    return reply


def _decode_delete_ok(reader, command):

    reply = Reply(command, reader.int32(), reader.int16())
    reply.metadata = [NameValuePair(*pair) for pair in reader.hash()]
    return reply


_decoders = dict()
_decoders[fields.ERROR] = _decode_error
_decoders[fields.GET_OK] = _decode_get_ok
_decoders[fields.GET_EMPTY] = _decode_get_empty
_decoders[fields.POST_OK] = _decode_post_ok
_decoders[fields.PUT_OK] = _decode_put_ok
_decoders[fields.DELETE_OK] = _decode_delete_ok


def validate(reply, verb):
    """ Raise :class:`UnknownResponseCode` if *reply* is not a legitimate
        response to a request of type *verb*.
    """

    if reply.command not in fields.replies[verb]:
        raise UnknownResponseCode(verb, reply.command)


def decode(frame, verb=None):
    """ Decode a reply *frame*. If the *verb* of the originating request is
        provided the reply command is checked against it; otherwise any
        reply command is accepted.
    """

    reader = Reader(frame)
    check_signature(reader)

    command = reader.uint8()

    if verb is not None and command not in fields.replies[verb]:
        raise UnknownResponseCode(verb, command)

    try:
        decoder = _decoders[command]
    except KeyError:
        raise UnknownResponseCode('any', command)

    return decoder(reader, command)



def encode(reply):
    """ The mirror of :func:`decode`: serialize a :class:`Reply` according
        to its *command*, ignoring any fields that command does not carry.
    """

    command = reply.command

    writer = Writer()
    writer.header(command, reply.request_id)
    writer.int16(reply.status_code)

    if command == fields.ERROR:
        writer.string(reply.error_text)
    elif command == fields.GET_EMPTY:
        pass
    elif command == fields.GET_OK:
        writer.string(reply.etag)
        writer.int64(reply.date_modified)
        writer.string(reply.content_type)
        writer.long_string(reply.body)
        writer.hash(reply.metadata)
    elif command == fields.POST_OK:
        writer.string(reply.location)
        writer.string(reply.etag)
        writer.int64(reply.date_modified)
        writer.string(reply.content_type)
        writer.long_string(reply.body)
        writer.hash(reply.metadata)
    elif command == fields.PUT_OK:
        writer.string(reply.location)
        writer.string(reply.etag)
        writer.int64(reply.date_modified)
        writer.hash(reply.metadata)
    elif command == fields.DELETE_OK:
        writer.hash(reply.metadata)
    else:
        raise UnknownResponseCode('any', command)

    return writer.getvalue()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
