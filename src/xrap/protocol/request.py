""" Client-side XRAP requests. There is one class per request verb; each
    carries the resource path, a locally unique request id, and the fields
    specific to that verb. :func:`encode` turns any of them into a single
    frame ready to be put on the wire, and :func:`decode` is the mirror
    operation, reconstructing a request from such a frame.
"""

import itertools
import threading

from .. import json
from . import fields
from .errors import MalformedFrame, ProtocolError
from .wire import Reader, Writer, as_bytes, check_signature


class Parameter:
    """ A single GET request parameter. The *value* may be a string, which
        will be encoded as UTF-8 on the wire, or bytes, which are sent as-is;
        either way the wire form is a long string, but the distinction is
        retained locally.
    """

    def __init__(self, name, value):
        self.name = name
        self.value = value


    def __eq__(self, other):
        try:
            return self.name == other.name and self.value == other.value
        except AttributeError:
            return NotImplemented


    def __repr__(self):
        return 'Parameter(%r, %r)' % (self.name, self.value)


    @property
    def binary(self):
        """ True if the value was supplied as bytes rather than a string. """
        return isinstance(self.value, (bytes, bytearray, memoryview))


    @property
    def raw(self):
        return as_bytes(self.value)


    @property
    def text(self):
        if self.binary:
            return bytes(self.value).decode('utf-8')
        return self.value


    def matches(self, name):
        """ Parameter names are compared case-insensitively. """
        return self.name.lower() == name.lower()


# end of class Parameter



class Request:
    """ Attributes common to every XRAP request. Requests are mutable until
        they are sent; a request may only be sent once, and the
        :class:`xrap.Client` enforces that via the :ivar:`sent` flag.

        Requests are normally created without an *id*, in which case a
        locally unique identification number is allocated automatically.

        :ivar resource: The path of the resource, such as /a/b/c.
        :ivar id: The request id used to correlate the eventual reply.
    """

    verb = None
    command = None

    def __init__(self, resource, id=None):

        if id is None:
            id = _id_next()

        self.resource = resource
        self.id = id
        self.sent = False


    def __repr__(self):
        return '<%s %s id=%d>' % (self.verb, self.resource, self.id)


# end of class Request



class GetRequest(Request):
    """ Retrieve a resource. A conditional GET is expressed with
        *if_modified_since* (a :class:`datetime.datetime`, or integer UNIX
        milliseconds) and/or *if_none_match* (an ETag previously returned by
        the server); if the condition holds the server answers with
        GET_EMPTY, typically status 304. The optional *content_type* asks
        for a particular representation of the resource.
    """

    verb = 'GET'
    command = fields.GET

    def __init__(self, resource, if_modified_since=None, if_none_match=None, content_type=None, parameters=None, id=None):

        Request.__init__(self, resource, id)

        self.if_modified_since = if_modified_since
        self.if_none_match = if_none_match
        self.content_type = content_type
        self._parameters = list()

        if parameters is not None:
            try:
                parameters = parameters.items()
            except AttributeError:
                pass

            for name, value in parameters:
                self.add_parameter(name, value)


    @property
    def parameters(self):
        """ The current parameters, in order, as a read-only tuple. """
        return tuple(self._parameters)


    def add_parameter(self, name, value):
        """ Append a parameter, even if one with the same name is already
            present.
        """

        self._parameters.append(Parameter(name, value))


    def set_parameter(self, name, value):
        """ Replace the first parameter whose name matches *name*, ignoring
            case, and discard any later duplicates. The position of the
            replaced parameter is preserved; if there was no match, the new
            parameter is appended.
        """

        replacement = Parameter(name, value)
        replaced = False
        kept = list()

        for parameter in self._parameters:
            if parameter.matches(name):
                if replaced:
                    continue
                parameter = replacement
                replaced = True
            kept.append(parameter)

        if replaced == False:
            kept.append(replacement)

        self._parameters = kept


    def get_parameter(self, name):
        """ Return the value of the first parameter matching *name*, or None.
        """

        for parameter in self._parameters:
            if parameter.matches(name):
                return parameter.value

        return None


# end of class GetRequest



class _BodyRequest(Request):
    """ Shared handling for the two verbs that carry a content body. """

    def set_json(self, value):
        """ Encode *value* as JSON and use it as the content body. """

        self.content_type = 'application/json'
        self.content_body = json.dumps(value)


# end of class _BodyRequest



class PostRequest(_BodyRequest):
    """ Create a new resource beneath the *resource* path. The server
        will typically reply with the location of the new resource.
    """

    verb = 'POST'
    command = fields.POST

    def __init__(self, resource, content_type=None, content_body=None, id=None):

        Request.__init__(self, resource, id)

        self.content_type = content_type
        self.content_body = content_body


# end of class PostRequest



class PutRequest(_BodyRequest):
    """ Update a resource. A conditional PUT uses *if_unmodified_since*
        and/or *if_match*; if the condition fails the server should respond
        with 412 Precondition Failed.
    """

    verb = 'PUT'
    command = fields.PUT

    def __init__(self, resource, content_type=None, content_body=None, if_unmodified_since=None, if_match=None, id=None):

        Request.__init__(self, resource, id)

        self.content_type = content_type
        self.content_body = content_body
        self.if_unmodified_since = if_unmodified_since
        self.if_match = if_match


# end of class PutRequest



class DeleteRequest(Request):

    verb = 'DELETE'
    command = fields.DELETE

    def __init__(self, resource, if_unmodified_since=None, if_match=None, id=None):

        Request.__init__(self, resource, id)

        self.if_unmodified_since = if_unmodified_since
        self.if_match = if_match


# end of class DeleteRequest



def _encode_get(writer, request):

    writer.string(request.resource)

    parameters = request.parameters
    writer.int32(len(parameters))

    for parameter in parameters:
        writer.string(parameter.name)
        writer.long_string(parameter.value)

    writer.int64(fields.milliseconds(request.if_modified_since))
    writer.string(request.if_none_match)
    writer.string(request.content_type)


def _encode_post(writer, request):

    writer.string(request.resource)
    writer.string(request.content_type)
    writer.long_string(request.content_body)


def _encode_put(writer, request):

    writer.string(request.resource)
    writer.int64(fields.milliseconds(request.if_unmodified_since))
    writer.string(request.if_match)
    writer.string(request.content_type)
    writer.long_string(request.content_body)


def _encode_delete(writer, request):

    writer.string(request.resource)
    writer.int64(fields.milliseconds(request.if_unmodified_since))
    writer.string(request.if_match)


_encoders = dict()
_encoders[fields.GET] = _encode_get
_encoders[fields.POST] = _encode_post
_encoders[fields.PUT] = _encode_put
_encoders[fields.DELETE] = _encode_delete


def encode(request):
    """ Return the complete frame for the supplied request. An
        :class:`EncodingBoundViolation` is raised if any short string field
        exceeds 255 bytes once encoded.
    """

    try:
        encoder = _encoders[request.command]
    except KeyError:
        raise TypeError('not an XRAP request: ' + repr(request))

    writer = Writer()
    writer.header(request.command, request.id)
    encoder(writer, request)

    return writer.getvalue()



def _optional(value):
    if value == '':
        return None
    return value


def _decode_get(reader, id):

    resource = reader.string()
    request = GetRequest(resource, id=id)

    count = reader.int32()
    if count < 0 or count * 5 > reader.remaining:
        raise MalformedFrame('invalid parameter count %d' % (count))

    for index in range(count):
        name = reader.string()
        value = reader.long_binary()
        request.add_parameter(name, value)

    request.if_modified_since = reader.int64() or None
    request.if_none_match = _optional(reader.string())
    request.content_type = _optional(reader.string())
    return request


def _decode_post(reader, id):

    resource = reader.string()
    request = PostRequest(resource, id=id)
    request.content_type = _optional(reader.string())
    request.content_body = reader.long_binary()
    return request


def _decode_put(reader, id):

    resource = reader.string()
    request = PutRequest(resource, id=id)
    request.if_unmodified_since = reader.int64() or None
    request.if_match = _optional(reader.string())
    request.content_type = _optional(reader.string())
    request.content_body = reader.long_binary()
    return request


def _decode_delete(reader, id):

    resource = reader.string()
    request = DeleteRequest(resource, id=id)
    request.if_unmodified_since = reader.int64() or None
    request.if_match = _optional(reader.string())
    return request


_decoders = dict()
_decoders[fields.GET] = _decode_get
_decoders[fields.POST] = _decode_post
_decoders[fields.PUT] = _decode_put
_decoders[fields.DELETE] = _decode_delete


def decode(frame):
    """ Reconstruct a request from an encoded *frame*. Conditional dates are
        returned as integer milliseconds, or None if absent; parameter
        values are returned as bytes, since the wire form does not retain
        the distinction between string and binary values.
    """

    reader = Reader(frame)
    check_signature(reader)

    command = reader.uint8()

    try:
        decoder = _decoders[command]
    except KeyError:
        raise ProtocolError('not a request command: %d' % (command))

    id = reader.int32()
    return decoder(reader, id)



_id_min = 1
_id_max = fields.int32_max
_id_lock = threading.Lock()
_id_ticker = itertools.count(_id_min)


def _id_next():
    """ Return the next request identification number. The sequence starts
        at one and is shared by every request created in this process; it
        only repeats after exhausting the positive range of a signed 32 bit
        integer.
    """

    global _id_ticker

    with _id_lock:
        id = next(_id_ticker)

        if id > _id_max:
            _id_ticker = itertools.count(_id_min)
            id = next(_id_ticker)

    return id


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
