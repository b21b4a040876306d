""" Protocol constants for XRAP, as described by ZeroMQ RFC 40.

    Keep these in one place to avoid magic numbers in the codec.
"""

import datetime


SIGNATURE = 0xAAA5

POST = 1
POST_OK = 2
GET = 3
GET_OK = 4
GET_EMPTY = 5
PUT = 6
PUT_OK = 7
DELETE = 8
DELETE_OK = 9
ERROR = 10

names = {
    POST: 'POST',
    POST_OK: 'POST_OK',
    GET: 'GET',
    GET_OK: 'GET_OK',
    GET_EMPTY: 'GET_EMPTY',
    PUT: 'PUT',
    PUT_OK: 'PUT_OK',
    DELETE: 'DELETE',
    DELETE_OK: 'DELETE_OK',
    ERROR: 'ERROR',
}

# The reply commands a server may legitimately send in response to each
# request verb. ERROR is acceptable for every verb.

replies = {
    'GET': set((GET_OK, GET_EMPTY, ERROR)),
    'POST': set((POST_OK, ERROR)),
    'PUT': set((PUT_OK, ERROR)),
    'DELETE': set((DELETE_OK, ERROR)),
}

# Limits imposed by the wire encoding.

short_max = 0xFF
int32_max = 0x7FFFFFFF


def milliseconds(value):
    """ Normalize a timestamp to integer milliseconds since the UNIX epoch.
        None is the absent value, and is encoded as zero. A naive
        :class:`datetime.datetime` is interpreted as local time, the same
        as :func:`datetime.datetime.timestamp` does.
    """

    if value is None:
        return 0

    try:
        value.timestamp
    except AttributeError:
        return int(value)

    return int(round(value.timestamp() * 1000))


def timestamp(milliseconds):
    """ The inverse of :func:`milliseconds`: return an aware UTC
        :class:`datetime.datetime`, or None if the value is zero.
    """

    if not milliseconds:
        return None

    seconds = milliseconds / 1000.0
    return datetime.datetime.fromtimestamp(seconds, datetime.timezone.utc)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
