""" Python implementation of an XRAP client. XRAP, the eXtensible Resource
    Access Protocol (ZeroMQ RFC 40), carries HTTP-like GET, PUT, POST and
    DELETE requests over a ZeroMQ DEALER socket.

    A typical interaction::

        import xrap

        with xrap.connect('tcp://localhost:9999') as client:
            reply = client.send(xrap.GetRequest('/time'))
            print(reply.status_code, reply.body)
"""

# Utility components.

from . import json
from . import config

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from .protocol.request import Parameter, GetRequest, PostRequest, PutRequest, DeleteRequest
from .protocol.reply import NameValuePair, Reply

from .protocol.errors import (
    XrapError,
    ProtocolError,
    InvalidSignature,
    UnknownResponseCode,
    MalformedFrame,
    EncodingBoundViolation,
    ServerError,
)

from .transport import (
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)

from . import client
from .client import Client, PendingReply
connect = client.connect

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
