"""Transport layer implementations."""

from .. import config

from .base import (
    Transport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)

_BACKEND = config.transport

if _BACKEND == "zmq":
    from .zmq import request
else:
    raise ImportError(f"unknown XRAP_TRANSPORT backend: {_BACKEND!r}")

connect = request.connect
