"""ZeroMQ DEALER transport.

A DEALER socket is asynchronous and full-duplex: any number of requests may
be outstanding, and replies arrive in whatever order the server produces
them. Correlating replies with requests is left to :class:`xrap.Client`.

ZeroMQ sockets are not thread-safe; the client holds a lock around every
call made here.
"""

from __future__ import annotations

import atexit
import logging
import threading
from typing import Optional, Sequence

import zmq

from ... import config
from ..base import Transport, TransportConnectionError, TransportError


logger = logging.getLogger(__name__)

_context: Optional[zmq.Context] = None
_context_lock = threading.Lock()


def context() -> zmq.Context:
    """Return the ZeroMQ context shared by every socket this module creates
    on the caller's behalf."""

    global _context

    with _context_lock:
        if _context is None:
            _context = zmq.Context()
        return _context


class DealerTransport(Transport):
    """Frame transport over a ZeroMQ DEALER socket.

    Either connect a new socket to *endpoint* (tcp://host:port, or any other
    ZeroMQ endpoint) using the supplied or shared *zmq_context*, or wrap an
    existing *socket*.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        zmq_context: Optional[zmq.Context] = None,
        socket: Optional[zmq.Socket] = None,
    ):
        if socket is None:
            if endpoint is None:
                raise ValueError("either an endpoint or a socket is required")

            if zmq_context is None:
                zmq_context = context()

            socket = zmq_context.socket(zmq.DEALER)
            socket.setsockopt(zmq.LINGER, config.linger)

            try:
                socket.connect(endpoint)
            except zmq.ZMQError as exc:
                socket.close()
                raise TransportConnectionError(
                    f"cannot connect to {endpoint}: {exc}"
                ) from exc

            logger.debug("DEALER connected to %s", endpoint)

        self.endpoint = endpoint
        self.socket = socket

    def send(self, frame: bytes, more: bool = False) -> None:
        flags = zmq.SNDMORE if more else 0

        try:
            self.socket.send(frame, flags)
        except zmq.ZMQError as exc:
            raise TransportError(f"send failed: {exc}") from exc

    def send_multipart(self, frames: Sequence[bytes]) -> None:
        try:
            self.socket.send_multipart(frames)
        except zmq.ZMQError as exc:
            raise TransportError(f"send failed: {exc}") from exc

    def recv(self) -> Optional[bytes]:
        try:
            return self.socket.recv()
        except zmq.Again:
            return None
        except zmq.ZMQError as exc:
            raise TransportError(f"receive failed: {exc}") from exc

    def set_receive_timeout(self, milliseconds: int) -> None:
        try:
            self.socket.setsockopt(zmq.RCVTIMEO, int(milliseconds))
        except zmq.ZMQError as exc:
            raise TransportError(f"cannot set receive timeout: {exc}") from exc

    def close(self) -> None:
        if not self.socket.closed:
            self.socket.close()
            logger.debug("DEALER closed (%s)", self.endpoint)

    @property
    def is_open(self) -> bool:
        return not self.socket.closed


def connect(endpoint: str, zmq_context: Optional[zmq.Context] = None) -> DealerTransport:
    """Open a DEALER socket connected to *endpoint*."""

    return DealerTransport(endpoint, zmq_context)


def _cleanup() -> None:
    if _context is not None:
        _context.destroy(linger=0)


atexit.register(_cleanup)
