"""Transport interface.

This is the (small) contract the :class:`xrap.Client` dispatcher relies on.
It lives outside :mod:`xrap.protocol` so the codec remains transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..protocol.errors import XrapError


# Transport agnostic exceptions

class TransportError(XrapError):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """A request did not receive a timely response."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class Transport(ABC):
    """Minimal contract for a duplex, frame-oriented message channel.

    Frames are opaque bytes delivered in FIFO order in both directions.
    Implementations need not be thread-safe; the dispatcher serializes
    access with its own lock.
    """

    @abstractmethod
    def send(self, frame: bytes, more: bool = False) -> None:
        """Send one frame; *more* signals that another frame of the same
        multipart message follows."""

    def send_multipart(self, frames: Sequence[bytes]) -> None:
        """Send *frames* as a single multipart message. Backends that can
        hand the whole message over at once should override this."""

        last = len(frames) - 1

        for index, frame in enumerate(frames):
            self.send(frame, more=index < last)

    @abstractmethod
    def recv(self) -> Optional[bytes]:
        """Receive the next frame, or return None if the receive timeout
        elapsed first."""

    @abstractmethod
    def set_receive_timeout(self, milliseconds: int) -> None:
        """Bound subsequent calls to :meth:`recv`. A negative value blocks
        indefinitely, zero polls without blocking."""

    def close(self) -> None:
        """Tear down the underlying connection/socket."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False
