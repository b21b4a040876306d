import queue
import pytest
import threading

import xrap
from xrap.protocol import fields


class ScriptedTransport(xrap.transport.Transport):
    """ An in-memory stand-in for a DEALER socket. Frames queued with
        :func:`push` are returned by :func:`recv`, honoring the receive
        timeout; everything sent is recorded in :ivar:`sent`.

        If a *responder* is provided it is called with each decoded request
        as it is sent, and any reply it returns is queued immediately.
    """

    def __init__(self, responder=None, delimiter=True):

        self.responder = responder
        self.delimiter = delimiter
        self.frames = queue.Queue()
        self.sent = list()
        self.timeout = -1
        self.receives = 0
        self.closed = False
        self.readers = 0
        self.max_readers = 0
        self._readers_lock = threading.Lock()
        self._push_lock = threading.Lock()


    def push(self, reply, delimiter=None):

        if delimiter is None:
            delimiter = self.delimiter

        try:
            reply.command
        except AttributeError:
            frame = reply
        else:
            frame = xrap.protocol.reply.encode(reply)

        # Both parts go into the queue together, as a multipart message would.

        with self._push_lock:
            if delimiter:
                self.frames.put(b'')
            self.frames.put(frame)


    def send(self, frame, more=False):

        if self.closed:
            raise xrap.TransportError('transport is closed')

        self.sent.append((frame, more))

        if self.responder is not None and more == False:
            request = xrap.protocol.request.decode(frame)
            reply = self.responder(request)
            if reply is not None:
                self.push(reply)


    def recv(self):

        with self._readers_lock:
            self.readers += 1
            self.max_readers = max(self.readers, self.max_readers)

        try:
            if self.closed:
                raise xrap.TransportError('transport is closed')

            self.receives += 1

            try:
                if self.timeout < 0:
                    return self.frames.get()
                if self.timeout == 0:
                    return self.frames.get_nowait()
                return self.frames.get(timeout=self.timeout / 1000.0)
            except queue.Empty:
                return None
        finally:
            with self._readers_lock:
                self.readers -= 1


    def set_receive_timeout(self, milliseconds):
        self.timeout = milliseconds


    def close(self):
        self.closed = True


    @property
    def is_open(self):
        return not self.closed


# end of class ScriptedTransport



def get_ok(request, body=b'', status=200):
    return xrap.Reply(fields.GET_OK, request.id, status, content_type='text/plain', body=body)


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def client(transport):
    return xrap.Client(transport, timeout=2)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
