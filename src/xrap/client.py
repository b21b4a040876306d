""" The XRAP client, which multiplexes any number of outstanding requests
    over a single duplex transport.

    Replies are not labelled with the thread waiting for them; they are
    correlated with their request by the request id. Whichever waiting
    thread happens to hold the transport lock reads the next reply; if the
    reply belongs to some other request it is set aside in a shared cache,
    where its rightful owner will find it.
"""

import logging
import threading
import time

from . import config
from .protocol.errors import XrapError
from .protocol.reply import decode, validate
from .protocol.request import encode
from .transport import TransportTimeout
from .transport import connect as _connect


logger = logging.getLogger(__name__)


def _acquire(lock, timeout):
    """ Acquire *lock*, waiting at most *timeout* seconds; None waits
        indefinitely, and zero (or less) does not wait at all.
    """

    if timeout is None:
        return lock.acquire()

    if timeout <= 0:
        return lock.acquire(False)

    return lock.acquire(timeout=timeout)



class Client:
    """ Issue XRAP requests and collect the replies. The *transport* is
        either a :class:`xrap.transport.Transport` instance or a ZeroMQ
        endpoint string, such as 'tcp://localhost:9999', in which case a
        DEALER socket is connected to it.

        Any number of threads may use the same :class:`Client`. The
        :func:`send` method blocks until the reply arrives or the *timeout*
        (in seconds) expires; :func:`send_async` returns immediately with
        a :class:`PendingReply`.

        :ivar cache: Replies received on behalf of some other request,
            keyed by request id, waiting to be claimed.
        :ivar pending: The ids of requests sent but not yet answered.
    """

    timeout = config.timeout
    interval = config.interval

    def __init__(self, transport, timeout=None):

        try:
            transport.encode
        except AttributeError:
            pass
        else:
            transport = _connect(transport)

        if timeout is not None:
            self.timeout = timeout

        self.transport = transport

        # ZeroMQ sockets are not thread-safe. The same lock guards both
        # directions: a send while another thread is receiving on the same
        # socket is no safer than two simultaneous sends.

        self.socket_lock = threading.Lock()

        self.cache = dict()
        self.pending = set()
        self.cache_lock = threading.Lock()


    def __enter__(self):
        return self


    def __exit__(self, *exc):
        self.close()
        return False


    def close(self):
        """ Close the transport and discard any unclaimed replies. Any
            thread still waiting for a reply will see a transport error.
        """

        # A waiter holds the lock for at most one receive interval.

        with self.socket_lock:
            self.transport.close()

        with self.cache_lock:
            if self.cache:
                logger.debug('discarding %d unclaimed replies', len(self.cache))
            self.cache.clear()
            self.pending.clear()


    def set_timeout(self, seconds):
        """ Set the default number of seconds :func:`send` will wait. """
        self.timeout = seconds


    def send(self, request, timeout=None):
        """ Send the *request* and block until its reply arrives, returning
            the :class:`xrap.Reply`. A :class:`TransportTimeout` is raised
            if no reply arrives within *timeout* seconds, or the client's
            default timeout if none is specified.

            Errors reported by the server are not raised; they are returned
            as a reply with the error text and status code populated.
        """

        if timeout is None:
            timeout = self.timeout

        self._send(request)

        try:
            reply = self._receive(request, timeout)
        finally:
            self._forget(request)

        if reply is None:
            logger.warning('%r: no reply within %.2f sec', request, timeout)
            raise TransportTimeout('%s %s: no reply in %.2f sec' % (request.verb, request.resource, timeout))

        return reply


    def send_async(self, request):
        """ Send the *request* and return immediately. The reply is
            retrieved via the returned :class:`PendingReply`.
        """

        self._send(request)
        return PendingReply(self, request)


    def _send(self, request):

        if request.sent:
            raise XrapError('request has already been sent: ' + repr(request))

        frame = encode(request)

        with self.cache_lock:
            if request.id in self.pending:
                raise XrapError('request id %d is already outstanding' % (request.id))
            self.pending.add(request.id)

        request.sent = True

        # The empty leading frame is the delimiter a REQ socket would have
        # included; DEALER sockets must add it themselves.

        try:
            with self.socket_lock:
                self.transport.send_multipart((b'', frame))
        except Exception:
            self._forget(request)
            raise

        logger.debug('sent %r (%d bytes)', request, len(frame))


    def _forget(self, request):
        """ The *request* is no longer waiting for a reply. """

        with self.cache_lock:
            self.pending.discard(request.id)


    def _claim(self, request):
        """ Remove and return the cached reply for *request*, if any. """

        with self.cache_lock:
            reply = self.cache.pop(request.id, None)

            if reply is not None:
                self.pending.discard(request.id)

        if reply is not None:
            logger.debug('claimed cached reply for %r', request)
            validate(reply, request.verb)

        return reply


    def _store(self, reply):

        with self.cache_lock:
            if reply.request_id not in self.pending:
                logger.warning('reply for request id %d, which is not outstanding', reply.request_id)
            self.cache[reply.request_id] = reply

        logger.debug('cached %r', reply)


    def _receive(self, request, timeout):
        """ Wait for the reply to *request*, returning None if *timeout*
            seconds elapse first. A *timeout* of None waits indefinitely; a
            *timeout* of zero checks once, without waiting, for a reply that
            is already available.
        """

        if timeout is None:
            deadline = None
        else:
            deadline = time.monotonic() + timeout

        first = True

        while True:
            reply = self._claim(request)
            if reply is not None:
                return reply

            if deadline is None:
                remaining = None
            else:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    if first == False:
                        return None
                    remaining = 0

            first = False

            if _acquire(self.socket_lock, remaining) == False:
                return None

            try:
                # Waiting on the socket for no longer than the interval
                # leaves a window for other threads to send.

                if deadline is None:
                    wait = self.interval
                else:
                    wait = min(self.interval, max(deadline - time.monotonic(), 0))

                self.transport.set_receive_timeout(int(wait * 1000))
                frame = self.transport.recv()

                # Depending on the peer there may be an empty delimiter
                # frame ahead of the payload.

                if frame is not None and len(frame) == 0:
                    frame = self.transport.recv()
            finally:
                self.socket_lock.release()

            if frame is None:
                continue

            reply = decode(frame)

            if reply.request_id == request.id:
                with self.cache_lock:
                    self.pending.discard(request.id)

                validate(reply, request.verb)
                logger.debug('received %r', reply)
                return reply

            self._store(reply)


# end of class Client



class PendingReply:
    """ The eventual reply to a request issued by :func:`Client.send_async`.
        The interface resembles :class:`concurrent.futures.Future`, though
        the reply is only read from the transport when a caller asks for it.

        A :class:`PendingReply` resolves exactly once. After the reply has
        been received, or a protocol or transport error was raised while
        receiving it, every subsequent call returns the same reply or
        raises the same error.
    """

    def __init__(self, client, request):
        self.client = client
        self.request = request
        self.reply = None
        self.error = None
        self.lock = threading.Lock()


    def __repr__(self):

        if self.reply is not None:
            state = 'done'
        elif self.error is not None:
            state = 'failed'
        else:
            state = 'pending'

        return '<PendingReply %r %s>' % (self.request, state)


    def _resolve(self, timeout):

        begin = time.monotonic()

        if _acquire(self.lock, timeout) == False:
            return None

        if timeout is not None:
            timeout = max(timeout - (time.monotonic() - begin), 0)

        try:
            if self.error is not None:
                raise self.error

            if self.reply is None:
                try:
                    self.reply = self.client._receive(self.request, timeout)
                except XrapError as e:
                    self.error = e
                    self.client._forget(self.request)
                    raise

            return self.reply
        finally:
            self.lock.release()


    def wait(self, timeout=None):
        """ Block until the reply arrives, returning it, or return None if
            *timeout* seconds elapse first. None waits indefinitely.
        """

        return self._resolve(timeout)


    def result(self, timeout=None):
        """ Like :func:`wait`, but raise :class:`TransportTimeout` instead
            of returning None.
        """

        reply = self._resolve(timeout)

        if reply is None:
            raise TransportTimeout('%s %s: no reply in %.2f sec' % (self.request.verb, self.request.resource, timeout))

        return reply


    def done(self):
        """ Return True if the reply has been received. This will check for
            a reply without blocking; if that check raises an error, the
            error is retained and raised by the next call to :func:`result`.
        """

        if self.reply is None and self.error is None:
            try:
                self._resolve(0)
            except XrapError:
                pass

        return self.reply is not None or self.error is not None


    def cancel(self):
        """ Cancellation is not supported, this always returns False. """
        return False


    def cancelled(self):
        return False


# end of class PendingReply



def connect(endpoint, zmq_context=None, timeout=None):
    """ Return a :class:`Client` using a new ZeroMQ DEALER socket connected
        to *endpoint*. The socket is created using *zmq_context* if one is
        provided, otherwise a context shared within this process is used.
    """

    transport = _connect(endpoint, zmq_context)
    return Client(transport, timeout)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
