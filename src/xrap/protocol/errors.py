""" Exceptions raised by the XRAP protocol layer. Transport failures are
    defined alongside the transport interface, in :mod:`xrap.transport.base`,
    but share the same :class:`XrapError` root so callers can catch
    everything the library raises with a single clause.
"""

from . import fields


class XrapError(Exception):
    """ Base class for all errors raised by this package. """


class ProtocolError(XrapError):
    """ A frame could not be interpreted as a valid XRAP message. """


class InvalidSignature(ProtocolError):

    def __init__(self, signature):
        self.signature = signature
        ProtocolError.__init__(self, 'unexpected message signature %04X' % (signature))


class UnknownResponseCode(ProtocolError):

    def __init__(self, verb, command):
        self.verb = verb
        self.command = command

        try:
            name = fields.names[command]
        except KeyError:
            name = str(command)
        else:
            name = '%s (%d)' % (name, command)

        ProtocolError.__init__(self, 'unexpected response code %s for %s method' % (name, verb))


class MalformedFrame(ProtocolError):
    """ A declared length or count exceeds what remains in the frame. """


class EncodingBoundViolation(XrapError, ValueError):
    """ A value is too large for the field it is being encoded into. This
        is a programming error on the part of the caller.
    """


class ServerError(XrapError):
    """ Raised by :func:`xrap.protocol.reply.Reply.raise_for_status`. The
        server-side error is otherwise returned in-band, as a normal reply.
    """

    def __init__(self, reply):
        self.reply = reply

        message = 'server returned status %d' % (reply.status_code)
        if reply.error_text:
            message = message + ': ' + reply.error_text

        XrapError.__init__(self, message)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
