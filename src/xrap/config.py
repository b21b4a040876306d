""" Client defaults. Each value is read once, at import, from an environment
    variable; individual :class:`xrap.Client` instances can override the
    timeout after the fact via :func:`xrap.Client.set_timeout`.

    XRAP_TIMEOUT    Seconds to wait for a reply, default 30.
    XRAP_INTERVAL   Longest single receive, in seconds, while holding the
                    transport lock; default 0.1.
    XRAP_LINGER     ZeroMQ LINGER, in milliseconds, for sockets created by
                    this package; default 0.
    XRAP_TRANSPORT  Transport backend; only 'zmq' is available.
"""

import os


def _environment(name, default, cast):

    try:
        value = os.environ[name]
    except KeyError:
        return default

    try:
        return cast(value)
    except ValueError:
        raise ValueError('invalid value for %s: %r' % (name, value))


timeout = _environment('XRAP_TIMEOUT', 30.0, float)
interval = _environment('XRAP_INTERVAL', 0.1, float)
linger = _environment('XRAP_LINGER', 0, int)
transport = _environment('XRAP_TRANSPORT', 'zmq', str)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
