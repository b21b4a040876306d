"""
XRAP Protocol Layer
===================

Everything needed to turn requests into frames and frames into replies.
Nothing here knows how frames are moved; see :mod:`xrap.transport`.

Layer Overview
--------------

Requests / Replies (request.py, reply.py)
    One class per request verb, a single flat Reply class,
    and the encode/decode functions for each.

    │
    ▼
Primitives (wire.py)
    Big-endian integers, short and long strings, hashes,
    the frame header and signature check.

    │
    ▼
Field Vocabulary (fields.py)
    Signature, command codes, the replies valid for each verb.
"""

from . import fields
from . import errors
from . import wire
from . import request
from . import reply


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
