''' JSON encoding for request and reply bodies. The fastest available
    library is used: msgspec, then orjson, then the standard library. In
    every case :func:`dumps` returns bytes, since that is what goes into a
    content body.
'''

msgspec = None
orjson = None

try:
    import msgspec
except ImportError:
    try:
        import orjson
    except ImportError:
        import json as stdlib_json


if msgspec is not None:
    dumps = msgspec.json.Encoder().encode
    loads = msgspec.json.Decoder().decode
elif orjson is not None:
    dumps = orjson.dumps
    loads = orjson.loads
else:
    def dumps(value):
        return stdlib_json.dumps(value, separators=(',', ':')).encode('utf-8')

    loads = stdlib_json.loads


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
