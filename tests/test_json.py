import json

import xrap


def test_dumps_returns_bytes():

    encoded = xrap.json.dumps({'a': 1})
    assert isinstance(encoded, bytes)


def test_encode_and_decode():

    value = dict()
    value['list'] = [1, 2, 3, 'a', 'b', None, 'c', 'z']
    value['nested'] = {'one': 1, 'two': [2.5]}
    value['none'] = None
    value['true'] = True
    value['false'] = False
    value['text'] = 'naïve'

    encoded = xrap.json.dumps(value)

    # Whatever library is selected, the output must be ordinary JSON.

    assert json.loads(encoded) == value
    assert xrap.json.loads(encoded) == value


def test_body_round_trip():

    post = xrap.PostRequest('/things')
    post.set_json([{'id': 9}])

    reply = xrap.Reply(xrap.protocol.fields.POST_OK, post.id, 201, content_type=post.content_type, body=post.content_body)
    assert reply.json() == [{'id': 9}]


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
