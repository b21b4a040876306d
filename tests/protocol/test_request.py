import datetime
import pytest

import xrap
from xrap.protocol import fields, request
from xrap.protocol.errors import EncodingBoundViolation, InvalidSignature, MalformedFrame


def frame_from(text):
    return bytes.fromhex(text)


def test_get_frame():

    get = xrap.GetRequest('/time', id=1)
    get.add_parameter('fmt', 'iso')

    expected = frame_from('AA A5 03 00 00 00 01 05 2F 74 69 6D 65 00 00 00 01 03 66 6D 74 00 00 00 03 69 73 6F 00 00 00 00 00 00 00 00 00 00')
    assert request.encode(get) == expected


def test_delete_frame():

    delete = xrap.DeleteRequest('/x', id=7)

    expected = frame_from('AA A5 08 00 00 00 07 02 2F 78 00 00 00 00 00 00 00 00 00')
    assert request.encode(delete) == expected


def test_post_frame():

    post = xrap.PostRequest('/things', 'application/json', b'{"a":1}', id=42)

    expected = frame_from('AA A5 01 00 00 00 2A 07 2F 74 68 69 6E 67 73 10 61 70 70 6C 69 63 61 74 69 6F 6E 2F 6A 73 6F 6E 00 00 00 07 7B 22 61 22 3A 31 7D')
    assert request.encode(post) == expected


def test_put_frame():

    put = xrap.PutRequest('/x', 'text/plain', b'hi', if_unmodified_since=1700000000000, if_match='W/1', id=3)

    expected = frame_from('AA A5 06 00 00 00 03 02 2F 78 00 00 01 8B CF E5 68 00 03 57 2F 31 0A 74 65 78 74 2F 70 6C 61 69 6E 00 00 00 02 68 69')
    assert request.encode(put) == expected


def test_get_round_trip():

    get = xrap.GetRequest('/a/b/c', if_modified_since=1700000000000, if_none_match='"abc"', content_type='application/json')
    get.add_parameter('name', 'value')
    get.add_parameter('blob', b'\x00\xff')
    get.add_parameter('name', 'again')

    decoded = request.decode(request.encode(get))

    assert isinstance(decoded, xrap.GetRequest)
    assert decoded.id == get.id
    assert decoded.resource == '/a/b/c'
    assert decoded.if_modified_since == 1700000000000
    assert decoded.if_none_match == '"abc"'
    assert decoded.content_type == 'application/json'

    names = [parameter.name for parameter in decoded.parameters]
    assert names == ['name', 'blob', 'name']

    raw = [parameter.raw for parameter in decoded.parameters]
    assert raw == [b'value', b'\x00\xff', b'again']


def test_get_round_trip_absent_fields():

    get = xrap.GetRequest('/')
    decoded = request.decode(request.encode(get))

    assert decoded.if_modified_since is None
    assert decoded.if_none_match is None
    assert decoded.content_type is None
    assert decoded.parameters == ()


def test_post_round_trip():

    post = xrap.PostRequest('/things', 'text/plain', 'body text')
    decoded = request.decode(request.encode(post))

    assert isinstance(decoded, xrap.PostRequest)
    assert decoded.id == post.id
    assert decoded.resource == '/things'
    assert decoded.content_type == 'text/plain'
    assert decoded.content_body == b'body text'


def test_put_round_trip():

    when = datetime.datetime(2023, 11, 14, 22, 13, 20, tzinfo=datetime.timezone.utc)
    put = xrap.PutRequest('/things/9', content_body=b'\x01\x02', if_unmodified_since=when, if_match='W/2')
    decoded = request.decode(request.encode(put))

    assert isinstance(decoded, xrap.PutRequest)
    assert decoded.id == put.id
    assert decoded.if_unmodified_since == 1700000000000
    assert decoded.if_match == 'W/2'
    assert decoded.content_type is None
    assert decoded.content_body == b'\x01\x02'


def test_delete_round_trip():

    delete = xrap.DeleteRequest('/things/9', if_match='W/3')
    decoded = request.decode(request.encode(delete))

    assert isinstance(decoded, xrap.DeleteRequest)
    assert decoded.id == delete.id
    assert decoded.resource == '/things/9'
    assert decoded.if_unmodified_since is None
    assert decoded.if_match == 'W/3'


def test_resource_bound():

    longest = '/' + 'r' * 254
    get = xrap.GetRequest(longest)
    assert request.decode(request.encode(get)).resource == longest

    with pytest.raises(EncodingBoundViolation):
        request.encode(xrap.GetRequest(longest + 'r'))


def test_parameter_name_bound():

    get = xrap.GetRequest('/')
    get.add_parameter('n' * 256, 'value')

    with pytest.raises(EncodingBoundViolation):
        request.encode(get)


def test_unique_ids():

    requests = [xrap.GetRequest('/') for count in range(1000)]
    ids = set(get.id for get in requests)

    assert len(ids) == 1000
    assert min(ids) >= 1


def test_add_parameter_keeps_duplicates():

    get = xrap.GetRequest('/')
    get.add_parameter('a', '1')
    get.add_parameter('A', '2')

    assert get.parameters == (xrap.Parameter('a', '1'), xrap.Parameter('A', '2'))


def test_set_parameter():

    get = xrap.GetRequest('/')
    get.add_parameter('first', '1')
    get.add_parameter('Key', 'a')
    get.add_parameter('middle', '2')
    get.add_parameter('KEY', 'b')
    get.add_parameter('key', 'c')
    get.add_parameter('last', '3')

    get.set_parameter('kEy', b'new')

    expected = (
        xrap.Parameter('first', '1'),
        xrap.Parameter('kEy', b'new'),
        xrap.Parameter('middle', '2'),
        xrap.Parameter('last', '3'),
    )

    assert get.parameters == expected
    assert get.parameters[1].binary
    assert get.get_parameter('KEY') == b'new'


def test_set_parameter_appends_when_absent():

    get = xrap.GetRequest('/', parameters={'a': '1'})
    get.set_parameter('b', '2')

    assert get.parameters == (xrap.Parameter('a', '1'), xrap.Parameter('b', '2'))


def test_parameters_are_read_only():

    get = xrap.GetRequest('/')

    with pytest.raises(AttributeError):
        get.parameters.append(xrap.Parameter('a', '1'))


def test_parameter_value_forms():

    text = xrap.Parameter('fmt', 'caf\u00e9')
    binary = xrap.Parameter('fmt', 'caf\u00e9'.encode())

    assert text.binary == False
    assert binary.binary

    assert text.raw == binary.raw == b'caf\xc3\xa9'
    assert text.text == binary.text == 'caf\u00e9'


def test_set_json():

    put = xrap.PutRequest('/things/1')
    put.set_json({'a': 1})

    assert put.content_type == 'application/json'
    assert xrap.json.loads(put.content_body) == {'a': 1}


def test_decode_rejects_replies():

    frame = bytes.fromhex('AA A5 05 00 00 00 01 01 30')

    with pytest.raises(xrap.ProtocolError):
        request.decode(frame)


def test_decode_bad_signature():

    with pytest.raises(InvalidSignature):
        request.decode(frame_from('AA A6 08 00 00 00 07 02 2F 78 00 00 00 00 00 00 00 00 00'))


def test_decode_truncated():

    frame = request.encode(xrap.DeleteRequest('/x'))

    with pytest.raises(MalformedFrame):
        request.decode(frame[:-3])


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
