import pytest

from seekable._internal import prepare_response, wire_headers
from seekable.constants import MultiRangePolicies
from seekable.errors import ConfigurationError
from seekable.http import ResourceDescriptor
from seekable.range import ABSENT, MALFORMED, MULTI_RANGE, UNSATISFIABLE, resolve, satisfiable
from seekable.response import ByteWindow, shape


@pytest.fixture(scope='function')
def descriptor():
    return ResourceDescriptor(34, 'text/plain')


def test_absent(descriptor):
    res = shape(descriptor, ABSENT)

    assert res.status == 200
    assert res.headers == {'accept-ranges': 'bytes', 'content-length': '34', 'content-type': 'text/plain'}
    assert res.window == ByteWindow(0, 33)
    assert res.has_body


@pytest.mark.parametrize('length', [1, 34, 1024])
def test_absent_any_length(length):
    res = shape(ResourceDescriptor(length), ABSENT)

    assert res.status == 200
    assert res.headers['content-length'] == str(length)
    assert 'content-range' not in res.headers
    assert len(res.window) == length


def test_absent_empty_resource():
    res = shape(ResourceDescriptor(0), ABSENT)

    assert res.status == 200
    assert res.headers['content-length'] == '0'
    assert res.window is None


def test_satisfiable(descriptor):
    res = shape(descriptor, satisfiable(27, 33))

    assert res.status == 206
    assert res.headers == {
        'accept-ranges': 'bytes',
        'content-length': '7',
        'content-type': 'text/plain',
        'content-range': 'bytes 27-33/34',
    }
    assert res.window == ByteWindow(27, 33)
    assert len(res.window) == 7


def test_satisfiable_single_byte(descriptor):
    res = shape(descriptor, satisfiable(0, 0))

    assert res.headers['content-length'] == '1'
    assert res.headers['content-range'] == 'bytes 0-0/34'


def test_unsatisfiable(descriptor):
    res = shape(descriptor, UNSATISFIABLE)

    assert res.status == 416
    assert res.headers['accept-ranges'] == 'bytes'
    assert res.headers['content-range'] == '*/34'
    assert res.headers['content-length'] == '34'
    assert res.window is None
    assert not res.has_body


def test_malformed(descriptor):
    res = shape(descriptor, MALFORMED)

    assert res.status == 400
    assert res.headers['accept-ranges'] == 'bytes'
    assert res.headers['content-length'] == '34'
    assert 'content-range' not in res.headers
    assert res.window is None


def test_multi_range_rejected(descriptor):
    res = shape(descriptor, MULTI_RANGE)

    assert res.status == 416
    assert res.headers['content-range'] == '*/34'
    assert res.window is None


def test_multi_range_ignored(descriptor):
    res = shape(descriptor, MULTI_RANGE, MultiRangePolicies.ignore)

    assert res == shape(descriptor, ABSENT)


def test_no_content_type():
    res = shape(ResourceDescriptor(34), satisfiable(0, 4))

    assert 'content-type' not in res.headers


def test_header_items_order(descriptor):
    res = shape(descriptor, satisfiable(0, 4))

    assert [key for key, _ in res.header_items()] == ['accept-ranges', 'content-length', 'content-type', 'content-range']


@pytest.mark.parametrize(
    ('header', 'status', 'content_range', 'content_length'),
    [
        (None, 200, None, '34'),
        ('bytes=0-0', 206, 'bytes 0-0/34', '1'),
        ('bytes=27-', 206, 'bytes 27-33/34', '7'),
        ('bytes=0-999', 206, 'bytes 0-33/34', '34'),
        ('bytes=50-', 416, '*/34', '34'),
        ('hello', 400, None, '34'),
    ],
)
def test_scenarios(descriptor, header, status, content_range, content_length):
    res = shape(descriptor, resolve(descriptor.length, header))

    assert res.status == status
    assert res.headers.get('content-range') == content_range
    assert res.headers['content-length'] == content_length
    assert res.headers['accept-ranges'] == 'bytes'


def test_empty_resource_range():
    res = shape(ResourceDescriptor(0), resolve(0, 'bytes=0-'))

    assert res.status == 416
    assert res.headers['content-range'] == '*/0'


def test_wire_headers_no_body(descriptor):
    res = shape(descriptor, UNSATISFIABLE)

    assert dict(wire_headers(res)) == {
        'accept-ranges': 'bytes',
        'content-length': '0',
        'content-type': 'text/plain',
        'content-range': '*/34',
    }
    assert res.headers['content-length'] == '34'


def test_wire_headers_body(descriptor):
    res = shape(descriptor, satisfiable(27, 33))

    assert wire_headers(res) == res.header_items()


def test_prepare_response_length_mismatch(content_file):
    with pytest.raises(ConfigurationError):
        prepare_response(b'abc', 'bytes=0-', length=10)
    with pytest.raises(ConfigurationError):
        prepare_response(content_file, None, length=33)


def test_prepare_response_stream_length():
    source, res = prepare_response(iter([b'abc']), 'bytes=0-', length=3)

    assert res.status == 206
    assert res.headers['content-range'] == 'bytes 0-2/3'
    assert source.length == 3
