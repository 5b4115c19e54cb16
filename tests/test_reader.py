"""Tests for YAML document stream reading."""

import io

import pytest
import yaml
from yaml.constructor import ConstructorError
from yaml.nodes import MappingNode, ScalarNode

from k8sinit.core import DocumentReader, LenientLoader, StrictLoader
from k8sinit.core.reader import construct_document
from k8sinit.errors import ConfigurationDecodeError, EndOfStream, StreamReadError


class BrokenStream(io.RawIOBase):
    """Binary stream failing on every read."""

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:  # noqa: ARG002
        raise OSError('device is not ready')


def test_read_documents() -> None:
    """Read documents one by one until the end of the stream."""
    reader = DocumentReader('a: 1\n---\n---\nb: 2\n')

    first = reader.read()
    empty = reader.read()
    last = reader.read()

    assert isinstance(first, MappingNode)
    assert isinstance(empty, ScalarNode)
    assert empty.tag == 'tag:yaml.org,2002:null'
    assert construct_document(last, LenientLoader) == {'b': '2'}

    with pytest.raises(EndOfStream):
        reader.read()

    with pytest.raises(EndOfStream):
        reader.read()


@pytest.mark.parametrize('content', (
    pytest.param('', id='empty string'),
    pytest.param(b'', id='empty bytes'),
    pytest.param('# only a comment\n', id='comment'),
))
def test_read_empty_stream(content: str | bytes) -> None:
    """Signal the end of an empty stream immediately."""
    with DocumentReader(content) as reader, pytest.raises(EndOfStream):
        reader.read()


def test_end_of_stream_is_eof() -> None:
    """Keep the end of stream signal apart from configuration errors."""
    assert issubclass(EndOfStream, EOFError)
    assert not issubclass(EndOfStream, StreamReadError)


def test_read_binary_stream() -> None:
    """Read documents from a binary file-like object."""
    reader = DocumentReader(io.BytesIO(b'a: 1\n---\nb: 2\n'))

    assert construct_document(reader.read(), LenientLoader) == {'a': '1'}
    assert construct_document(reader.read(), LenientLoader) == {'b': '2'}


def test_read_single() -> None:
    """Read the only document of a stream."""
    with DocumentReader('a: 1\n') as reader:
        node = reader.read_single()

    assert construct_document(node, LenientLoader) == {'a': '1'}
    assert DocumentReader('').read_single() is None


def test_read_single_multiple_documents() -> None:
    """Fail to read a single document from a multi-document stream."""
    with pytest.raises(ConfigurationDecodeError, match=r'expected a single document'):
        DocumentReader('a: 1\n---\nb: 2\n').read_single()


def test_read_invalid_yaml() -> None:
    """Fail with a decode error on a syntax error."""
    reader = DocumentReader('a: 1\n---\nb: [c\n')

    with pytest.raises(ConfigurationDecodeError, match=r'^Could not parse configuration: invalid YAML') as error:
        reader.read()
        reader.read()

    assert isinstance(error.value.__cause__, yaml.error.MarkedYAMLError)
    assert error.value.context['line_num'] is not None


@pytest.mark.parametrize('content', (
    pytest.param(b'a: 1\nb: [\x80]\n', id='invalid utf-8'),
    pytest.param('a: 1\x07\n', id='non-printable character'),
    pytest.param(BrokenStream(), id='broken stream'),
))
def test_read_unreadable_stream(content: bytes | str | io.RawIOBase) -> None:
    """Fail with a read error when the stream cannot be read."""
    with pytest.raises(StreamReadError, match=r'^Could not read configuration stream'):
        with DocumentReader(content) as reader:
            reader.read()


def test_strict_loader_duplicate_keys() -> None:
    """Reject duplicated keys with the strict loader only."""
    content = 'a: 1\nb: 2\na: 3\n'

    with pytest.raises(ConstructorError, match=r"found duplicate key 'a'"):
        yaml.load(content, Loader=StrictLoader)  # noqa: S506

    assert yaml.load(content, Loader=LenientLoader) == {'a': '3', 'b': '2'}  # noqa: S506


def test_strict_loader_nested_duplicate_keys() -> None:
    """Reject duplicated keys of nested mappings."""
    with pytest.raises(ConstructorError, match=r"found duplicate key '--flag'"):
        yaml.load('args:\n  --flag: a\n  --flag: b\n', Loader=StrictLoader)  # noqa: S506


def test_strict_loader_merge_keys() -> None:
    """Allow explicit keys to override merged ones."""
    content = (
        'base: &base\n'
        '  a: 1\n'
        '  b: 2\n'
        'item:\n'
        '  <<: *base\n'
        '  b: 3\n'
    )

    assert yaml.load(content, Loader=StrictLoader) == {  # noqa: S506
        'base': {'a': '1', 'b': '2'},
        'item': {'a': '1', 'b': '3'},
    }


def test_strict_loader_distinct_key_types() -> None:
    """Keep keys of different types apart."""
    assert yaml.load('!!int 1: a\n"1": b\n', Loader=StrictLoader) == {1: 'a', '1': 'b'}  # noqa: S506


def test_construct_same_node_twice() -> None:
    """Construct a document node more than once."""
    node = DocumentReader('base: &base {a: 1}\nitem:\n  <<: *base\n  a: 2\n').read()

    with_strict = construct_document(node, StrictLoader)
    with_lenient = construct_document(node, LenientLoader)

    assert with_strict == with_lenient == {'base': {'a': '1'}, 'item': {'a': '2'}}


@pytest.mark.parametrize(('value', 'expected'), (
    pytest.param('1.50', '1.50', id='float'),
    pytest.param('on', 'on', id='boolean word'),
    pytest.param('true', 'true', id='boolean'),
    pytest.param('1:30', '1:30', id='sexagesimal'),
    pytest.param('0x1F', '0x1F', id='hexadecimal'),
    pytest.param('010', '010', id='octal'),
    pytest.param('2001-12-14', '2001-12-14', id='date'),
    pytest.param('~', None, id='tilde'),
    pytest.param('null', None, id='null'),
    pytest.param('', None, id='empty'),
))
def test_plain_scalars_as_written(value: str, expected: str | None) -> None:
    """Resolve plain scalars other than null to their text."""
    node = DocumentReader(f'key: {value}\n').read()

    for loader in (StrictLoader, LenientLoader):
        assert construct_document(node, loader) == {'key': expected}


def test_strict_loader_same_text_keys() -> None:
    """Treat plain keys with the same text as duplicates."""
    with pytest.raises(ConstructorError, match=r"found duplicate key '1'"):
        yaml.load('1: a\n"1": b\n', Loader=StrictLoader)  # noqa: S506
