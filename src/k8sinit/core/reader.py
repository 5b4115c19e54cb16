"""YAML document stream reading.

This module splits an input stream into YAML document nodes and
constructs Python data from them. Two loaders are provided: the strict
loader rejects duplicate mapping keys, the lenient one keeps the last
value of a duplicated key.
"""

import re
from contextlib import contextmanager
from typing import IO, TYPE_CHECKING, Any, ClassVar

from yaml import SafeLoader
from yaml.constructor import ConstructorError
from yaml.error import MarkedYAMLError
from yaml.nodes import MappingNode, ScalarNode
from yaml.reader import ReaderError

from k8sinit.errors import ConfigurationDecodeError, EndOfStream, StreamReadError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType
    from typing import Self

if TYPE_CHECKING:
    from yaml.nodes import Node

#: Raw configuration input: a buffer or a readable stream.
type Content = bytes | str | IO[bytes] | IO[str]

MERGE_TAG = 'tag:yaml.org,2002:merge'
NULL_TAG = 'tag:yaml.org,2002:null'


class LenientLoader(SafeLoader):
    """Safe YAML loader keeping the last value of duplicated keys.

    Plain scalars other than `null` and merge keys resolve to strings,
    so values such as `1.50`, `on` or `0x1F` are kept as written.
    """

    yaml_implicit_resolvers: ClassVar[dict[str | None, list[tuple[str, re.Pattern[str]]]]] = {}


LenientLoader.add_implicit_resolver(
    NULL_TAG,
    re.compile(r'^(?:~|null|Null|NULL|)$'),
    ['~', 'n', 'N', ''],
)
LenientLoader.add_implicit_resolver(
    MERGE_TAG,
    re.compile(r'^(?:<<)$'),
    ['<'],
)


class StrictLoader(LenientLoader):
    """Safe YAML loader rejecting duplicated mapping keys."""

    def construct_mapping(self, node: 'Node', deep: bool = False) -> dict[Any, Any]:  # noqa: FBT001, FBT002
        """Construct a mapping, failing on a duplicated scalar key.

        Merge keys (`<<`) are not duplicates: explicit keys override
        merged ones.

        Raises:
            ConstructorError: If a scalar key occurs twice.
        """
        if isinstance(node, MappingNode):
            keys: set[tuple[str, str]] = set()
            for key_node, _ in node.value:
                if not isinstance(key_node, ScalarNode) or key_node.tag == MERGE_TAG:
                    continue
                key = (key_node.tag, key_node.value)
                if key in keys:
                    raise ConstructorError(
                        'while constructing a mapping', node.start_mark,
                        f'found duplicate key {key_node.value!r}', key_node.start_mark,
                    )
                keys.add(key)

        return super().construct_mapping(node, deep=deep)


def construct_document(node: 'Node', loader: type[SafeLoader]) -> Any:  # noqa: ANN401
    """Construct Python data from a composed document node.

    Args:
        node: Root node of a YAML document.
        loader: Loader class whose constructors are used.

    Returns:
        Constructed document data.

    Raises:
        MarkedYAMLError: If the document cannot be constructed.
    """
    instance = loader('')
    try:
        return instance.construct_document(node)
    finally:
        instance.dispose()


class DocumentReader:
    """Reader of successive YAML documents from a stream.

    Documents are returned as composed nodes, leaving construction to
    the caller, so the same document can be decoded more than once.
    """

    def __init__(self, content: Content,
                 loader: type[SafeLoader] = StrictLoader) -> None:
        """Initialize the reader.

        Args:
            content: YAML buffer or readable stream.
            loader: Loader class used to compose documents.

        Raises:
            StreamReadError: If the stream cannot be read.
        """
        self.filename: str | None = getattr(content, 'name', None)

        with self._translate_errors():
            self._loader = loader(content)

    def __enter__(self) -> 'Self':
        return self

    def __exit__(self, exc_type: type[BaseException] | None,
                 exc_value: BaseException | None,
                 traceback: 'TracebackType | None') -> None:
        self.close()

    def read(self) -> 'Node':
        """Read the next document of the stream.

        Returns:
            Root node of the next document. An empty document is
            a `null` scalar node.

        Raises:
            EndOfStream: If no documents remain.
            ConfigurationDecodeError: If the document is not valid YAML.
            StreamReadError: If the stream cannot be read.
        """
        with self._translate_errors():
            if not self._loader.check_node():
                raise EndOfStream
            return self._loader.get_node()

    def read_single(self) -> 'Node | None':
        """Read the only document of the stream.

        Returns:
            Root node of the document, or None for an empty stream.

        Raises:
            ConfigurationDecodeError: If the document is not valid YAML
                or the stream holds more than one document.
            StreamReadError: If the stream cannot be read.
        """
        with self._translate_errors():
            return self._loader.get_single_node()

    def close(self) -> None:
        """Release the underlying loader state."""
        if loader := getattr(self, '_loader', None):
            loader.dispose()

    @contextmanager
    def _translate_errors(self) -> 'Iterator[None]':
        """Convert YAML and I/O failures into configuration errors."""
        try:
            yield

        except MarkedYAMLError as base:
            raise ConfigurationDecodeError.from_yaml_error(base) from base

        except (ReaderError, OSError, UnicodeDecodeError) as base:
            raise StreamReadError.from_exception(base, filename=self.filename) from base
