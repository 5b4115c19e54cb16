"""Configuration document parser.

This module defines the parser turning YAML documents into validated
configuration objects.

Each document is decoded twice at most: first strictly, rejecting
unknown fields and duplicated keys, then leniently, dropping unknown
fields, so a document written for a newer format still decodes. Blank
documents are detected and the version of every document is gated to
the supported window.
"""

from itertools import count
from typing import TYPE_CHECKING, Any
from warnings import warn

from pydantic import ValidationError
from yaml.error import MarkedYAMLError

from k8sinit.errors import (
    ConfigurationDecodeError,
    ConfigurationWarning,
    EmptyConfigurationError,
    EndOfStream,
    ErrorContext,
)
from k8sinit.models import LENIENT_CONTEXT
from k8sinit.schema import Configuration, MultiPartConfiguration
from k8sinit.settings import ParserSettings

from .reader import DocumentReader, LenientLoader, StrictLoader, construct_document

if TYPE_CHECKING:
    from yaml import SafeLoader
    from yaml.nodes import Node

if TYPE_CHECKING:
    from .reader import Content


class ConfigurationParser:
    """Parser of single and multi-part configuration documents.

    The parser holds only immutable settings and may be shared between
    callers.
    """

    def __init__(self, settings: ParserSettings | None = None) -> None:
        """Initialize the parser.

        Args:
            settings: Parser settings. Resolved from the environment
                when omitted.
        """
        self.settings = settings or ParserSettings()
        self.version_window = self.settings.version_window()

    def parse(self, content: 'Content') -> Configuration:
        """Parse a stream holding exactly one configuration document.

        Args:
            content: YAML buffer or readable stream.

        Returns:
            Validated configuration.

        Raises:
            StreamReadError: If the stream cannot be read.
            ConfigurationDecodeError: If the document cannot be decoded.
            EmptyConfigurationError: If the document has no values.
            VersionError: If the document version is invalid or unsupported.
        """
        with DocumentReader(content) as reader:
            node = reader.read_single()

        return self.decode(node)

    def parse_multipart(self, content: 'Content') -> MultiPartConfiguration:
        """Parse a stream of configuration documents.

        Empty documents are skipped. Any other failure aborts the whole
        stream, so either all parts are returned or none.

        Args:
            content: YAML buffer or readable stream.

        Returns:
            Validated parts in stream order.

        Raises:
            StreamReadError: If the stream cannot be read.
            ConfigurationDecodeError: If a document cannot be decoded.
            VersionError: If a document version is invalid or unsupported.
        """
        parts: list[Configuration] = []

        with DocumentReader(content) as reader:
            for position in count():
                try:
                    node = reader.read()
                except EndOfStream:
                    break
                except ConfigurationDecodeError as error:
                    error.with_context(document_num=position)
                    raise

                try:
                    part = self.decode(node, document_num=position)
                except EmptyConfigurationError:
                    continue

                parts.append(part)

        return MultiPartConfiguration(parts=tuple(parts))

    def decode(self, node: 'Node | None', *,
               document_num: int | None = None) -> Configuration:
        """Decode and validate a composed document.

        Args:
            node: Root node of the document, None for no document.
            document_num: Zero-based number of the document in its stream.

        Returns:
            Validated configuration.

        Raises:
            ConfigurationDecodeError: If the document cannot be decoded.
            EmptyConfigurationError: If the document has no values.
            VersionError: If the document version is invalid or unsupported.
        """
        context = ErrorContext()
        if document_num is not None:
            context.update(document_num=document_num)

        if node is not None:
            context.update(
                filename=node.start_mark.name,
                line_num=node.start_mark.line,
                column_num=node.start_mark.column,
            )

        try:
            config = self._decode(node, StrictLoader, lenient=False)

        except ConfigurationDecodeError as strict_error:
            try:
                config = self._decode(node, LenientLoader, lenient=True)

            except ConfigurationDecodeError as error:
                if document_num is not None:
                    error.with_context(document_num=document_num)
                raise

            warn(
                f'Configuration may contain unknown fields (error was {strict_error.message!r})',
                category=ConfigurationWarning,
                stacklevel=2,
            )
            warn(
                'Any unknown fields will be ignored',
                category=ConfigurationWarning,
                stacklevel=2,
            )

        if config.is_empty():
            raise EmptyConfigurationError(context=context)

        self.version_window.check(config.version, context=context)

        return config

    @staticmethod
    def _decode(node: 'Node | None', loader: type['SafeLoader'], *,
                lenient: bool) -> Configuration:
        """Make a single decoding attempt.

        Args:
            node: Root node of the document, None for no document.
            loader: Loader class used to construct the document.
            lenient: Whether unknown fields are dropped instead of rejected.

        Returns:
            Decoded, not yet validated for emptiness or version, configuration.

        Raises:
            ConfigurationDecodeError: If the attempt fails.
        """
        data: Any = None
        filename = node.start_mark.name if node is not None else None

        if node is not None:
            try:
                data = construct_document(node, loader)

            except MarkedYAMLError as base:
                raise ConfigurationDecodeError.from_yaml_error(base) from base

        if data is None:
            data = {}

        try:
            return Configuration.model_validate(data, context={LENIENT_CONTEXT: lenient})

        except ValidationError as base:
            raise ConfigurationDecodeError.from_pydantic_error(
                base,
                data=data,
                filename=filename,
            ) from base
