"""Core exception hierarchy.

This module defines the error and warning types raised while reading,
decoding, and validating configuration documents. All errors share
a formatter which renders source locations and YAML snippets of the
failing fragment.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import safe_dump
from yaml.error import MarkedYAMLError

if TYPE_CHECKING:
    from typing import Self

if TYPE_CHECKING:
    from semver import Version
    from pydantic import ValidationError
    from pydantic_core import ErrorDetails

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_FILENAME = '<unicode string>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the source stream where the error occurred.
    filename: str | None

    #: Line number in the source stream.
    line_num: int | None
    #: Column number in the source stream.
    column_num: int | None

    #: Zero-based number of the document within a multi-document stream.
    document_num: int | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Document fragment associated with the error.
    element: Any


class ErrorFormatter:
    """Utility class for formatting configuration errors.

    This formatter is responsible for producing human-readable
    error messages with optional source location and YAML-based
    contextual snippets.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message.rstrip()

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line,
            column, and document numbers when available.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename')
        if not filename:
            filename = FORMAT_FILENAME

        message = f'{indent}in "{filename}"'
        if (line_num := context.get('line_num')) is not None:
            message += f', line {line_num + 1}'
            if (column_num := context.get('column_num')) is not None:
                message += f', column {column_num + 1}'
        message += linesep

        if (document_num := context.get('document_num')) is not None:
            message += f'{indent}on document {document_num + 1}{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet illustrating the error context.

        Args:
            context: Error context containing YAML error or element data.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        error = context.get('error')
        if isinstance(error, MarkedYAMLError) and error.problem_mark is not None:
            snippet = error.problem_mark.get_snippet(indent=0) or ''
            return cls._make_indent(snippet, indent)

        if (element := context.get('element')) is not None:
            snippet = f'{indent}{SNIPPET_ELLIPSIS}'
            snippet += cls._make_yaml(element, indent)
            return snippet + linesep

        return ''

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a document fragment to a YAML-formatted string.

        Args:
            value: Fragment to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = safe_dump(
            value,
            indent=SNIPPET_INDENT,
            sort_keys=False,
            default_flow_style=False,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input to a string of spaces."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class ConfigurationWarning(UserWarning):
    """Warning emitted for non-fatal configuration issues.

    Used when a document only decodes after dropping unknown fields.
    The warning never changes the outcome of a parse.
    """


class EndOfStream(EOFError):  # noqa: N818
    """Signal raised by a document reader when no documents remain."""


class ConfigurationError(Exception, ErrorFormatter):
    """Base exception for all configuration errors.

    All custom exceptions raised by the library inherit from this
    class to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context with location and offending data.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String represenatation."""
        return self.format(self.message, self.context)

    def with_context(self, **context: Any) -> 'Self':  # noqa: ANN401
        """Merge additional formatting context into the error.

        Args:
            context: Context fields to set, overriding existing values.

        Returns:
            The same error instance.
        """
        self.context = ErrorContext(**{**(self.context or {}), **context})

        return self


class StreamReadError(ConfigurationError):
    """Error raised when the input stream cannot be read.

    This covers invalid encodings, non-printable characters, and I/O
    failures of file-like inputs. Syntax errors are decode errors.
    """

    @classmethod
    def from_exception(cls, error: Exception, *,
                       filename: str | None = None) -> 'Self':
        """Create a read error from an underlying exception.

        Args:
            error: Exception raised while reading the stream.
            filename: Name of the stream, if known.

        Returns:
            StreamReadError wrapping the failure.
        """
        return cls(
            f'Could not read configuration stream{linesep}{' ' * FORMAT_INDENT}{error}',
            context=ErrorContext(filename=filename, error=error),
        )


class ConfigurationDecodeError(ConfigurationError):
    """Error raised when a document cannot be decoded.

    Raised when a YAML document is syntactically invalid or when its
    content does not fit the configuration schema.
    """

    @classmethod
    def from_yaml_error(cls, error: MarkedYAMLError) -> 'Self':
        """Create a decode error from a YAML parsing failure.

        Args:
            error: Exception raised by the YAML parser or constructor.

        Returns:
            ConfigurationDecodeError with the failure position.
        """
        error_context = ErrorContext(error=error)
        if (mark := error.problem_mark) is not None:
            error_context.update(
                filename=mark.name,
                line_num=mark.line,
                column_num=mark.column,
            )

        message = 'Could not parse configuration: invalid YAML'
        for line in (error.context, error.problem):
            if line:
                message += f'{linesep}{' ' * FORMAT_INDENT}{line}'

        return cls(message, context=error_context)

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError', *,
                            data: Any = None,  # noqa: ANN401
                            filename: str | None = None) -> 'Self':
        """Create a decode error from a pydantic validation failure.

        The message names the first located problem and the context
        holds the smallest fragment of the document responsible for it.

        Args:
            error: ValidationError raised by pydantic.
            data: Decoded document data.
            filename: Name of the source stream.

        Returns:
            ConfigurationDecodeError representing the validation failure.
        """
        error_context = ErrorContext(filename=filename, error=error)

        if not isinstance(data, dict):
            return cls(
                'Could not parse configuration: a mapping is expected',
                context=error_context,
            )

        for item in error.errors(include_url=False, include_input=False):
            if located := cls._locate_pydantic_context(data, item):
                message, value = located
                return cls(
                    f'Could not parse configuration: {message}',
                    context=ErrorContext(**error_context, element=value),
                )

        return cls('Could not parse configuration', context=error_context)

    @classmethod
    def _locate_pydantic_context(cls, value: Any,  # noqa: ANN401
                                 error: 'ErrorDetails') -> tuple[str, Any] | None:
        """Locate the most specific failing fragment in decoded data.

        Walks the pydantic error location path and extracts the minimal
        substructure responsible for the failure.

        Args:
            value: Root data structure being validated.
            error: Pydantic error details including location path.

        Returns:
            A tuple of (error message, extracted fragment) if a relevant
            context can be located, otherwise None.
        """
        container = last_item = value
        last_key: int | str | None = None

        for key in error['loc']:
            if isinstance(last_item, list) and isinstance(key, int) and 0 <= key < len(last_item):
                container, last_item, last_key = last_item, last_item[key], key
            elif isinstance(last_item, dict) and key in last_item:
                container, last_item, last_key = last_item, last_item[key], key
            elif not isinstance(last_item, (list, dict)):
                return None

        message = next((
            line.strip()
            for line in (error.get('msg') or '').splitlines()
            if line.strip()
        ), None)

        if message is None or last_key is None:
            return None

        if isinstance(container, list):
            return message, [last_item]

        return message, {last_key: last_item}


class EmptyConfigurationError(ConfigurationError):
    """Error raised for a document without any configuration values.

    Multi-document parsing treats it as a signal to skip the document,
    while a single-document parse surfaces it to the caller.
    """

    def __init__(self, message: str = 'Empty configuration object', *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an empty configuration error."""
        super().__init__(message, context=context)


class VersionError(ConfigurationError):
    """Base error for configuration version problems."""


class VersionParseError(VersionError):
    """Error raised when a version is not a semantic version."""

    def __init__(self, value: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize a version parse error.

        Args:
            value: The offending raw version string.
            context: Optional error context.
        """
        self.value = value

        super().__init__(
            f'Could not parse config file version {value!r}',
            context=context,
        )


class UnsupportedVersionError(VersionError):
    """Error raised when a version is outside the supported window."""

    boundary_name: str = 'supported'

    def __init__(self, value: str, version: 'Version', boundary: 'Version', *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an unsupported version error.

        Args:
            value: Raw version string of the configuration document.
            version: Parsed version of the configuration document.
            boundary: Window boundary the version is compared against.
            context: Optional error context.
        """
        self.value = value
        self.version = version
        self.boundary = boundary

        super().__init__(
            f'Config file version is {value} '
            f'but the {self.boundary_name} is {boundary}',
            context=context,
        )


class VersionTooNewError(UnsupportedVersionError):
    """Error raised when a version is newer than the maximum supported."""

    boundary_name = 'maximum version supported'


class VersionTooOldError(UnsupportedVersionError):
    """Error raised when a version is older than the minimum required."""

    boundary_name = 'minimum version required'
