"""Semantic versions of the configuration file format.

Version strings follow Semantic Versioning 2.0.0 and are parsed by
`semver`: `MAJOR.MINOR.PATCH` without zero-padded components, with an
optional pre-release and build suffix. Build metadata is ignored when
versions are compared. A `VersionWindow` gates documents to a closed
range of versions.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from semver import Version

from k8sinit.errors import VersionParseError, VersionTooNewError, VersionTooOldError

if TYPE_CHECKING:
    from k8sinit.errors import ErrorContext

#: Lowest configuration file version understood by this release.
MINIMUM_VERSION_REQUIRED = '0.1.0'
#: Highest configuration file version understood by this release.
MAXIMUM_VERSION_SUPPORTED = '0.1.0'

VERSION_PREFIX = 'v'


def parse_semantic(value: str, *,
                   context: 'ErrorContext | None' = None) -> Version:
    """Parse a semantic version string.

    Surrounding whitespace and a single leading `v` are accepted,
    as in `v0.1.0`.

    Args:
        value: Raw version string, e.g. `0.1.0`.
        context: Optional error context attached to a failure.

    Returns:
        Parsed version.

    Raises:
        VersionParseError: If the value is not a semantic version.
    """
    text = value.strip()
    if text.startswith(VERSION_PREFIX):
        text = text[len(VERSION_PREFIX):]

    try:
        return Version.parse(text)

    except (TypeError, ValueError) as base:
        raise VersionParseError(value, context=context) from base


@dataclass(frozen=True)
class VersionWindow:
    """Closed range of supported configuration file versions."""

    minimum: Version = field(default_factory=lambda: parse_semantic(MINIMUM_VERSION_REQUIRED))
    maximum: Version = field(default_factory=lambda: parse_semantic(MAXIMUM_VERSION_SUPPORTED))

    @classmethod
    def from_strings(cls, minimum: str, maximum: str) -> 'VersionWindow':
        """Build a window from raw version strings.

        Raises:
            VersionParseError: If a boundary is not a semantic version.
            ValueError: If the minimum is greater than the maximum.
        """
        window = cls(parse_semantic(minimum), parse_semantic(maximum))
        if window.maximum < window.minimum:
            raise ValueError(f'Minimum version {minimum} is greater than maximum version {maximum}')

        return window

    def check(self, value: str, *,
              context: 'ErrorContext | None' = None) -> Version:
        """Parse a version and ensure it lies within the window.

        Args:
            value: Raw version string of a configuration document.
            context: Optional error context attached to a failure.

        Returns:
            Parsed version.

        Raises:
            VersionParseError: If the value is not a semantic version.
            VersionTooNewError: If the version exceeds the maximum.
            VersionTooOldError: If the version is below the minimum.
        """
        version = parse_semantic(value, context=context)

        if self.maximum < version:
            raise VersionTooNewError(value, version, self.maximum, context=context)

        if version < self.minimum:
            raise VersionTooOldError(value, version, self.minimum, context=context)

        return version
