"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from k8sinit.core import ConfigurationParser
from k8sinit.settings import ParserSettings

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def make_parser() -> 'Callable[..., ConfigurationParser]':
    """Provide a factory of parsers with an explicit version window.

    Explicit settings take precedence over `K8SINIT_*` variables, so
    parsers built by the factory do not depend on the environment.
    """
    def make(minimum_version: str = '0.1.0',
             maximum_version: str = '0.1.0') -> ConfigurationParser:
        """Build a parser for the given version window.

        Args:
            minimum_version: Lowest accepted version.
            maximum_version: Highest accepted version.

        Returns:
            Configuration parser.
        """
        return ConfigurationParser(ParserSettings(
            minimum_version=minimum_version,
            maximum_version=maximum_version,
        ))

    return make


@pytest.fixture
def parser(make_parser: 'Callable[..., ConfigurationParser]') -> ConfigurationParser:
    """Provide a parser supporting only the `0.1.0` format."""
    return make_parser()
