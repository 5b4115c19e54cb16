"""Declarative configuration of single-node cluster bootstrapping.

The `k8sinit` package parses and validates YAML configuration
documents describing addons, extra kubelet and kube-apiserver
arguments, and extra certificate Subject Alternative Names.

Key features:
- strict decoding with a lenient fallback for forward-compatible files;
- semantic version gating of the configuration file format;
- multi-document streams applied as ordered configuration parts.
"""

from typing import TYPE_CHECKING

from k8sinit.core import ConfigurationParser

if TYPE_CHECKING:
    from k8sinit.core import Content
    from k8sinit.schema import Configuration, MultiPartConfiguration


def parse_configuration(content: 'Content') -> 'Configuration':
    """Parse a single configuration document with default settings."""
    return ConfigurationParser().parse(content)


def parse_multipart_configuration(content: 'Content') -> 'MultiPartConfiguration':
    """Parse a stream of configuration documents with default settings."""
    return ConfigurationParser().parse_multipart(content)


__all__ = (
    'ConfigurationParser',
    'parse_configuration',
    'parse_multipart_configuration',
)
