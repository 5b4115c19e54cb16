"""Core configuration parsing pipeline.

It provides:
- splitting of YAML streams into document nodes;
- strict-then-lenient decoding of documents into Pydantic models;
- emptiness detection and version gating of decoded documents.

The primary public entry point is `ConfigurationParser`, which parses
single documents and multi-part document streams.
"""

from .parser import ConfigurationParser
from .reader import Content, DocumentReader, LenientLoader, StrictLoader

__all__ = (
    'ConfigurationParser',
    'Content',
    'DocumentReader',
    'LenientLoader',
    'StrictLoader',
)
