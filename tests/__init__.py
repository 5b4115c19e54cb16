"""Test suite for the k8sinit package.

This package contains unit and integration tests validating
document reading, strict and lenient decoding, version gating,
multi-part parsing, and the command-line interface.
"""
