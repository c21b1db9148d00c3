"""Extraction of selected JSON fields as searchable text.

This package compiles dotted inclusion paths into an immutable filter and
applies it to JSON documents in a single streaming pass, producing either a
space-separated text projection or the filtered document as compact JSON.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("json2text")
except PackageNotFoundError:
    __version__ = "unknown"
