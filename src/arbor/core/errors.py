"""Exception types raised by arbor."""

from __future__ import annotations


class ArborError(Exception):
    """Base class for all arbor errors."""


class DecodeError(ArborError, ValueError):
    """Raised when raw bytes cannot be decoded by any usable deserializer."""


class ResourceError(ArborError, OSError):
    """Raised when a file or network resource cannot be read."""
