"""Value types shared between sources and the store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Payload:
    """Raw bytes fetched from a file or a URL.

    Attributes:
        data: The undecoded content.
        origin: Where the bytes came from, for messages.
        format_hint: File extension (``".json"``) or media type
            (``"application/json"``) used to pick a deserializer, if known.
    """

    data: bytes
    origin: str
    format_hint: Optional[str] = None


@dataclass(frozen=True)
class Entry:
    """A single ``path = value`` pair from a flat source.

    ``key`` still uses the separator of its source, e.g. ``DATABASE__HOST``.
    """

    key: str
    value: str
