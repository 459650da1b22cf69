"""Source protocols consumed by the configuration store."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from .types import Entry, Payload


class Resource(Protocol):
    """A document-shaped source, such as a file or a URL.

    The store decodes the fetched bytes and merges the result at the root.
    """

    name: str

    def fetch(self) -> Payload:
        """Read the resource.

        Returns:
            The raw bytes along with an optional format hint.

        Raises:
            ResourceError: If the resource cannot be read.
        """
        ...


class EntrySource(Protocol):
    """A flat source of ``key=value`` strings.

    Each key is translated to a tree path by replacing ``separator`` with the
    store's separator, and the value is written at that path.

    Attributes:
        name: Human readable name used in log messages.
        separator: Path separator used inside keys of this source.
        deserializer: Format used to decode values into lists or mappings;
            None tries every registered format.
    """

    name: str
    separator: str
    deserializer: Optional[str]

    def entries(self) -> Iterable[Entry]:
        """Yield the entries of this source in order."""
        ...
