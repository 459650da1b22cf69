from __future__ import annotations

import os
from typing import Dict, Iterator, Mapping, Optional

from ..core.source import EntrySource
from ..core.types import Entry


class EnvironmentSource(EntrySource):
    """Process environment variables, e.g. ``DATABASE__PORT=5432``.

    Values are only ever decoded as JSON, so that ordinary strings such as
    ``key: value`` are not mistaken for YAML documents.
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        separator: str = "__",
        name: Optional[str] = None,
    ):
        self.environ: Dict[str, str] = dict(os.environ if environ is None else environ)
        self.separator = separator
        self.deserializer: Optional[str] = "json"
        self.name = name or "environment"

    def entries(self) -> Iterator[Entry]:
        for key, value in self.environ.items():
            yield Entry(key=key, value=value)
