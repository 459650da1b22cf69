from __future__ import annotations

import sys
from typing import Iterator, List, Optional, Sequence

from ..core.source import EntrySource
from ..core.types import Entry


class ArgumentsSource(EntrySource):
    """Command-line arguments of the form ``<prefix><path>=<value>``.

    With the defaults, ``--database.port=5432`` yields the entry
    ``database.port = "5432"``. Arguments without the prefix or without an
    ``=`` are ignored.
    """

    def __init__(
        self,
        argv: Optional[Sequence[str]] = None,
        prefix: str = "--",
        separator: str = ".",
        name: Optional[str] = None,
    ):
        # argv[0] is the program itself
        self.argv: List[str] = list(sys.argv[1:] if argv is None else argv)
        self.prefix = prefix
        self.separator = separator
        self.deserializer: Optional[str] = None
        self.name = name or "arguments"

    def entries(self) -> Iterator[Entry]:
        for arg in self.argv:
            if not arg.startswith(self.prefix):
                continue
            key, sep, value = arg[len(self.prefix):].partition("=")
            if not sep:
                continue
            yield Entry(key=key, value=value)
