"""Environment file (.env) configuration source."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Mapping, Optional, Union

from ..core.errors import ResourceError
from ..core.source import EntrySource
from ..core.types import Entry
from ..dotenv import read_dotenv


class EnvFileSource(EntrySource):
    """Entries read from a ``.env`` file.

    Keys use the same separator as environment variables, so
    ``DATABASE__PORT=5432`` in the file lands at ``DATABASE:PORT``. The file
    is read when entries are requested, not when the source is created.
    """

    def __init__(
        self,
        path: Union[str, Path],
        separator: str = "__",
        name: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize EnvFileSource.

        Args:
            path: Path to the .env file.
            separator: Path separator used inside keys.
            name: Optional custom name for this source.
            environ: Variables available for ``${VAR}`` expansion. Defaults
                to ``os.environ``.
        """
        self.path = Path(path)
        self.separator = separator
        self.deserializer: Optional[str] = "json"
        self.name = name or f"env:{self.path.name}"
        self._environ = environ

    def entries(self) -> Iterator[Entry]:
        try:
            values = read_dotenv(self.path, self._environ)
        except OSError as e:
            raise ResourceError(f"Unable to read env file {self.path}: {e}") from e
        for key, value in values.items():
            yield Entry(key=key, value=value)
