from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from ..core.errors import ResourceError
from ..core.source import Resource
from ..core.types import Payload


class FileResource(Resource):
    """A configuration document on the local file system."""

    def __init__(self, path: Union[str, Path], name: Optional[str] = None):
        self.path = Path(path)
        self.name = name or f"file:{self.path}"

    def fetch(self) -> Payload:
        try:
            data = self.path.read_bytes()
        except OSError as e:
            raise ResourceError(f"Unable to read configuration file {self.path}: {e}") from e
        return Payload(data=data, origin=str(self.path), format_hint=self.path.suffix or None)
