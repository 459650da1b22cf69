"""Base directories for resolving relative configuration file paths."""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol, Union

logger = logging.getLogger(__name__)

PROJECT_MANIFEST = "pyproject.toml"


class BasePath(Enum):
    """Where a relative file path is resolved from.

    A plain ``str`` or ``Path`` can be used wherever a ``BasePath`` is
    accepted to resolve against a custom directory.
    """

    EXECUTABLE = "executable"
    PROJECT = "project"
    PWD = "pwd"


RelativeFrom = Union[BasePath, str, Path]


class BasePathResolver(Protocol):
    def resolve(self, base: BasePath) -> Path:
        """Return the absolute directory denoted by ``base``."""
        ...


class DefaultBasePathResolver:
    """Resolve base paths from the running process.

    The executable directory is the directory of the script being run
    (``sys.argv[0]``), falling back to the working directory for interactive
    sessions. The project directory is the closest ancestor of the
    executable directory containing ``pyproject.toml``.
    """

    def __init__(self, argv0: Optional[str] = None, manifest: str = PROJECT_MANIFEST):
        self._argv0 = argv0
        self.manifest = manifest

    def executable_dir(self) -> Path:
        argv0 = self._argv0 if self._argv0 is not None else (sys.argv[0] if sys.argv else "")
        if not argv0 or argv0 == "-c":
            return Path.cwd()
        return Path(argv0).resolve().parent

    def project_dir(self) -> Path:
        start = self.executable_dir()
        current = start
        while True:
            if (current / self.manifest).exists():
                return current
            if current == current.parent:
                break
            current = current.parent
        logger.warning(
            "No %s found above %s; using the executable directory as project directory",
            self.manifest,
            start,
        )
        return start

    def resolve(self, base: BasePath) -> Path:
        if base is BasePath.EXECUTABLE:
            return self.executable_dir()
        if base is BasePath.PROJECT:
            return self.project_dir()
        return Path.cwd()


def resolve_file(
    path: Union[str, Path],
    relative_from: RelativeFrom = BasePath.EXECUTABLE,
    resolver: Optional[BasePathResolver] = None,
) -> Path:
    """Turn ``path`` into a normalised absolute path.

    Args:
        path: File path; ``~`` is expanded and absolute paths are kept.
        relative_from: Base used for relative paths. A ``str`` or ``Path``
            is taken as a custom base directory.
        resolver: Resolver for ``BasePath`` members. Defaults to
            :class:`DefaultBasePathResolver`.

    Returns:
        The absolute path, with ``..`` components collapsed.
    """
    expanded = Path(path).expanduser()
    if expanded.is_absolute():
        return Path(os.path.normpath(expanded))
    if isinstance(relative_from, BasePath):
        base = (resolver or DefaultBasePathResolver()).resolve(relative_from)
    else:
        base = Path(relative_from).expanduser().absolute()
    return Path(os.path.normpath(base / expanded))
