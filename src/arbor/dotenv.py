"""Parsing of ``.env`` files into ordered key/value pairs.

Nothing here touches ``os.environ``; values are only read from it to expand
``${VAR}`` references.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

_LINE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_.]*)\s*=\s*(.*)$")
_BRACED = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")
_SIMPLE = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")
_ESCAPES = {"\\n": "\n", "\\r": "\r", "\\t": "\t", '\\"': '"', "\\\\": "\\"}


def _unquote(value: str) -> Tuple[str, bool]:
    """Strip quotes from ``value``; the flag tells whether expansion applies."""
    if len(value) >= 2 and value[0] == value[-1] == '"':
        body = value[1:-1]
        return re.sub(r'\\[nrt"\\]', lambda m: _ESCAPES[m.group(0)], body), True
    if len(value) >= 2 and value[0] == value[-1] == "'":
        # single quotes are literal
        return value[1:-1], False
    # trailing " # comment" on unquoted values
    return re.split(r"\s+#", value, maxsplit=1)[0].rstrip(), True


def _expand(value: str, known: Mapping[str, str], environ: Mapping[str, str]) -> str:
    def lookup(match: "re.Match[str]") -> str:
        name = match.group(1)
        return environ.get(name, known.get(name, ""))

    return _SIMPLE.sub(lookup, _BRACED.sub(lookup, value))


def parse_dotenv(
    lines: Iterable[str], environ: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Parse ``.env`` lines in order.

    Variables referenced as ``$NAME`` or ``${NAME}`` are expanded from
    ``environ`` (``os.environ`` by default) first, then from keys defined
    earlier in the same file. Single-quoted values are kept verbatim.
    """
    env = os.environ if environ is None else environ
    values: Dict[str, str] = {}
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        match = _LINE.match(stripped)
        if not match:
            continue
        key, raw = match.groups()
        value, expand = _unquote(raw)
        values[key] = _expand(value, values, env) if expand else value
    return values


def read_dotenv(
    path: Union[str, Path], environ: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Read and parse the ``.env`` file at ``path``.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(path, "r", encoding="utf-8") as f:
        return parse_dotenv(f, environ)
