from __future__ import annotations

import plistlib
from typing import Any
from xml.parsers.expat import ExpatError

from ..core.errors import DecodeError


class PlistDeserializer:
    """Property lists, both XML and binary."""

    name = "plist"
    extensions = (".plist",)
    media_types = ("application/x-plist", "application/x-bplist")
    string_values = True

    def deserialize(self, data: bytes) -> Any:
        try:
            value = plistlib.loads(data)
        except (ValueError, ExpatError) as e:
            raise DecodeError(f"Invalid property list: {e}") from e
        # "<plist></plist>" parses to None
        if value is None:
            raise DecodeError("Property list is empty")
        return value
