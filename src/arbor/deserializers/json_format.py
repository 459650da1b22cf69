from __future__ import annotations

import json
from typing import Any

from ..core.errors import DecodeError


class JsonDeserializer:
    """JSON documents decoded with the standard library ``json`` module."""

    name = "json"
    extensions = (".json",)
    media_types = ("application/json", "text/json")
    string_values = True

    def deserialize(self, data: bytes) -> Any:
        try:
            return json.loads(data)
        except ValueError as e:
            raise DecodeError(f"Invalid JSON: {e}") from e
