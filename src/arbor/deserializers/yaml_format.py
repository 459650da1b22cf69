from __future__ import annotations

from typing import Any

import yaml

from ..core.errors import DecodeError


class YamlDeserializer:
    """YAML documents loaded with ``yaml.safe_load``.

    Only mappings and sequences are accepted at the top level; almost any
    text is a valid YAML scalar, so a bare scalar document is treated as a
    decode failure. It is skipped when guessing the format of a command-line
    or environment value.
    """

    name = "yaml"
    extensions = (".yaml", ".yml")
    media_types = ("application/yaml", "application/x-yaml", "text/yaml", "text/x-yaml")
    string_values = False

    def deserialize(self, data: bytes) -> Any:
        try:
            value = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise DecodeError(f"Invalid YAML: {e}") from e
        if not isinstance(value, (dict, list)):
            raise DecodeError("YAML document is not a mapping or a sequence")
        return value
