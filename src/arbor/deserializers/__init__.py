"""Decoders turning raw bytes into plain Python values.

JSON and property lists use the standard library; YAML uses PyYAML.
"""

from .json_format import JsonDeserializer
from .plist_format import PlistDeserializer
from .registry import Deserializer, DeserializerRegistry
from .yaml_format import YamlDeserializer

__all__ = [
    "Deserializer",
    "DeserializerRegistry",
    "JsonDeserializer",
    "PlistDeserializer",
    "YamlDeserializer",
]
