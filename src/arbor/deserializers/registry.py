"""Deserializer protocol and the registry the store decodes through."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Protocol, Tuple

from ..core.errors import DecodeError

logger = logging.getLogger(__name__)


class Deserializer(Protocol):
    """Protocol for decoders turning raw bytes into plain Python values.

    Attributes:
        name: Unique format name, e.g. ``"json"``.
        extensions: File suffixes (with the leading dot) handled by this format.
        media_types: MIME types handled by this format.
        string_values: Whether command-line and environment values are tried
            with this format when no format is named.
    """

    name: str
    extensions: Tuple[str, ...]
    media_types: Tuple[str, ...]
    string_values: bool

    def deserialize(self, data: bytes) -> Any:
        """Decode ``data``.

        Raises:
            DecodeError: If ``data`` is not valid in this format.
        """
        ...


class DeserializerRegistry:
    """Ordered collection of deserializers keyed by format name.

    When no format is forced, deserializers are tried in registration order
    and the first one that succeeds wins.
    """

    def __init__(self, deserializers: Optional[List[Deserializer]] = None):
        self._by_name: Dict[str, Deserializer] = {}
        for deserializer in deserializers or []:
            self.use(deserializer)

    @classmethod
    def default(cls) -> "DeserializerRegistry":
        from .json_format import JsonDeserializer
        from .plist_format import PlistDeserializer
        from .yaml_format import YamlDeserializer

        return cls([JsonDeserializer(), PlistDeserializer(), YamlDeserializer()])

    def use(self, deserializer: Deserializer) -> None:
        self._by_name[deserializer.name] = deserializer

    def get(self, name: str) -> Optional[Deserializer]:
        return self._by_name.get(name)

    def names(self) -> List[str]:
        return list(self._by_name)

    def __iter__(self) -> Iterator[Deserializer]:
        return iter(list(self._by_name.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def for_extension(self, extension: str) -> Optional[Deserializer]:
        ext = extension.lower()
        if ext and not ext.startswith("."):
            ext = "." + ext
        for deserializer in self:
            if ext in deserializer.extensions:
                return deserializer
        return None

    def for_media_type(self, content_type: str) -> Optional[Deserializer]:
        # "application/json; charset=utf-8" -> "application/json"
        media_type = content_type.split(";", 1)[0].strip().lower()
        for deserializer in self:
            if media_type in deserializer.media_types:
                return deserializer
        return None

    def for_hint(self, hint: Optional[str]) -> Optional[Deserializer]:
        """Pick a deserializer from a file extension or a media type."""
        if not hint:
            return None
        if "/" in hint:
            return self.for_media_type(hint)
        return self.for_extension(hint)

    def decode(self, data: bytes, name: Optional[str] = None) -> Any:
        """Decode ``data`` with the named deserializer, or with the first that works.

        Args:
            data: Raw bytes.
            name: Optional format name forcing a single deserializer.

        Returns:
            The decoded value.

        Raises:
            DecodeError: If ``name`` is unknown, the forced deserializer fails,
                or no registered deserializer accepts ``data``.
        """
        if name is not None:
            return self._named(name).deserialize(data)
        return self._first_accepting(data, list(self))

    def decode_string(self, text: str, name: Optional[str] = None) -> Any:
        """Try to turn ``text`` into a list or a mapping.

        Used for command-line and environment values. Without ``name`` only
        deserializers with ``string_values`` set are tried, so text such as
        ``Error: disk full`` is not read as a YAML mapping. Only structured
        results are accepted: when decoding fails or yields a scalar, ``text``
        is returned unchanged.
        """
        data = text.encode("utf-8", "surrogateescape")
        try:
            if name is not None:
                value = self._named(name).deserialize(data)
            else:
                candidates = [d for d in self if getattr(d, "string_values", True)]
                value = self._first_accepting(data, candidates)
        except DecodeError:
            return text
        if isinstance(value, (Mapping, list)):
            return value
        return text

    def _named(self, name: str) -> Deserializer:
        deserializer = self._by_name.get(name)
        if deserializer is None:
            raise DecodeError(f"No deserializer registered under name '{name}'")
        return deserializer

    def _first_accepting(self, data: bytes, candidates: List[Deserializer]) -> Any:
        for deserializer in candidates:
            try:
                return deserializer.deserialize(data)
            except DecodeError as e:
                logger.debug("Deserializer '%s' rejected data: %s", deserializer.name, e)
        raise DecodeError(
            "Unable to decode data with any known deserializer "
            f"({', '.join(d.name for d in candidates)})"
        )
