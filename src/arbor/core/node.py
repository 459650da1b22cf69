"""Tree representation of configuration values."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class NodeKind(Enum):
    """The shape of a :class:`ConfigNode`."""

    EMPTY = "empty"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


@dataclass
class ConfigNode:
    """A single point in the configuration tree.

    Exactly one shape is active at a time:

    - ``EMPTY``: no value. Merging or assigning an empty node is a no-op.
    - ``SCALAR``: ``value`` holds an opaque raw value (str, int, bool, ...).
    - ``SEQUENCE``: ``value`` is a list of child nodes.
    - ``MAPPING``: ``value`` is a dict of string keys to child nodes.

    Children are owned by their parent; nodes are never shared between two
    containers of the same tree.
    """

    kind: NodeKind = NodeKind.EMPTY
    value: Any = field(default=None)

    @classmethod
    def empty(cls) -> "ConfigNode":
        return cls(NodeKind.EMPTY, None)

    @classmethod
    def scalar(cls, value: Any) -> "ConfigNode":
        return cls(NodeKind.SCALAR, value)

    @classmethod
    def sequence(cls, items: Optional[List["ConfigNode"]] = None) -> "ConfigNode":
        return cls(NodeKind.SEQUENCE, list(items or []))

    @classmethod
    def mapping(cls, items: Optional[Dict[str, "ConfigNode"]] = None) -> "ConfigNode":
        return cls(NodeKind.MAPPING, dict(items or {}))

    @classmethod
    def from_raw(cls, raw: Any) -> "ConfigNode":
        """Build a node tree from a raw value.

        Mappings become ``MAPPING`` nodes (keys are stringified), lists and
        tuples become ``SEQUENCE`` nodes, ``None`` becomes ``EMPTY`` and
        everything else is wrapped as a ``SCALAR``. Strings and bytes are
        scalars, not sequences.

        Args:
            raw: Any value, typically the output of a deserializer.

        Returns:
            A freshly built node owning no part of ``raw``'s containers.
        """
        if raw is None:
            return cls.empty()
        if isinstance(raw, ConfigNode):
            return raw.copy()
        if isinstance(raw, Mapping):
            return cls.mapping({str(k): cls.from_raw(v) for k, v in raw.items()})
        if isinstance(raw, (list, tuple)):
            return cls.sequence([cls.from_raw(item) for item in raw])
        return cls.scalar(raw)

    @property
    def is_empty(self) -> bool:
        return self.kind is NodeKind.EMPTY

    @property
    def is_scalar(self) -> bool:
        return self.kind is NodeKind.SCALAR

    @property
    def is_sequence(self) -> bool:
        return self.kind is NodeKind.SEQUENCE

    @property
    def is_mapping(self) -> bool:
        return self.kind is NodeKind.MAPPING

    @property
    def raw_value(self) -> Any:
        """Project the node back to plain dicts, lists and scalars."""
        if self.kind is NodeKind.SCALAR:
            return self.value
        if self.kind is NodeKind.SEQUENCE:
            return [child.raw_value for child in self.value]
        if self.kind is NodeKind.MAPPING:
            return {key: child.raw_value for key, child in self.value.items()}
        return None

    def copy(self) -> "ConfigNode":
        if self.kind is NodeKind.SEQUENCE:
            return ConfigNode.sequence([child.copy() for child in self.value])
        if self.kind is NodeKind.MAPPING:
            return ConfigNode.mapping(
                {key: child.copy() for key, child in self.value.items()}
            )
        return ConfigNode(self.kind, self.value)

    def replace_with(self, other: "ConfigNode") -> None:
        """Take over ``other``'s shape and contents in place."""
        self.kind = other.kind
        self.value = other.value

    def merge(self, other: "ConfigNode") -> "ConfigNode":
        """Merge ``other`` into this node, ``other`` winning on conflicts.

        Only two mappings merge recursively: keys present in both are merged
        child by child, keys only in ``other`` are adopted as is and keys only
        in ``self`` are kept. Any other combination of shapes replaces this
        node wholesale with ``other``; sequences are never merged
        element-wise. An empty ``other`` leaves this node untouched.

        Args:
            other: The node loaded later. Its subtrees move into this tree.

        Returns:
            ``self``, to allow chaining.
        """
        if other.kind is NodeKind.EMPTY:
            return self
        if self.kind is NodeKind.MAPPING and other.kind is NodeKind.MAPPING:
            mine: Dict[str, ConfigNode] = self.value
            for key, theirs in other.value.items():
                if key in mine:
                    mine[key].merge(theirs)
                else:
                    mine[key] = theirs
            return self
        self.replace_with(other)
        return self

