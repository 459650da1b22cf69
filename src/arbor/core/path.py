"""Delimited path addressing over a ConfigNode tree."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .node import ConfigNode, NodeKind

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = ":"

_INDEX = re.compile(r"[0-9]+")


def parse_index(segment: str) -> Optional[int]:
    """Return ``segment`` as a non-negative index, or None if it is not one."""
    if _INDEX.fullmatch(segment) is None:
        return None
    return int(segment)


@dataclass(frozen=True)
class PathAddress:
    """A parsed configuration path such as ``database:replicas:0:host``.

    Segments are opaque keys. A segment made of digits is used as a list
    index only when the node being navigated is a sequence; under a mapping
    it is a literal key.
    """

    segments: Tuple[str, ...]
    separator: str = DEFAULT_SEPARATOR

    @classmethod
    def parse(cls, path: str, separator: str = DEFAULT_SEPARATOR) -> "PathAddress":
        if not separator:
            raise ValueError("Path separator must be a non-empty string")
        return cls(segments=tuple(path.split(separator)), separator=separator)

    def __str__(self) -> str:
        return self.separator.join(self.segments)

    @property
    def head(self) -> str:
        return self.segments[0]

    @property
    def tail(self) -> Optional["PathAddress"]:
        if len(self.segments) == 1:
            return None
        return PathAddress(self.segments[1:], self.separator)

    def resolve(self, node: ConfigNode) -> Optional[ConfigNode]:
        """Find the node this path points to.

        Partial paths return whole subtrees. Any segment that cannot be
        followed (missing key, out of range index, scalar in the way) makes
        the lookup return None.
        """
        current: Optional[ConfigNode] = node
        for segment in self.segments:
            current = _child(current, segment)
            if current is None:
                return None
        return current

    def assign(self, node: ConfigNode, new_node: Optional[ConfigNode]) -> None:
        """Write ``new_node`` at this path below ``node``, in place.

        Missing mapping entries are created as empty mappings on the way
        down. A sequence can only be addressed by an existing index or by its
        current length, which appends one element; any other index is
        ignored. A scalar or empty node that must be walked through is turned
        into a mapping, dropping its previous value. Assigning None or an
        empty node does nothing.
        """
        if new_node is None or new_node.is_empty:
            return
        head, tail = self.head, self.tail

        if node.kind is NodeKind.SEQUENCE:
            items = node.value
            index = parse_index(head)
            if index is None:
                return
            if index < len(items):
                if tail is None:
                    items[index] = new_node
                else:
                    tail.assign(items[index], new_node)
            elif index == len(items):
                items.append(_fresh_child(tail, new_node))
            return

        if node.kind is NodeKind.MAPPING:
            children = node.value
            if tail is None:
                children[head] = new_node
                return
            if head not in children:
                children[head] = ConfigNode.mapping()
            tail.assign(children[head], new_node)
            return

        if node.kind is NodeKind.SCALAR:
            logger.debug("Replacing scalar %r with a mapping to write %s", node.value, self)
        node.replace_with(ConfigNode.mapping({head: _fresh_child(tail, new_node)}))


def _child(node: Optional[ConfigNode], segment: str) -> Optional[ConfigNode]:
    if node is None:
        return None
    if node.kind is NodeKind.SEQUENCE:
        index = parse_index(segment)
        if index is None or index >= len(node.value):
            return None
        return node.value[index]
    if node.kind is NodeKind.MAPPING:
        return node.value.get(segment)
    return None


def _fresh_child(tail: Optional[PathAddress], new_node: ConfigNode) -> ConfigNode:
    if tail is None:
        return new_node
    child = ConfigNode.mapping()
    tail.assign(child, new_node)
    return child
