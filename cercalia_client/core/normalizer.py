"""
Normalization utilities for Cercalia JSON responses.

The JSON format was derived from XML, so the same field shows up in several
shapes depending on endpoint and version:
- attributes: {"@id": "5"} or {"id": "5"}
- text values: {"$valor": "X"}, {"value": "X"}, {"@value": "X"} or just "X"
- lists of one element collapse to a bare object

All helpers return None when a value cannot be determined. They never raise
and never substitute defaults.
"""

import json
from enum import Enum
from typing import Any, Iterator, Optional

# Probe order for text values
VALUE_KEYS = ("$valor", "value", "@value")


class NodeKind(str, Enum):
    """Shape of a decoded JSON node."""
    NULL = "null"
    SCALAR = "scalar"
    OBJECT = "object"
    ARRAY = "array"


def node_kind(node: Any) -> NodeKind:
    """Classify a decoded JSON node."""
    if node is None:
        return NodeKind.NULL
    if isinstance(node, dict):
        return NodeKind.OBJECT
    if isinstance(node, list):
        return NodeKind.ARRAY
    return NodeKind.SCALAR


def node_text(node: Any) -> Optional[str]:
    """
    Render a node as text the way the JSON document spells it.

    Booleans become "true"/"false", numbers keep their JSON spelling and
    containers are re-encoded as compact JSON.
    """
    kind = node_kind(node)
    if kind is NodeKind.NULL:
        return None
    if kind is NodeKind.SCALAR:
        if isinstance(node, bool):
            return "true" if node else "false"
        if isinstance(node, float):
            return repr(node)
        return str(node)
    return json.dumps(node, ensure_ascii=False, separators=(",", ":"))


def get_child(node: Any, key: str) -> Any:
    """Return child `key` of an object node, or None."""
    if node_kind(node) is not NodeKind.OBJECT:
        return None
    return node.get(key)


def get_attr(node: Any, key: str) -> Optional[str]:
    """
    Read an attribute-like field.

    Tries "@key" first, then a bare "key" whose value is a scalar.

    Args:
        node: Decoded JSON node
        key: Attribute name without the "@" prefix

    Returns:
        Attribute text or None
    """
    if node_kind(node) is not NodeKind.OBJECT:
        return None

    prefixed = node.get("@" + key)
    if prefixed is not None:
        return node_text(prefixed)

    bare = node.get(key)
    if node_kind(bare) is NodeKind.SCALAR:
        return node_text(bare)

    return None


def get_value(node: Any) -> Optional[str]:
    """
    Read a text value.

    A scalar node is its own value. Object nodes are probed for "$valor",
    "value" and "@value" in that order.

    Args:
        node: Decoded JSON node

    Returns:
        Value text or None
    """
    kind = node_kind(node)
    if kind is NodeKind.NULL:
        return None
    if kind is NodeKind.SCALAR:
        return node_text(node)
    if kind is NodeKind.ARRAY:
        return None

    for key in VALUE_KEYS:
        child = node.get(key)
        if child is not None:
            return node_text(child)

    return None


def array_size(node: Any) -> int:
    """Size of a node seen as a list; a bare node counts as one element."""
    kind = node_kind(node)
    if kind is NodeKind.NULL:
        return 0
    if kind is NodeKind.ARRAY:
        return len(node)
    return 1


def array_element(node: Any, index: int) -> Any:
    """Element `index` of a node seen as a list, or None when out of range."""
    if index < 0:
        return None
    kind = node_kind(node)
    if kind is NodeKind.NULL:
        return None
    if kind is NodeKind.ARRAY:
        return node[index] if index < len(node) else None
    return node if index == 0 else None


def iter_array(node: Any) -> Iterator[Any]:
    """Iterate a node seen as a list, skipping null elements."""
    for index in range(array_size(node)):
        element = array_element(node, index)
        if element is not None:
            yield element
