"""Syntax tree serialization: JSON round-trip for erlpretty nodes.

Converts typed syntax trees to/from JSON-compatible dicts. This is the
hand-over format for parsers living outside Python: a parser emits the
JSON, erlpretty decodes and formats it.

All output is deterministic (sorted keys).

Example:
    from erlpretty.serialization import to_json, from_json

    json_str = to_json(tree)
    restored = from_json(json_str)
    assert tree == restored

Error payloads of markers survive the round trip except that JSON has no
tuples: any list inside a payload comes back as a tuple.

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

import json
from dataclasses import fields
from typing import Any

from erlpretty.errors import SerializationError
from erlpretty.location import SourceLocation
from erlpretty.nodes import NODE_TYPES, ErrorInfo, Node, Placement


def to_dict(node: Node) -> dict[str, Any]:
    """Convert a syntax tree node to a JSON-compatible dict.

    Includes a ``_type`` discriminator field for deserialization.
    Recursively serializes child nodes, locations and error descriptors.
    Attached comments and unknown locations are omitted to keep the output
    small.

    Args:
        node: Any erlpretty syntax tree node.

    Returns:
        Dict with ``_type`` and the node fields.

    """
    result: dict[str, Any] = {"_type": type(node).__name__}

    for f in fields(node):
        value = getattr(node, f.name)
        if f.name == "comments" and not value:
            continue
        if f.name == "location" and not value.is_known:
            continue
        result[f.name] = _serialize_value(value)

    return result


def _serialize_value(value: Any) -> Any:
    """Serialize a single field value."""
    if isinstance(value, Node):
        return to_dict(value)
    if isinstance(value, SourceLocation):
        return {
            "_type": "SourceLocation",
            "line": value.line,
            "column": value.column,
            "source_file": value.source_file,
        }
    if isinstance(value, ErrorInfo):
        return {
            "_type": "ErrorInfo",
            "line": value.line,
            "module": value.module,
            "term": _serialize_value(value.term),
        }
    if isinstance(value, Placement):
        return value.value
    if isinstance(value, (tuple, list)):
        return [_serialize_value(item) for item in value]
    if isinstance(value, dict):
        items = [[_serialize_value(k), _serialize_value(v)] for k, v in value.items()]
        return {"_type": "Map", "items": items}
    # Primitives: str, int, float, bool, None
    return value


def from_dict(data: dict[str, Any]) -> Node:
    """Reconstruct a typed syntax tree node from a dict.

    Uses the ``_type`` discriminator to determine the node class.

    Args:
        data: Dict with ``_type`` and node fields (as produced by to_dict).

    Returns:
        Typed syntax tree node (frozen dataclass).

    Raises:
        SerializationError: If ``_type`` is missing or unknown, or the
            fields do not fit the node class.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized node"
        raise SerializationError(msg)

    node_cls = NODE_TYPES.get(type_name)
    if node_cls is None:
        msg = f"Unknown node type: {type_name!r}"
        raise SerializationError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(node_cls):
        if f.name not in data:
            continue
        raw = data[f.name]
        if f.name == "placement":
            kwargs[f.name] = _deserialize_placement(raw)
        else:
            kwargs[f.name] = _deserialize_value(raw)

    try:
        return node_cls(**kwargs)
    except TypeError as e:
        msg = f"Cannot build {type_name}: {e}"
        raise SerializationError(msg) from e


def _deserialize_placement(value: Any) -> Placement:
    try:
        return Placement(value)
    except ValueError:
        msg = f"Unknown comment placement: {value!r}"
        raise SerializationError(msg) from None


def _deserialize_value(value: Any) -> Any:
    """Deserialize a single field value."""
    if isinstance(value, dict):
        type_name = value.get("_type")
        if type_name == "SourceLocation":
            return SourceLocation(
                line=value["line"],
                column=value.get("column", 0),
                source_file=value.get("source_file"),
            )
        if type_name == "ErrorInfo":
            return ErrorInfo(
                line=value["line"],
                module=value["module"],
                term=_deserialize_value(value.get("term")),
            )
        if type_name == "Map":
            return {
                _deserialize_value(k): _deserialize_value(v) for k, v in value["items"]
            }
        if type_name is not None:
            return from_dict(value)
        return value
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def to_json(node: Node, *, indent: int | None = None) -> str:
    """Serialize a syntax tree to a JSON string.

    Output is deterministic (sorted keys).

    Args:
        node: Tree to serialize.
        indent: JSON indentation level (None for compact).

    Returns:
        JSON string.

    """
    return json.dumps(to_dict(node), sort_keys=True, indent=indent)


def from_json(data: str) -> Node:
    """Deserialize a syntax tree from a JSON string.

    Args:
        data: JSON string (as produced by to_json).

    Returns:
        Root node of the tree.

    Raises:
        SerializationError: If the JSON is invalid or is not a node.

    """
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON: {e}"
        raise SerializationError(msg) from e
    if not isinstance(raw, dict):
        msg = f"Expected a serialized node, got {type(raw).__name__}"
        raise SerializationError(msg)
    return from_dict(raw)


__all__ = ["from_dict", "from_json", "to_dict", "to_json"]
