"""Syntax tree visitor, transformer and term lifting.

Provides a base visitor class with name-based dispatch, an immutable
transform function for rewriting frozen trees, and :func:`abstract`, which
turns plain Python values into syntax nodes.

Example, collecting all called function names:

    class CallCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.calls: list[Node] = []

        def visit_application(self, node: Application) -> None:
            self.calls.append(node.operator)

    collector = CallCollector()
    collector.visit(forms)

Example, renaming an atom everywhere:

    def rename(node: Node) -> Node:
        if isinstance(node, Atom) and node.value == "old":
            return dataclasses.replace(node, value="new")
        return node

    new_forms = transform(forms, rename)

Thread Safety:
    Visitors are NOT shared across threads by default (they may accumulate
    mutable state). Create a new visitor per thread. The transform function
    is pure and safe to call from any thread.

"""

import dataclasses
import re
from collections.abc import Callable, Iterator
from typing import Any

from erlpretty.nodes import (
    Atom,
    ErrorInfo,
    Float,
    Integer,
    List,
    MapExpr,
    MapFieldAssoc,
    Nil,
    Node,
    String,
    Text,
    Tuple,
)

# Fields every node has that never hold children.
_META_FIELDS = frozenset({"comments", "location"})

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _method_name(node: Node) -> str:
    return "visit_" + _CAMEL_BOUNDARY.sub("_", type(node).__name__).lower()


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct child nodes of ``node`` in field order."""
    for f in dataclasses.fields(node):
        if f.name in _META_FIELDS:
            continue
        value = getattr(node, f.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, tuple):
            for item in value:
                if isinstance(item, Node):
                    yield item


class BaseVisitor[T]:
    """Base syntax tree visitor.

    Subclass and add ``visit_<node_type>`` methods (``visit_case_expr``,
    ``visit_atom``...) for the node types you care about. Unhandled node
    types fall through to ``visit_default``. Children are walked
    automatically after the ``visit_*`` call.

    """

    def visit(self, node: Node) -> T:
        """Dispatch to the matching ``visit_*`` method, then walk children."""
        method = getattr(self, _method_name(node), None)
        result = method(node) if method is not None else self.visit_default(node)
        for child in iter_children(node):
            self.visit(child)
        return result

    def visit_default(self, node: Node) -> T:
        """Called for node types without a specific ``visit_*`` method."""
        return None  # type: ignore[return-value]


def transform[N: Node](node: N, fn: Callable[[Node], Node | None]) -> N:
    """Apply a function to every node in the tree, returning a new tree.

    The function ``fn`` is called bottom-up: children are transformed first,
    then the parent is transformed with its new children.

    Return ``None`` from ``fn`` to drop a node from a sequence of children
    (or to clear an optional child). The root cannot be removed.

    Raises:
        TypeError: If ``fn`` removes the root.

    """
    result = _transform_node(node, fn)
    if result is None:
        msg = "transform fn must return a node for the root (cannot remove root)"
        raise TypeError(msg)
    return result  # type: ignore[return-value]


def _transform_node(node: Node, fn: Callable[[Node], Node | None]) -> Node | None:
    return fn(_transform_children(node, fn))


def _transform_children(node: Node, fn: Callable[[Node], Node | None]) -> Node:
    changes: dict[str, Any] = {}
    for f in dataclasses.fields(node):
        if f.name in _META_FIELDS:
            continue
        value = getattr(node, f.name)
        if isinstance(value, Node):
            new_value = _transform_node(value, fn)
            if new_value is not value:
                changes[f.name] = new_value
        elif isinstance(value, tuple) and any(isinstance(v, Node) for v in value):
            new_items = tuple(
                result
                for item in value
                if (result := _transform_node(item, fn) if isinstance(item, Node) else item)
                is not None
            )
            if new_items != value:
                changes[f.name] = new_items
    if changes:
        return dataclasses.replace(node, **changes)
    return node


def abstract(term: Any) -> Node:
    """Lift a plain Python value into the syntax tree that denotes it.

    Integers, floats, strings, booleans (as atoms), None (as
    ``undefined``), tuples, lists, dicts (as maps) and ``ErrorInfo`` records
    are supported; nodes are returned unchanged. Anything else is shown
    verbatim through its ``repr``.

    Example:
        >>> abstract((1, "two", [True]))
        Tuple(elements=(Integer(value=1, ...), String(value='two', ...), ...))

    """
    match term:
        case Node():
            return term
        case bool():
            return Atom("true" if term else "false")
        case None:
            return Atom("undefined")
        case int():
            return Integer(term)
        case float():
            return Float(term)
        case str():
            return String(term)
        case ErrorInfo(line=line, module=module, term=inner):
            return Tuple((Integer(line), Atom(module), abstract(inner)))
        case tuple():
            return Tuple(tuple(abstract(item) for item in term))
        case list():
            if not term:
                return Nil()
            return List(tuple(abstract(item) for item in term))
        case dict():
            return MapExpr(
                tuple(MapFieldAssoc(abstract(k), abstract(v)) for k, v in term.items())
            )
        case _:
            return Text(repr(term))


__all__ = ["BaseVisitor", "abstract", "iter_children", "transform"]
