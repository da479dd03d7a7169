"""Typed syntax tree nodes for Erlang source.

All nodes are frozen dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: Safe sharing across threads
- Memory efficiency: __slots__ reduces memory footprint
- Pattern matching: the renderer dispatches with a single match statement

Trees are produced by an external parser (or decoded from JSON, see
:mod:`erlpretty.serialization`) and are only read by the renderer.

Every node carries two keyword-only fields: ``comments``, the comments
attached to it (each tagged leading or trailing), and ``location``.

Node Groups:
Node (base)
├── Literals: Variable, Atom, Integer, Float, Char, String, Nil,
│   Underscore, Text, Operator
├── Data: Tuple, List, Binary, BinaryField, SizeQualifier, MapExpr,
│   MapFieldAssoc, MapFieldExact, RecordExpr, RecordField, RecordAccess,
│   RecordIndexExpr, TypedRecordField
├── Expressions: InfixExpr, PrefixExpr, MatchExpr, Application,
│   ModuleQualifier, ArityQualifier, ImplicitFun, Parentheses, CatchExpr,
│   BlockExpr, CaseExpr, IfExpr, ReceiveExpr, TryExpr, ClassQualifier,
│   FunExpr, NamedFunExpr, ListComp, BinaryComp, Generator,
│   BinaryGenerator, Conjunction, Disjunction, Macro
├── Forms: Clause, Function, Attribute, FormList
├── Types: AnnotatedType, TypeApplication, UserTypeApplication,
│   BitstringType, FunType, FunctionType, ConstrainedFunctionType,
│   Constraint, MapType, MapTypeAssoc, MapTypeExact, IntegerRangeType,
│   RecordType, RecordTypeField, TupleType, TypeUnion
└── Markers: Comment, ErrorMarker, WarningMarker, EofMarker

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from erlpretty.location import UNKNOWN_LOCATION, SourceLocation


class Placement(Enum):
    """Where an attached comment sits relative to its node."""

    LEADING = "leading"
    TRAILING = "trailing"


# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all syntax tree nodes."""

    comments: tuple[Comment, ...] = field(default=(), kw_only=True)
    location: SourceLocation = field(default=UNKNOWN_LOCATION, kw_only=True)

    @property
    def leading_comments(self) -> tuple[Comment, ...]:
        return tuple(c for c in self.comments if c.placement is Placement.LEADING)

    @property
    def trailing_comments(self) -> tuple[Comment, ...]:
        return tuple(c for c in self.comments if c.placement is Placement.TRAILING)


# =============================================================================
# Literals
# =============================================================================


@dataclass(frozen=True, slots=True)
class Variable(Node):
    """Variable name.

    Erlang: Foo, _Bar, _

    """

    name: str


@dataclass(frozen=True, slots=True)
class Atom(Node):
    """Atom, stored unquoted; quoting is decided when rendering.

    Erlang: ok, 'hello world'

    """

    value: str


@dataclass(frozen=True, slots=True)
class Integer(Node):
    """Integer literal.

    ``literal`` keeps the source spelling (``16#ff``, ``$a`` style bases)
    when the parser provides it; otherwise ``value`` is printed in decimal.

    """

    value: int
    literal: str | None = None


@dataclass(frozen=True, slots=True)
class Float(Node):
    """Float literal. Rendered in tidied scientific notation.

    Erlang: 1.5, 2.0e-3

    """

    value: float


@dataclass(frozen=True, slots=True)
class Char(Node):
    """Character literal holding a single code point.

    Erlang: $a, $\\n

    """

    value: str


@dataclass(frozen=True, slots=True)
class String(Node):
    """String literal, stored unescaped.

    Erlang: "hello"

    """

    value: str


@dataclass(frozen=True, slots=True)
class Nil(Node):
    """The empty list ``[]``."""


@dataclass(frozen=True, slots=True)
class Underscore(Node):
    """The universal pattern ``_``."""


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Verbatim source text, printed as is."""

    text: str


@dataclass(frozen=True, slots=True)
class Operator(Node):
    """Operator token of an infix or prefix expression.

    Erlang: +, andalso, !

    """

    name: str


# =============================================================================
# Data constructors
# =============================================================================


@dataclass(frozen=True, slots=True)
class Tuple(Node):
    """Tuple.

    Erlang: {A, B, C}

    """

    elements: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class List(Node):
    """List with an optional tail.

    Erlang: [A, B], [A, B | Tail]

    A ``tail`` that is itself a list (or ``[]``) is folded into the prefix by
    :meth:`compact`; only a real improper tail is printed after ``|``.

    """

    elements: tuple[Node, ...]
    tail: Node | None = None

    def compact(self) -> List:
        """Return the equivalent list with nested list tails merged."""
        elements = list(self.elements)
        tail = self.tail
        while isinstance(tail, List) and not tail.comments:
            elements.extend(tail.elements)
            tail = tail.tail
        if isinstance(tail, Nil) and not tail.comments:
            tail = None
        if tail is self.tail:
            return self
        return List(tuple(elements), tail, comments=self.comments, location=self.location)


@dataclass(frozen=True, slots=True)
class Binary(Node):
    """Bit string.

    Erlang: <<A:8, B/binary>>

    """

    fields: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class BinaryField(Node):
    """Segment of a bit string with optional type specifiers.

    Erlang: X:16/little-unsigned

    """

    body: Node
    types: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class SizeQualifier(Node):
    """Segment value with a size.

    Erlang: X:16

    """

    body: Node
    size: Node


@dataclass(frozen=True, slots=True)
class MapExpr(Node):
    """Map construction or update.

    Erlang: #{a => 1}, M#{a := 2}

    """

    fields: tuple[Node, ...]
    argument: Node | None = None


@dataclass(frozen=True, slots=True)
class MapFieldAssoc(Node):
    """Map association ``Key => Value``."""

    name: Node
    value: Node


@dataclass(frozen=True, slots=True)
class MapFieldExact(Node):
    """Map exact association ``Key := Value``."""

    name: Node
    value: Node


@dataclass(frozen=True, slots=True)
class RecordExpr(Node):
    """Record construction or update.

    Erlang: #rec{a = 1}, R#rec{a = 2}

    """

    type: Node
    fields: tuple[Node, ...]
    argument: Node | None = None


@dataclass(frozen=True, slots=True)
class RecordField(Node):
    """Record field, with a value in expressions and definitions.

    Erlang: a = 1, b

    """

    name: Node
    value: Node | None = None


@dataclass(frozen=True, slots=True)
class RecordAccess(Node):
    """Record field access.

    Erlang: R#rec.field

    """

    argument: Node
    type: Node
    field: Node


@dataclass(frozen=True, slots=True)
class RecordIndexExpr(Node):
    """Record field index.

    Erlang: #rec.field

    """

    type: Node
    field: Node


@dataclass(frozen=True, slots=True)
class TypedRecordField(Node):
    """Record field declaration with a type.

    Erlang: name = "" :: string()

    """

    body: Node
    type: Node


# =============================================================================
# Expressions
# =============================================================================


@dataclass(frozen=True, slots=True)
class InfixExpr(Node):
    """Binary operator expression.

    Erlang: A + B, X andalso Y

    """

    left: Node
    operator: Node
    right: Node


@dataclass(frozen=True, slots=True)
class PrefixExpr(Node):
    """Unary operator expression.

    Erlang: -X, not Y, bnot Z

    """

    operator: Node
    argument: Node


@dataclass(frozen=True, slots=True)
class MatchExpr(Node):
    """Pattern match.

    Erlang: {ok, X} = Y

    """

    pattern: Node
    body: Node


@dataclass(frozen=True, slots=True)
class Application(Node):
    """Function call.

    Erlang: foo(1, 2), lists:map(F, L)

    """

    operator: Node
    arguments: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class ModuleQualifier(Node):
    """Remote name.

    Erlang: lists:map

    """

    module: Node
    body: Node


@dataclass(frozen=True, slots=True)
class ArityQualifier(Node):
    """Function name with arity.

    Erlang: foo/2

    """

    body: Node
    arity: Node


@dataclass(frozen=True, slots=True)
class ImplicitFun(Node):
    """Function reference.

    Erlang: fun foo/2, fun lists:map/2

    """

    name: Node


@dataclass(frozen=True, slots=True)
class Parentheses(Node):
    """Explicit parentheses kept from the source."""

    body: Node


@dataclass(frozen=True, slots=True)
class CatchExpr(Node):
    """Old-style catch.

    Erlang: catch foo()

    """

    body: Node


@dataclass(frozen=True, slots=True)
class BlockExpr(Node):
    """begin ... end block."""

    body: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class CaseExpr(Node):
    """case Expr of Clauses end."""

    argument: Node
    clauses: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class IfExpr(Node):
    """if Clauses end. Clauses have guards but no patterns."""

    clauses: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class ReceiveExpr(Node):
    """receive Clauses [after Timeout -> Action] end."""

    clauses: tuple[Node, ...]
    timeout: Node | None = None
    action: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class TryExpr(Node):
    """try Body [of Clauses] [catch Handlers] [after After] end."""

    body: tuple[Node, ...]
    clauses: tuple[Node, ...] = ()
    handlers: tuple[Node, ...] = ()
    after: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class ClassQualifier(Node):
    """Exception pattern in a catch clause.

    Erlang: error:Reason, throw:X:Stack

    A ``stacktrace`` of None (or the variable ``_``) is not printed.

    """

    exception_class: Node
    body: Node
    stacktrace: Node | None = None


@dataclass(frozen=True, slots=True)
class FunExpr(Node):
    """Anonymous function.

    Erlang: fun (X) -> X + 1 end

    """

    clauses: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class NamedFunExpr(Node):
    """Named anonymous function.

    Erlang: fun Fact(0) -> 1; Fact(N) -> N * Fact(N - 1) end

    """

    name: Node
    clauses: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class ListComp(Node):
    """List comprehension.

    Erlang: [X * 2 || X <- L, X > 0]

    """

    template: Node
    body: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class BinaryComp(Node):
    """Binary comprehension.

    Erlang: << <<X>> || <<X>> <= B >>

    """

    template: Node
    body: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Generator(Node):
    """List generator ``Pattern <- Expr``."""

    pattern: Node
    body: Node


@dataclass(frozen=True, slots=True)
class BinaryGenerator(Node):
    """Binary generator ``Pattern <= Expr``."""

    pattern: Node
    body: Node


@dataclass(frozen=True, slots=True)
class Conjunction(Node):
    """Comma-separated guard tests."""

    body: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Disjunction(Node):
    """Semicolon-separated guard sequences."""

    body: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Macro(Node):
    """Macro use. ``arguments`` is None when written without parentheses.

    Erlang: ?MODULE, ?assertEqual(A, B)

    """

    name: Node
    arguments: tuple[Node, ...] | None = None


# =============================================================================
# Clauses and forms
# =============================================================================


@dataclass(frozen=True, slots=True)
class Clause(Node):
    """Generic clause: patterns, optional guard and body.

    How it is printed depends on the construct it appears in.

    """

    patterns: tuple[Node, ...]
    guard: Node | None
    body: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Function(Node):
    """Function definition."""

    name: Node
    clauses: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Attribute(Node):
    """Module attribute.

    ``arguments`` is None for attributes written without parentheses.
    ``spec``, ``callback``, ``type``, ``opaque``, ``export_type`` and
    ``optional_callbacks`` carry their payload as a single tuple or list,
    in the shape produced by the Erlang parser.

    Erlang: -module(foo). -spec f(integer()) -> ok.

    """

    name: Node
    arguments: tuple[Node, ...] | None = None


@dataclass(frozen=True, slots=True)
class FormList(Node):
    """Sequence of top-level forms, printed separated by blank lines."""

    forms: tuple[Node, ...]


# =============================================================================
# Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class AnnotatedType(Node):
    """Named type ``Name :: Type``."""

    name: Node
    body: Node


@dataclass(frozen=True, slots=True)
class TypeApplication(Node):
    """Built-in or remote type application.

    Erlang: integer(), list(T), dict:dict(K, V)

    """

    name: Node
    arguments: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class UserTypeApplication(Node):
    """Application of a locally defined type."""

    name: Node
    arguments: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class BitstringType(Node):
    """Bit string type ``<<_:M, _:_*N>>``; zero sizes are omitted."""

    m: Node
    n: Node


@dataclass(frozen=True, slots=True)
class FunType(Node):
    """The type ``fun()``."""


@dataclass(frozen=True, slots=True)
class FunctionType(Node):
    """Function type. ``arguments`` of None means any arity, ``(...)``.

    Erlang: fun((integer()) -> ok), fun((...) -> ok)

    """

    arguments: tuple[Node, ...] | None
    return_type: Node


@dataclass(frozen=True, slots=True)
class ConstrainedFunctionType(Node):
    """Function type with constraints.

    Erlang: (T) -> T when T :: atom()

    """

    body: Node
    argument: Node


@dataclass(frozen=True, slots=True)
class Constraint(Node):
    """Type constraint. ``is_subtype`` with a variable prints as ``V :: T``."""

    argument: Node
    body: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class MapType(Node):
    """Map type. ``fields`` of None is ``map()``."""

    fields: tuple[Node, ...] | None


@dataclass(frozen=True, slots=True)
class MapTypeAssoc(Node):
    """Optional map type field ``K => V``."""

    name: Node
    value: Node


@dataclass(frozen=True, slots=True)
class MapTypeExact(Node):
    """Mandatory map type field ``K := V``."""

    name: Node
    value: Node


@dataclass(frozen=True, slots=True)
class IntegerRangeType(Node):
    """Integer range ``Low..High``."""

    low: Node
    high: Node


@dataclass(frozen=True, slots=True)
class RecordType(Node):
    """Record type ``#rec{field :: T}``."""

    name: Node
    fields: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class RecordTypeField(Node):
    """Field of a record type."""

    name: Node
    type: Node


@dataclass(frozen=True, slots=True)
class TupleType(Node):
    """Tuple type. ``elements`` of None is ``tuple()``."""

    elements: tuple[Node, ...] | None


@dataclass(frozen=True, slots=True)
class TypeUnion(Node):
    """Union ``A | B | C``."""

    types: tuple[Node, ...]


# =============================================================================
# Markers
# =============================================================================


@dataclass(frozen=True, slots=True)
class Comment(Node):
    """Comment lines without their first ``%``.

    Used both as a standalone form and attached to other nodes. ``padding``
    is the number of spaces before a trailing comment (None for the
    default); ``placement`` only matters for attached comments.

    """

    lines: tuple[str, ...]
    padding: int | None = None
    placement: Placement = Placement.LEADING


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    """Error descriptor ``{Line, Module, Term}``.

    ``module`` names the formatter that knows how to describe ``term``.

    """

    line: int
    module: str
    term: Any


@dataclass(frozen=True, slots=True)
class ErrorMarker(Node):
    """Parse error kept in the tree, printed as ``** message **``."""

    info: Any


@dataclass(frozen=True, slots=True)
class WarningMarker(Node):
    """Warning kept in the tree, printed as a ``%% WARNING:`` line."""

    info: Any


@dataclass(frozen=True, slots=True)
class EofMarker(Node):
    """End of file. Prints nothing."""


# Every concrete node class, keyed by class name.
NODE_TYPES: dict[str, type[Node]] = {
    cls.__name__: cls
    for cls in (
        Variable, Atom, Integer, Float, Char, String, Nil, Underscore, Text, Operator,
        Tuple, List, Binary, BinaryField, SizeQualifier, MapExpr, MapFieldAssoc,
        MapFieldExact, RecordExpr, RecordField, RecordAccess, RecordIndexExpr,
        TypedRecordField, InfixExpr, PrefixExpr, MatchExpr, Application,
        ModuleQualifier, ArityQualifier, ImplicitFun, Parentheses, CatchExpr,
        BlockExpr, CaseExpr, IfExpr, ReceiveExpr, TryExpr, ClassQualifier, FunExpr,
        NamedFunExpr, ListComp, BinaryComp, Generator, BinaryGenerator, Conjunction,
        Disjunction, Macro, Clause, Function, Attribute, FormList, AnnotatedType,
        TypeApplication, UserTypeApplication, BitstringType, FunType, FunctionType,
        ConstrainedFunctionType, Constraint, MapType, MapTypeAssoc, MapTypeExact,
        IntegerRangeType, RecordType, RecordTypeField, TupleType, TypeUnion,
        Comment, ErrorMarker, WarningMarker, EofMarker,
    )
}
