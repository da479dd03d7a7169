"""
erlpretty: pretty printer for Erlang syntax trees.

Turns a typed Erlang syntax tree into source text that fits a paper and
ribbon width, keeping comments, operator precedence and literal spelling
intact. Parsing is not part of the package: trees come from an external
parser, either built directly or decoded from JSON.

Quick Start:
    >>> from erlpretty import Application, Atom, InfixExpr, Integer, Operator, format
    >>> tree = Application(Atom("foo"), (InfixExpr(Integer(1), Operator("+"), Integer(2)),))
    >>> format(tree)
    'foo(1 + 2)'

    >>> # Narrower output, or the classic ribbon width
    >>> format(tree, paper=40)
    'foo(1 + 2)'
    >>> format(tree, FormatConfig.for_profile("classic"))
    'foo(1 + 2)'

    >>> # Or reuse one configured formatter
    >>> formatter = Formatter(FormatConfig(paper=100))
    >>> formatter(tree)
    'foo(1 + 2)'

Trees from other tools:
    >>> from erlpretty import from_json
    >>> format(from_json(json_text))

Installation:
    pip install erlpretty            # zero runtime dependencies
"""

from collections.abc import Iterable, Mapping
from dataclasses import fields, replace
from typing import Any

from erlpretty.config import (
    FormatConfig,
    TextEncoding,
    format_config_context,
    get_format_config,
    reset_format_config,
    set_format_config,
)
from erlpretty.errors import (
    ConfigError,
    ErlprettyError,
    MalformedAttributeError,
    RenderError,
    SerializationError,
    UnknownNodeError,
    UnknownOperatorError,
)
from erlpretty.layout import Document, resolve
from erlpretty.location import SourceLocation
from erlpretty.nodes import (
    NODE_TYPES,
    AnnotatedType,
    Application,
    ArityQualifier,
    Atom,
    Attribute,
    Binary,
    BinaryComp,
    BinaryField,
    BinaryGenerator,
    BitstringType,
    BlockExpr,
    CaseExpr,
    CatchExpr,
    Char,
    ClassQualifier,
    Clause,
    Comment,
    Conjunction,
    Constraint,
    ConstrainedFunctionType,
    Disjunction,
    EofMarker,
    ErrorInfo,
    ErrorMarker,
    Float,
    FormList,
    Function,
    FunctionType,
    FunExpr,
    FunType,
    Generator,
    IfExpr,
    ImplicitFun,
    InfixExpr,
    Integer,
    IntegerRangeType,
    List,
    ListComp,
    Macro,
    MapExpr,
    MapFieldAssoc,
    MapFieldExact,
    MapType,
    MapTypeAssoc,
    MapTypeExact,
    MatchExpr,
    ModuleQualifier,
    NamedFunExpr,
    Nil,
    Node,
    Operator,
    Parentheses,
    Placement,
    PrefixExpr,
    ReceiveExpr,
    RecordAccess,
    RecordExpr,
    RecordField,
    RecordIndexExpr,
    RecordType,
    RecordTypeField,
    SizeQualifier,
    String,
    Text,
    TryExpr,
    Tuple,
    TupleType,
    TypeApplication,
    TypedRecordField,
    TypeUnion,
    Underscore,
    UserTypeApplication,
    Variable,
    WarningMarker,
)
from erlpretty.renderers import ClauseKind, ErlangRenderer, RenderContext, SyntaxRenderer
from erlpretty.renderers.erlang import ErrorFormatter
from erlpretty.serialization import from_dict, from_json, to_dict, to_json
from erlpretty.visitor import BaseVisitor, abstract, transform

__version__ = "0.1.0"

_OPTION_NAMES = frozenset(f.name for f in fields(FormatConfig))


def _resolve_config(config: FormatConfig | None, options: dict[str, Any]) -> FormatConfig:
    """Pick the explicit or active config and apply keyword overrides."""
    base = config if config is not None else get_format_config()
    if not options:
        return base
    unknown = sorted(set(options) - _OPTION_NAMES)
    if unknown:
        raise ConfigError(f"unknown format options: {', '.join(unknown)}")
    return replace(base, **options)


def layout(node: Node, config: FormatConfig | None = None, **options: Any) -> Document:
    """Translate a syntax tree into a layout document.

    The document can be embedded in a larger document or resolved later
    with :func:`erlpretty.layout.resolve`. ``paper`` and ``ribbon`` only
    matter at resolve time.

    Args:
        node: Root of the syntax tree
        config: Format configuration (the active context config if None)
        **options: Overrides for single config fields (``paper``,
            ``ribbon``, ``break_indent``, ``sub_indent``, ``encoding``)

    Returns:
        Layout document

    Raises:
        ConfigError: For unknown or invalid options.
        RenderError: For nodes the renderer cannot translate.

    """
    return ErlangRenderer(_resolve_config(config, options)).layout(node)


def format(node: Node, config: FormatConfig | None = None, **options: Any) -> str:
    """Render a syntax tree as Erlang source text.

    Args:
        node: Root of the syntax tree
        config: Format configuration (the active context config if None)
        **options: Overrides for single config fields (``paper``,
            ``ribbon``, ``break_indent``, ``sub_indent``, ``encoding``)

    Returns:
        Source text without a trailing newline

    Example:
        >>> format(Tuple((Atom("ok"), Variable("Value"))))
        '{ok, Value}'

    """
    return ErlangRenderer(_resolve_config(config, options)).format(node)


class Formatter:
    """Reusable formatter bound to one configuration.

    Usage:
        >>> formatter = Formatter(FormatConfig(paper=72))
        >>> formatter(tree)
        >>> formatter.format_many([tree1, tree2])

        >>> # Describe compiler errors kept in the tree
        >>> formatter = Formatter(error_formatters={"erl_lint": describe})

    Thread Safety:
        Holds only immutable configuration. Safe to share across threads.

    """

    __slots__ = ("_renderer",)

    def __init__(
        self,
        config: FormatConfig | None = None,
        *,
        error_formatters: Mapping[str, ErrorFormatter] | None = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            config: Format configuration (the active context config if None)
            error_formatters: Message formatters for error and warning
                markers, keyed by the module named in their ``ErrorInfo``
        """
        self._renderer = ErlangRenderer(config, error_formatters)

    @property
    def config(self) -> FormatConfig:
        return self._renderer.config

    def __call__(self, node: Node) -> str:
        """Render ``node`` as source text."""
        return self._renderer.format(node)

    def layout(self, node: Node) -> Document:
        """Translate ``node`` into a layout document."""
        return self._renderer.layout(node)

    def format_many(self, nodes: Iterable[Node]) -> list[str]:
        """Render several trees with the same configuration."""
        return [self._renderer.format(node) for node in nodes]


__all__ = [
    "NODE_TYPES",
    # Nodes
    "AnnotatedType",
    "Application",
    "ArityQualifier",
    "Atom",
    "Attribute",
    "Binary",
    "BinaryComp",
    "BinaryField",
    "BinaryGenerator",
    "BitstringType",
    "BlockExpr",
    "CaseExpr",
    "CatchExpr",
    "Char",
    "ClassQualifier",
    "Clause",
    "Comment",
    "Conjunction",
    "Constraint",
    "ConstrainedFunctionType",
    "Disjunction",
    "EofMarker",
    "ErrorInfo",
    "ErrorMarker",
    "Float",
    "FormList",
    "FunExpr",
    "FunType",
    "Function",
    "FunctionType",
    "Generator",
    "IfExpr",
    "ImplicitFun",
    "InfixExpr",
    "Integer",
    "IntegerRangeType",
    "List",
    "ListComp",
    "Macro",
    "MapExpr",
    "MapFieldAssoc",
    "MapFieldExact",
    "MapType",
    "MapTypeAssoc",
    "MapTypeExact",
    "MatchExpr",
    "ModuleQualifier",
    "NamedFunExpr",
    "Nil",
    "Node",
    "Operator",
    "Parentheses",
    "Placement",
    "PrefixExpr",
    "ReceiveExpr",
    "RecordAccess",
    "RecordExpr",
    "RecordField",
    "RecordIndexExpr",
    "RecordType",
    "RecordTypeField",
    "SizeQualifier",
    "String",
    "Text",
    "TryExpr",
    "Tuple",
    "TupleType",
    "TypeApplication",
    "TypeUnion",
    "TypedRecordField",
    "Underscore",
    "UserTypeApplication",
    "Variable",
    "WarningMarker",
    # Config
    "FormatConfig",
    "TextEncoding",
    "format_config_context",
    "get_format_config",
    "reset_format_config",
    "set_format_config",
    # Errors
    "ConfigError",
    "ErlprettyError",
    "MalformedAttributeError",
    "RenderError",
    "SerializationError",
    "UnknownNodeError",
    "UnknownOperatorError",
    # Rendering
    "ClauseKind",
    "Document",
    "ErlangRenderer",
    "ErrorFormatter",
    "Formatter",
    "RenderContext",
    "SourceLocation",
    "SyntaxRenderer",
    "format",
    "layout",
    "resolve",
    # Serialization and tree utilities
    "BaseVisitor",
    "abstract",
    "from_dict",
    "from_json",
    "to_dict",
    "to_json",
    "transform",
    "__version__",
]
