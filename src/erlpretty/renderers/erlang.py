"""Erlang renderer: translates syntax trees into layout documents.

Every node variant maps to a document built from the algebra in
:mod:`erlpretty.layout`. The translation threads an immutable
:class:`RenderContext` down the tree; it carries the precedence the
enclosing position tolerates and the construct the next clause belongs to.

Parenthesization:
    Each precedence-bearing construct is rendered first and wrapped in
    ``(...)`` afterwards if the context demands a higher precedence than the
    construct's own. Operands get the binding precedence of their side;
    bracketed positions (elements, arguments, bodies) reset it to 0.
    Macros are always treated as precedence 0 because their expansion is
    unknown.

Separators:
    Separators (``,``, ``;``, ``->``, closing brackets) are floating
    documents so that they move in front of a trailing comment instead of
    ending up inside it.

Thread Safety:
    ErlangRenderer holds only its configuration and error formatter
    registry. All per-render state lives in RenderContext values, so one
    instance can be shared by concurrent render calls.

"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from erlpretty.comments import attach_comments, standalone_comment
from erlpretty.config import FormatConfig, get_format_config
from erlpretty.errors import MalformedAttributeError, UnknownNodeError
from erlpretty.layout import (
    Document,
    above,
    beside,
    empty,
    floating,
    follow,
    nest,
    par,
    resolve,
    sep,
    text,
)
from erlpretty.literals import (
    atom_literal,
    char_literal,
    float_text,
    integer_literal,
    string_literal,
    string_segments,
)
from erlpretty.nodes import (
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
from erlpretty.precedence import (
    FUNC_PREC,
    MAX_PREC,
    infix_prec,
    needs_parentheses,
    prefix_prec,
    type_infix_prec,
    type_prefix_prec,
)
from erlpretty.renderers.context import ClauseKind, RenderContext
from erlpretty.utils.logger import get_logger
from erlpretty.visitor import abstract, transform

logger = get_logger(__name__)

# Formats the term of an ErrorInfo into a message.
type ErrorFormatter = Callable[[Any], Any]

_SPEC_ATTRIBUTES = frozenset({"spec", "callback"})
_TYPE_ATTRIBUTES = frozenset({"type", "opaque"})
_NAME_LIST_ATTRIBUTES = frozenset({"export_type", "optional_callbacks"})


# =============================================================================
# Document helpers
# =============================================================================


def _text_float(string: str) -> Document:
    return floating(text(string))


def _parenthesize(doc: Document) -> Document:
    return beside(_text_float("("), beside(doc, _text_float(")")))


def _maybe_parentheses(doc: Document, prec: int, ctx: RenderContext) -> Document:
    if needs_parentheses(ctx.prec, prec):
        return _parenthesize(doc)
    return doc


def _starts_with_sign(node: Node, sign: str) -> bool:
    """True when the literal ``node`` prints with ``sign`` as its first character."""
    match node:
        case Integer(value=value, literal=literal):
            return integer_literal(value, literal).startswith(sign)
        case Float(value=value):
            return float_text(value).startswith(sign)
    return False


def _bracketed(open_: str, docs: list[Document], close: str) -> Document:
    return beside(_text_float(open_), beside(par(docs), _text_float(close)))


def _vertical(docs: Sequence[Document]) -> Document:
    """Stack documents top to bottom as a balanced tree of ``above``."""
    if not docs:
        return empty()
    if len(docs) == 1:
        return docs[0]
    middle = len(docs) // 2
    return above(_vertical(docs[:middle]), _vertical(docs[middle:]))


def _vertical_sep(separator: Document, docs: Sequence[Document]) -> Document:
    """Stack documents with ``separator`` on the lines between them."""
    interleaved: list[Document] = []
    for index, doc in enumerate(docs):
        if index:
            interleaved.append(separator)
        interleaved.append(doc)
    return _vertical(interleaved)


# =============================================================================
# Attribute payload decoding
# =============================================================================


def _macro_name(name: Node) -> str | None:
    match name:
        case Variable(name=value) | Atom(value=value) | Text(text=value):
            return value
    return None


def dodge_macros[N: Node](node: N) -> N:
    """Replace argument-less macros with their verbatim ``?NAME`` text.

    Type and spec payloads are printed structurally; a bare macro in them
    is kept as plain text. Macros with arguments are left alone.

    """

    def replace(current: Node) -> Node:
        if isinstance(current, Macro) and current.arguments is None:
            name = _macro_name(current.name)
            if name is not None:
                return Text("?" + name, comments=current.comments, location=current.location)
        return current

    return transform(node, replace)


def _function_node(node: Node) -> Node:
    """Name of the function a spec is about.

    ``{F, A}`` gives ``F`` and ``{M, F, A}`` gives ``M:F``.

    """
    if isinstance(node, Tuple):
        match node.elements:
            case (function, _):
                return function
            case (module, function, _):
                return ModuleQualifier(module, function)
    return node


def _attribute_kind(name: Node) -> str | None:
    if isinstance(name, Atom):
        return name.value
    return None


def _single_argument(node: Attribute, kind: str, shape: str) -> Node:
    if node.arguments is None or len(node.arguments) != 1:
        raise MalformedAttributeError(kind, f"expected a single {shape} argument", node.location)
    return node.arguments[0]


def _list_elements(node: Node, kind: str, what: str, location: Any) -> tuple[Node, ...]:
    match node:
        case Nil():
            return ()
        case List():
            compact = node.compact()
            if compact.tail is None:
                return compact.elements
    raise MalformedAttributeError(kind, f"{what} must be a proper list", location)


# =============================================================================
# Renderer
# =============================================================================


class ErlangRenderer:
    """Render Erlang syntax trees to layout documents and text.

    Usage:
        >>> from erlpretty.nodes import Application, Atom, InfixExpr, Integer, Operator
        >>> renderer = ErlangRenderer()
        >>> tree = Application(Atom("foo"), (InfixExpr(Integer(1), Operator("+"), Integer(2)),))
        >>> renderer.format(tree)
        'foo(1 + 2)'

    Args:
        config: Format configuration; the active context config when omitted
        error_formatters: Message formatters for error and warning markers,
            keyed by the ``module`` of their ``ErrorInfo``

    """

    __slots__ = ("_config", "_error_formatters")

    def __init__(
        self,
        config: FormatConfig | None = None,
        error_formatters: Mapping[str, ErrorFormatter] | None = None,
    ) -> None:
        self._config = config if config is not None else get_format_config()
        self._error_formatters: dict[str, ErrorFormatter] = dict(error_formatters or {})

    @property
    def config(self) -> FormatConfig:
        return self._config

    def layout(self, node: Node) -> Document:
        """Translate ``node`` into a document without resolving it."""
        return self._lay(node, RenderContext.from_config(self._config))

    def format(self, node: Node) -> str:
        """Translate ``node`` and resolve it into text."""
        logger.debug("formatting %s", type(node).__name__)
        return resolve(self.layout(node), self._config.paper, self._config.ribbon)

    # -- Dispatch --------------------------------------------------------------

    def _lay(self, node: Node, ctx: RenderContext) -> Document:
        doc = self._lay_no_comments(node, ctx)
        if node.comments:
            return attach_comments(doc, node.comments)
        return doc

    def _seq(
        self, nodes: Sequence[Node], separator: str | None, ctx: RenderContext
    ) -> list[Document]:
        """Lay out ``nodes``, each but the last followed by ``separator``."""
        if not nodes:
            return [empty()]
        docs = [self._lay(node, ctx) for node in nodes]
        if separator is None:
            return docs
        last = len(docs) - 1
        return [doc if i == last else beside(doc, _text_float(separator)) for i, doc in enumerate(docs)]

    def _lay_no_comments(self, node: Node, ctx: RenderContext) -> Document:
        match node:
            # Literals and other common cases first
            case Variable(name=name):
                return text(name)
            case Atom(value=value):
                return text(atom_literal(value, ctx.encoding))
            case Integer(value=value, literal=literal):
                return text(integer_literal(value, literal))
            case Float(value=value):
                return text(float_text(value))
            case Char(value=value):
                return text(char_literal(value, ctx.encoding))
            case String(value=value):
                segments = string_segments(string_literal(value, ctx.encoding), ctx.ribbon)
                return _vertical([text(segment) for segment in segments])
            case Nil():
                return text("[]")
            case Underscore():
                return text("_")
            case Text(text=string):
                return text(string)
            case Operator(name=name):
                return _text_float(name)
            case Tuple(elements=elements):
                return _bracketed("{", self._seq(elements, ",", ctx.reset_prec()), "}")
            case List():
                return self._lay_list(node, ctx)
            case InfixExpr(left=left, operator=operator, right=right):
                if isinstance(operator, Operator):
                    prec_left, prec, prec_right = infix_prec(operator.name)
                else:
                    prec_left, prec, prec_right = 0, 0, 0
                doc = par(
                    [
                        self._lay(left, ctx.with_prec(prec_left)),
                        self._lay(operator, ctx.reset_prec()),
                        self._lay(right, ctx.with_prec(prec_right)),
                    ],
                    ctx.sub_indent,
                )
                return _maybe_parentheses(doc, prec, ctx)
            case PrefixExpr(operator=operator, argument=argument):
                if isinstance(operator, Operator):
                    prec, prec_right = prefix_prec(operator.name)
                    symbol = operator.name
                else:
                    prec, prec_right = 0, 0
                    symbol = None
                d_operator = self._lay(operator, ctx.reset_prec())
                d_argument = self._lay(argument, ctx.with_prec(prec_right))
                if symbol in ("+", "-"):
                    if _starts_with_sign(argument, symbol):
                        # Keep "-" "-1" from reading as the "--" operator
                        d_argument = _parenthesize(d_argument)
                    doc = beside(d_operator, d_argument)
                else:
                    doc = par([d_operator, d_argument], ctx.sub_indent)
                return _maybe_parentheses(doc, prec, ctx)
            case Application(operator=operator, arguments=arguments):
                return self._lay_application(operator, arguments, ctx)
            case MatchExpr(pattern=pattern, body=body):
                prec_left, prec, prec_right = infix_prec("=")
                d_pattern = self._lay(pattern, ctx.with_prec(prec_left))
                d_body = self._lay(body, ctx.with_prec(prec_right))
                doc = follow(beside(d_pattern, _text_float(" =")), d_body, ctx.break_indent)
                return _maybe_parentheses(doc, prec, ctx)
            case Clause():
                return self._lay_clause(node, ctx)
            case Function(name=name, clauses=clauses):
                # Comments on the name are repeated for each clause
                inner = ctx.reset_prec()
                d_name = self._lay(name, inner)
                d_clauses = self._lay_clauses(clauses, ClauseKind.FUNCTION, inner, d_name)
                return beside(d_clauses, _text_float("."))
            case CaseExpr(argument=argument, clauses=clauses):
                inner = ctx.reset_prec()
                d_argument = self._lay(argument, inner)
                d_clauses = self._lay_clauses(clauses, ClauseKind.CASE, inner)
                return sep(
                    [
                        par(
                            [follow(text("case"), d_argument, inner.sub_indent), text("of")],
                            inner.break_indent,
                        ),
                        nest(inner.sub_indent, d_clauses),
                        text("end"),
                    ]
                )
            case IfExpr(clauses=clauses):
                inner = ctx.reset_prec()
                d_clauses = self._lay_clauses(clauses, ClauseKind.IF, inner)
                return sep([follow(text("if"), d_clauses, inner.sub_indent), text("end")])
            case FunExpr(clauses=clauses):
                inner = ctx.reset_prec()
                return self._lay_fun(self._lay_clauses(clauses, ClauseKind.FUN, inner), inner)
            case NamedFunExpr(name=name, clauses=clauses):
                inner = ctx.reset_prec()
                d_name = self._lay(name, inner)
                d_clauses = self._lay_clauses(clauses, ClauseKind.FUNCTION, inner, d_name)
                return self._lay_fun(d_clauses, inner)
            case ModuleQualifier(module=module, body=body):
                prec_left, _, prec_right = infix_prec(":")
                d_module = self._lay(module, ctx.with_prec(prec_left))
                d_body = self._lay(body, ctx.with_prec(prec_right))
                return beside(d_module, beside(text(":"), d_body))

            # The rest, roughly alphabetical, types last
            case ArityQualifier(body=body, arity=arity):
                inner = ctx.reset_prec()
                return beside(self._lay(body, inner), beside(text("/"), self._lay(arity, inner)))
            case Attribute():
                return self._lay_attribute(node, ctx)
            case Binary(fields=fields):
                return _bracketed("<<", self._seq(fields, ",", ctx.reset_prec()), ">>")
            case BinaryField(body=body, types=types):
                inner = ctx.with_prec(MAX_PREC)
                d_body = self._lay(body, inner)
                if not types:
                    return d_body
                return beside(d_body, beside(_text_float("/"), self._lay_bit_types(types, inner)))
            case BlockExpr(body=body):
                inner = ctx.reset_prec()
                return sep(
                    [
                        text("begin"),
                        nest(inner.sub_indent, sep(self._seq(body, ",", inner))),
                        text("end"),
                    ]
                )
            case CatchExpr(body=body):
                prec, prec_right = prefix_prec("catch")
                d_body = self._lay(body, ctx.with_prec(prec_right))
                return _maybe_parentheses(
                    follow(text("catch"), d_body, ctx.sub_indent), prec, ctx
                )
            case ClassQualifier(exception_class=exception_class, body=body, stacktrace=stacktrace):
                inner = ctx.with_prec(MAX_PREC)
                d_class = self._lay(exception_class, inner)
                d_body = self._lay(body, inner)
                if stacktrace is None or isinstance(stacktrace, Underscore) or (
                    isinstance(stacktrace, Variable) and stacktrace.name == "_"
                ):
                    return beside(d_class, beside(text(":"), d_body))
                d_stacktrace = self._lay(stacktrace, inner)
                return beside(
                    d_class,
                    beside(beside(text(":"), d_body), beside(text(":"), d_stacktrace)),
                )
            case Comment():
                return standalone_comment(node)
            case Conjunction(body=body):
                return par(self._seq(body, ",", ctx.reset_prec()))
            case Disjunction(body=body):
                # Disjunctions are stacked rather than filled, for clarity
                return sep(self._seq(body, ";", ctx.reset_prec()))
            case ErrorMarker(info=info):
                d_info = self._lay_error_info(info, ctx.reset_prec())
                return beside(text("** "), beside(d_info, text(" **")))
            case WarningMarker(info=info):
                return beside(text("%% WARNING: "), self._lay_error_info(info, ctx.reset_prec()))
            case EofMarker():
                return empty()
            case FormList(forms=forms):
                return _vertical_sep(text(""), self._seq(forms, None, ctx.reset_prec()))
            case Generator(pattern=pattern, body=body):
                return self._lay_generator(pattern, "<- ", body, ctx)
            case BinaryGenerator(pattern=pattern, body=body):
                return self._lay_generator(pattern, "<= ", body, ctx)
            case ImplicitFun(name=name):
                return beside(_text_float("fun "), self._lay(name, ctx.reset_prec()))
            case ListComp(template=template, body=body):
                inner = ctx.reset_prec()
                d_template = self._lay(template, inner)
                d_body = par(self._seq(body, ",", inner))
                return beside(
                    _text_float("["),
                    par([d_template, beside(_text_float("|| "), beside(d_body, _text_float("]")))]),
                )
            case BinaryComp(template=template, body=body):
                inner = ctx.reset_prec()
                d_template = self._lay(template, inner)
                d_body = par(self._seq(body, ",", inner))
                return beside(
                    _text_float("<< "),
                    par([d_template, beside(_text_float("|| "), beside(d_body, _text_float(" >>")))]),
                )
            case Macro(name=name, arguments=arguments):
                inner = ctx.reset_prec()
                d_name = self._lay(name, inner)
                if arguments is None:
                    doc = d_name
                else:
                    d_arguments = self._seq(arguments, ",", inner.with_prec(MAX_PREC))
                    doc = beside(d_name, beside(text("("), beside(par(d_arguments), _text_float(")"))))
                # Expansion is unknown, so always parenthesize when any
                # precedence is required
                return _maybe_parentheses(beside(_text_float("?"), doc), 0, ctx)
            case Parentheses(body=body):
                return _parenthesize(self._lay(body, ctx.reset_prec()))
            case ReceiveExpr():
                return self._lay_receive(node, ctx)
            case RecordAccess(argument=argument, type=record_type, field=field):
                prec_left, prec, prec_right = infix_prec("#")
                d_argument = self._lay(argument, ctx.with_prec(prec_left))
                d_field = beside(_text_float("."), self._lay(field, ctx.with_prec(prec_right)))
                d_type = beside(
                    beside(_text_float("#"), self._lay(record_type, ctx.reset_prec())), d_field
                )
                return _maybe_parentheses(beside(d_argument, d_type), prec, ctx)
            case RecordExpr(type=record_type, fields=fields, argument=argument):
                inner = ctx.reset_prec()
                d_type = self._lay(record_type, inner)
                d_fields = par(self._seq(fields, ",", inner))
                doc = beside(
                    beside(_text_float("#"), d_type),
                    beside(text("{"), beside(d_fields, _text_float("}"))),
                )
                return self._lay_expr_argument(argument, doc, ctx)
            case RecordField(name=name, value=value):
                inner = ctx.reset_prec()
                d_name = self._lay(name, inner)
                if value is None:
                    return d_name
                return par(
                    [d_name, _text_float("="), self._lay(value, inner)], inner.break_indent
                )
            case RecordIndexExpr(type=record_type, field=field):
                prec, prec_right = prefix_prec("#")
                d_type = self._lay(record_type, ctx.reset_prec())
                d_field = self._lay(field, ctx.with_prec(prec_right))
                doc = beside(beside(_text_float("#"), d_type), beside(_text_float("."), d_field))
                return _maybe_parentheses(doc, prec, ctx)
            case MapExpr(fields=fields, argument=argument):
                d_fields = par(self._seq(fields, ",", ctx.reset_prec()))
                doc = beside(text("#{"), beside(d_fields, _text_float("}")))
                return self._lay_expr_argument(argument, doc, ctx)
            case MapFieldAssoc(name=name, value=value) | MapTypeAssoc(name=name, value=value):
                return self._lay_association(name, "=>", value, ctx)
            case MapFieldExact(name=name, value=value) | MapTypeExact(name=name, value=value):
                return self._lay_association(name, ":=", value, ctx)
            case SizeQualifier(body=body, size=size):
                inner = ctx.with_prec(MAX_PREC)
                return beside(self._lay(body, inner), beside(text(":"), self._lay(size, inner)))
            case TypedRecordField(body=body, type=field_type):
                _, prec, _ = type_infix_prec("::")
                inner = ctx.reset_prec()
                d_body = self._lay(body, inner)
                d_type = self._lay(field_type, ctx.with_prec(prec))
                doc = par([d_body, _text_float("::"), d_type], inner.break_indent)
                return _maybe_parentheses(doc, prec, ctx)
            case TryExpr():
                return self._lay_try(node, ctx)

            # Types
            case AnnotatedType(name=name, body=body):
                _, prec, _ = type_infix_prec("::")
                d_name = self._lay(name, ctx.reset_prec())
                d_body = self._lay(body, ctx.with_prec(prec))
                return _maybe_parentheses(self._lay_annotation(d_name, d_body, ctx), prec, ctx)
            case TypeApplication(name=name, arguments=arguments):
                shorthand = self._lay_list_type(name, arguments, ctx)
                if shorthand is not None:
                    return shorthand
                return self._lay_application(name, arguments, ctx)
            case UserTypeApplication(name=name, arguments=arguments):
                return self._lay_application(name, arguments, ctx)
            case BitstringType(m=m, n=n):
                inner = ctx.with_prec(MAX_PREC)
                sizes: list[Document] = []
                if not (isinstance(m, Integer) and m.value == 0):
                    sizes.append(beside(text("_:"), self._lay(m, inner)))
                if not (isinstance(n, Integer) and n.value == 0):
                    sizes.append(beside(text("_:_*"), self._lay(n, inner)))
                if len(sizes) == 2:
                    sizes[0] = beside(sizes[0], _text_float(","))
                return _bracketed("<<", sizes, ">>")
            case FunType():
                return text("fun()")
            case ConstrainedFunctionType(body=body, argument=argument):
                inner = ctx.reset_prec()
                d_body = self._lay(body, inner)
                d_argument = self._lay(argument, inner.without_clause())
                return beside(d_body, beside(_text_float(" when "), d_argument))
            case FunctionType(arguments=arguments, return_type=return_type):
                before, after = ("", "") if ctx.clause is ClauseKind.SPEC else ("fun(", ")")
                inner = ctx.reset_prec().without_clause()
                if arguments is None:
                    d_arguments = text("(...)")
                else:
                    d_arguments = beside(
                        text("("),
                        beside(par(self._seq(arguments, ",", inner)), _text_float(")")),
                    )
                d_return = self._lay(return_type, inner)
                return beside(
                    _text_float(before),
                    beside(
                        d_arguments,
                        beside(_text_float(" -> "), beside(d_return, _text_float(after))),
                    ),
                )
            case Constraint(argument=argument, body=body):
                if (
                    isinstance(argument, Atom)
                    and argument.value == "is_subtype"
                    and len(body) == 2
                    and isinstance(body[0], Variable)
                ):
                    prec_left, prec, prec_right = type_infix_prec("::")
                    d_var = self._lay(body[0], ctx.with_prec(prec_left))
                    d_type = self._lay(body[1], ctx.with_prec(prec_right))
                    return _maybe_parentheses(self._lay_annotation(d_var, d_type, ctx), prec, ctx)
                return self._lay_application(argument, body, ctx)
            case MapType(fields=fields):
                if fields is None:
                    return text("map()")
                doc = _bracketed("#{", self._seq(fields, ",", ctx.reset_prec()), "}")
                prec, _ = type_prefix_prec("#")
                return _maybe_parentheses(doc, prec, ctx)
            case IntegerRangeType(low=low, high=high):
                prec_left, prec, prec_right = type_infix_prec("..")
                d_low = self._lay(low, ctx.with_prec(prec_left))
                d_high = self._lay(high, ctx.with_prec(prec_right))
                return _maybe_parentheses(beside(d_low, beside(text(".."), d_high)), prec, ctx)
            case RecordType(name=name, fields=fields):
                prec, _ = type_prefix_prec("#")
                d_name = beside(text("#"), self._lay(name, ctx.reset_prec()))
                d_fields = self._seq(fields, ",", ctx.reset_prec())
                doc = beside(d_name, beside(text("{"), beside(par(d_fields), _text_float("}"))))
                return _maybe_parentheses(doc, prec, ctx)
            case RecordTypeField(name=name, type=field_type):
                inner = ctx.reset_prec()
                return par(
                    [self._lay(name, inner), _text_float("::"), self._lay(field_type, inner)],
                    inner.break_indent,
                )
            case TupleType(elements=elements):
                if elements is None:
                    return text("tuple()")
                return _bracketed("{", self._seq(elements, ",", ctx.reset_prec()), "}")
            case TypeUnion(types=types):
                _, prec, prec_right = type_infix_prec("|")
                doc = par(self._seq(types, " |", ctx.with_prec(prec_right)))
                return _maybe_parentheses(doc, prec, ctx)
            case _:
                raise UnknownNodeError(node)

    # -- Composite data --------------------------------------------------------

    def _lay_list(self, node: List, ctx: RenderContext) -> Document:
        inner = ctx.reset_prec()
        compact = node.compact()
        d_elements = par(self._seq(compact.elements, ",", inner))
        if compact.tail is None:
            doc = beside(d_elements, _text_float("]"))
        else:
            d_tail = beside(
                _text_float("| "), beside(self._lay(compact.tail, inner), _text_float("]"))
            )
            doc = follow(d_elements, d_tail)
        return beside(_text_float("["), doc)

    def _lay_application(
        self, name: Node, arguments: Sequence[Node], ctx: RenderContext
    ) -> Document:
        prec_callee, prec = FUNC_PREC
        d_name = self._lay(name, ctx.with_prec(prec_callee))
        d_arguments = self._seq(arguments, ",", ctx.reset_prec())
        doc = beside(d_name, beside(text("("), beside(par(d_arguments), _text_float(")"))))
        return _maybe_parentheses(doc, prec, ctx)

    def _lay_list_type(
        self, name: Node, arguments: Sequence[Node], ctx: RenderContext
    ) -> Document | None:
        """Shorthand for ``nil()``, ``list(T)`` and ``nonempty_list(T)``."""
        if not isinstance(name, Atom):
            return None
        match name.value, len(arguments):
            case "nil", 0:
                return text("[]")
            case "list", 1:
                d_element = self._lay(arguments[0], ctx.reset_prec())
                return beside(text("["), beside(d_element, text("]")))
            case "nonempty_list", 1:
                d_element = self._lay(arguments[0], ctx.reset_prec())
                return beside(text("["), beside(d_element, text(", ...]")))
        return None

    def _lay_expr_argument(
        self, argument: Node | None, doc: Document, ctx: RenderContext
    ) -> Document:
        """Prefix a record or map update with the expression it updates."""
        prec_left, prec, _ = infix_prec("#")
        if argument is not None:
            doc = beside(self._lay(argument, ctx.with_prec(prec_left)), doc)
        return _maybe_parentheses(doc, prec, ctx)

    def _lay_association(
        self, name: Node, symbol: str, value: Node, ctx: RenderContext
    ) -> Document:
        inner = ctx.reset_prec()
        return par(
            [self._lay(name, inner), _text_float(symbol), self._lay(value, inner)],
            inner.break_indent,
        )

    def _lay_annotation(self, d_name: Document, d_body: Document, ctx: RenderContext) -> Document:
        return follow(beside(d_name, _text_float(" ::")), d_body, ctx.break_indent)

    def _lay_bit_types(self, types: Sequence[Node], ctx: RenderContext) -> Document:
        doc = self._lay(types[-1], ctx)
        for bit_type in reversed(types[:-1]):
            doc = beside(self._lay(bit_type, ctx), beside(_text_float("-"), doc))
        return doc

    def _lay_generator(
        self, pattern: Node, arrow: str, body: Node, ctx: RenderContext
    ) -> Document:
        inner = ctx.reset_prec()
        return par(
            [self._lay(pattern, inner), beside(text(arrow), self._lay(body, inner))],
            inner.break_indent,
        )

    # -- Clauses ---------------------------------------------------------------

    def _lay_clauses(
        self,
        clauses: Sequence[Node],
        kind: ClauseKind,
        ctx: RenderContext,
        function_name: Document | None = None,
    ) -> Document:
        """Stack clauses vertically, separated by ``;``."""
        return _vertical(self._seq(clauses, ";", ctx.with_clause(kind, function_name)))

    def _lay_clause(self, node: Clause, ctx: RenderContext) -> Document:
        inner = ctx.reset_prec().without_clause()
        d_patterns = par(self._seq(node.patterns, ",", inner))
        d_guard = None if node.guard is None else self._lay(node.guard, inner)
        d_body = sep(self._seq(node.body, ",", inner))

        match ctx.clause:
            case ClauseKind.IF:
                # Patterns are ignored; they are empty in an if
                head = d_guard if d_guard is not None else text("true")
                return self._append_clause_body(d_body, head, ctx)
            case ClauseKind.CASE | ClauseKind.RECEIVE | ClauseKind.TRY:
                head = d_patterns
            case ClauseKind.FUNCTION if ctx.function_name is not None:
                head = beside(ctx.function_name, _parenthesize(d_patterns))
            case _:
                # Out of context clauses use the fun style
                head = _parenthesize(d_patterns)
        return self._append_clause_body(d_body, self._append_guard(d_guard, head, ctx), ctx)

    def _append_clause_body(
        self, body: Document, head: Document, ctx: RenderContext
    ) -> Document:
        return sep([beside(head, _text_float(" ->")), nest(ctx.break_indent, body)])

    def _append_guard(
        self, guard: Document | None, head: Document, ctx: RenderContext
    ) -> Document:
        if guard is None:
            return head
        return par([head, follow(text("when"), guard, ctx.sub_indent)], ctx.break_indent)

    def _lay_fun(self, clauses: Document, ctx: RenderContext) -> Document:
        return sep([follow(text("fun"), clauses, ctx.sub_indent), text("end")])

    def _lay_receive(self, node: ReceiveExpr, ctx: RenderContext) -> Document:
        inner = ctx.reset_prec()
        doc = self._lay_clauses(node.clauses, ClauseKind.RECEIVE, inner)
        if node.timeout is not None:
            d_timeout = self._lay(node.timeout, inner)
            d_action = sep(self._seq(node.action, ",", inner))
            doc = sep(
                [
                    doc,
                    follow(
                        _text_float("after"),
                        self._append_clause_body(d_action, d_timeout, inner),
                        inner.sub_indent,
                    ),
                ]
            )
        return sep([text("receive"), nest(inner.sub_indent, doc), text("end")])

    def _lay_try(self, node: TryExpr, ctx: RenderContext) -> Document:
        inner = ctx.reset_prec()
        d_body = sep(self._seq(node.body, ",", inner))
        # Sections absent from the source are left out entirely
        sections: list[Document] = [text("end")]
        if node.after:
            d_after = sep(self._seq(node.after, ",", inner))
            sections = [text("after"), nest(inner.sub_indent, d_after), *sections]
        if node.handlers:
            d_handlers = self._lay_clauses(node.handlers, ClauseKind.TRY, inner)
            sections = [text("catch"), nest(inner.sub_indent, d_handlers), *sections]
        if node.clauses:
            d_clauses = self._lay_clauses(node.clauses, ClauseKind.TRY, inner)
            sections = [text("of"), nest(inner.sub_indent, d_clauses), *sections]
        head = par([follow(text("try"), d_body, inner.sub_indent), sections[0]])
        return sep([head, *sections[1:]])

    # -- Attributes ------------------------------------------------------------

    def _lay_attribute(self, node: Attribute, ctx: RenderContext) -> Document:
        """Lay out ``-name(args).``, decoding the payload of typed attributes."""
        inner = ctx.reset_prec()
        name = node.name
        if isinstance(name, Atom) and name.value == "if":
            # The preprocessor directive is spelled without quotes
            name = Variable("if", comments=name.comments, location=name.location)
        d_name = self._lay(name, inner)

        kind = _attribute_kind(node.name)
        if kind in _SPEC_ATTRIBUTES:
            doc = self._lay_spec_attribute(node, kind, d_name, inner)
        elif kind in _TYPE_ATTRIBUTES:
            doc = self._lay_type_attribute(node, kind, d_name, inner)
        elif kind in _NAME_LIST_ATTRIBUTES:
            doc = self._lay_name_list_attribute(node, kind, d_name, inner)
        elif node.arguments is None:
            doc = d_name
        else:
            d_arguments = par(self._seq(node.arguments, ",", inner))
            doc = beside(d_name, beside(text("("), beside(d_arguments, _text_float(")"))))
        return beside(_text_float("-"), beside(doc, _text_float(".")))

    def _lay_spec_attribute(
        self, node: Attribute, kind: str, d_name: Document, ctx: RenderContext
    ) -> Document:
        payload = _single_argument(node, kind, "{Name, Types}")
        if not isinstance(payload, Tuple) or len(payload.elements) != 2:
            raise MalformedAttributeError(kind, "expected a {Name, Types} tuple", node.location)
        function, types = payload.elements
        clauses = _list_elements(dodge_macros(types), kind, "types", node.location)
        d_clauses = self._lay_clauses(clauses, ClauseKind.SPEC, ctx)
        d_function = self._lay(_function_node(function), ctx)
        return beside(follow(d_name, d_function, ctx.break_indent), d_clauses)

    def _lay_type_attribute(
        self, node: Attribute, kind: str, d_name: Document, ctx: RenderContext
    ) -> Document:
        payload = _single_argument(node, kind, "{Name, Type, Args}")
        if not isinstance(payload, Tuple) or len(payload.elements) != 3:
            raise MalformedAttributeError(
                kind, "expected a {Name, Type, Args} tuple", node.location
            )
        type_name, body, parameters = (dodge_macros(e) for e in payload.elements)
        arguments = _list_elements(parameters, kind, "type parameters", node.location)
        d_head = self._lay_application(type_name, arguments, ctx)
        d_body = self._lay(body, ctx)
        return beside(
            follow(d_name, beside(d_head, _text_float(" :: ")), ctx.break_indent), d_body
        )

    def _lay_name_list_attribute(
        self, node: Attribute, kind: str, d_name: Document, ctx: RenderContext
    ) -> Document:
        payload = dodge_macros(_single_argument(node, kind, "[{Name, Arity}]"))
        names: list[Node] = []
        for entry in _list_elements(payload, kind, "names", node.location):
            match entry:
                case ArityQualifier():
                    names.append(entry)
                case Tuple(elements=(function, arity)):
                    names.append(ArityQualifier(function, arity))
                case _:
                    raise MalformedAttributeError(
                        kind, "expected {Name, Arity} entries", node.location
                    )
        d_names = self._lay(List(tuple(names)), ctx)
        return beside(d_name, beside(text("("), beside(d_names, _text_float(")"))))

    # -- Markers ---------------------------------------------------------------

    def _lay_error_info(self, info: Any, ctx: RenderContext) -> Document:
        """Describe an error or warning.

        ``ErrorInfo`` values go through the formatter registered for their
        module. A missing formatter, a formatter that raises and one that
        returns anything but a string all fall back to printing the
        descriptor as an Erlang term.

        """
        if isinstance(info, ErrorInfo):
            formatter = self._error_formatters.get(info.module)
            if formatter is not None:
                try:
                    message = formatter(info.term)
                except Exception as e:
                    logger.debug(
                        "error formatter for %s failed: %s; printing the raw term",
                        info.module,
                        e,
                    )
                    message = None
                if isinstance(message, str):
                    if info.line > 0:
                        return beside(text(f"{info.line}: "), text(message))
                    return text(message)
        return self._lay(abstract(info), ctx)


__all__ = ["ErlangRenderer", "ErrorFormatter", "dodge_macros"]
