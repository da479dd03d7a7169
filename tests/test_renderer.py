"""Tests for the Erlang renderer: node variants, clauses, attributes, markers."""

from dataclasses import dataclass

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from erlpretty import (
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
    Char,
    ClassQualifier,
    Clause,
    Comment,
    Conjunction,
    ConstrainedFunctionType,
    Constraint,
    EofMarker,
    ErrorInfo,
    ErrorMarker,
    Float,
    FormatConfig,
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
    ModuleQualifier,
    NamedFunExpr,
    Nil,
    Node,
    Operator,
    Parentheses,
    ReceiveExpr,
    RecordAccess,
    RecordExpr,
    RecordField,
    RecordIndexExpr,
    RecordType,
    RecordTypeField,
    SizeQualifier,
    SourceLocation,
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
    format,
)
from erlpretty.errors import MalformedAttributeError, UnknownNodeError
from erlpretty.renderers import ErlangRenderer, dodge_macros

X, N, T = Variable("X"), Variable("N"), Variable("T")


def call(name: str, *args: Node) -> Application:
    return Application(Atom(name), args)


def op(left: Node, symbol: str, right: Node) -> InfixExpr:
    return InfixExpr(left, Operator(symbol), right)


def clause(patterns: tuple[Node, ...], body: Node, guard: Node | None = None) -> Clause:
    return Clause(patterns, guard, (body,))


def type_app(name: str, *args: Node) -> TypeApplication:
    return TypeApplication(Atom(name), args)


def attribute(name: str, *args: Node) -> Attribute:
    return Attribute(Atom(name), args)


# =============================================================================
# Literals and data
# =============================================================================


class TestLiterals:
    def test_call_with_operator_argument(self) -> None:
        tree = call("foo", op(Integer(1), "+", Integer(2)))
        assert format(tree) == "foo(1 + 2)"

    def test_atoms(self) -> None:
        assert format(Atom("ok")) == "ok"
        assert format(Atom("hello world")) == "'hello world'"
        assert format(Atom("end")) == "'end'"

    def test_integer_keeps_source_spelling(self) -> None:
        assert format(Integer(255, "16#ff")) == "16#ff"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1.5, "1.5"), (0.1, "1.0e-1"), (100.0, "1.0e+2"), (100.0005, "100.0005")],
    )
    def test_floats(self, value: float, expected: str) -> None:
        assert format(Float(value)) == expected

    def test_chars(self) -> None:
        assert format(Char("a")) == "$a"
        assert format(Char(" ")) == "$\\s"
        assert format(Char("\n")) == "$\\n"

    def test_string(self) -> None:
        assert format(String("hi\n")) == '"hi\\n"'

    def test_long_string_is_split(self) -> None:
        result = format(String("aaaa bbbb cccc dddd"), ribbon=18)
        assert result == '"aaaa bbbb cccc "\n"dddd"'

    def test_split_string_stays_aligned_in_call(self) -> None:
        result = format(call("f", String("aaaa bbbb cccc dddd")), ribbon=18)
        assert result == 'f("aaaa bbbb cccc "\n  "dddd")'

    def test_text_and_underscore(self) -> None:
        assert format(Text("?LINE")) == "?LINE"
        assert format(Underscore()) == "_"

    def test_parentheses_kept(self) -> None:
        assert format(Parentheses(Atom("a"))) == "(a)"


class TestData:
    def test_tuple(self) -> None:
        assert format(Tuple((Atom("ok"), Variable("Value")))) == "{ok, Value}"
        assert format(Tuple(())) == "{}"

    def test_lists(self) -> None:
        assert format(Nil()) == "[]"
        assert format(List(())) == "[]"
        assert format(List((Atom("a"), Atom("b")), T)) == "[a, b | T]"

    def test_list_tails_are_merged(self) -> None:
        tree = List((Atom("a"),), List((Atom("b"),), Nil()))
        assert format(tree) == "[a, b]"

    def test_long_list_fills_lines(self) -> None:
        tree = List(tuple(Atom(name) for name in ("alpha", "beta", "gamma", "delta")))
        assert format(tree, paper=20) == "[alpha, beta, gamma,\n delta]"

    def test_maps(self) -> None:
        assert format(MapExpr((MapFieldAssoc(Atom("a"), Integer(1)),))) == "#{a => 1}"
        update = MapExpr((MapFieldExact(Atom("a"), Integer(2)),), Variable("M"))
        assert format(update) == "M#{a := 2}"

    def test_records(self) -> None:
        record = RecordExpr(Atom("r"), (RecordField(Atom("a"), Integer(1)), RecordField(Atom("b"))))
        assert format(record) == "#r{a = 1, b}"
        assert format(RecordAccess(Variable("R"), Atom("r"), Atom("f"))) == "R#r.f"
        assert format(RecordIndexExpr(Atom("r"), Atom("f"))) == "#r.f"

    def test_record_update(self) -> None:
        tree = RecordExpr(Atom("r"), (RecordField(Atom("a"), Integer(1)),), Variable("R"))
        assert format(tree) == "R#r{a = 1}"

    def test_binaries(self) -> None:
        tree = Binary(
            (
                BinaryField(SizeQualifier(X, Integer(8))),
                BinaryField(Variable("Y"), (Atom("little"), Atom("unsigned"))),
            )
        )
        assert format(tree) == "<<X:8, Y/little-unsigned>>"

    def test_binary_field_expression_is_parenthesized(self) -> None:
        tree = Binary((BinaryField(op(X, "+", Integer(1))),))
        assert format(tree) == "<<(X + 1)>>"

    def test_list_comprehension(self) -> None:
        tree = ListComp(
            op(X, "*", Integer(2)),
            (Generator(X, Variable("L")), op(X, ">", Integer(0))),
        )
        assert format(tree) == "[X * 2 || X <- L, X > 0]"

    def test_binary_comprehension(self) -> None:
        bits = Binary((BinaryField(X),))
        tree = BinaryComp(bits, (BinaryGenerator(bits, Variable("B")),))
        assert format(tree) == "<< <<X>> || <<X>> <= B >>"

    def test_remote_call(self) -> None:
        tree = Application(
            ModuleQualifier(Atom("io"), Atom("format")),
            (String("~p~n"), List((X,))),
        )
        assert format(tree) == 'io:format("~p~n", [X])'

    def test_implicit_funs(self) -> None:
        assert format(ImplicitFun(ArityQualifier(Atom("foo"), Integer(1)))) == "fun foo/1"
        remote = ImplicitFun(
            ModuleQualifier(Atom("lists"), ArityQualifier(Atom("map"), Integer(2)))
        )
        assert format(remote) == "fun lists:map/2"

    @given(
        names=st.lists(st.text(alphabet="abcdefgh", min_size=1, max_size=8), min_size=1, max_size=25),
        paper=st.integers(min_value=20, max_value=70),
    )
    @settings(max_examples=50)
    def test_list_lines_fit_the_paper(self, names: list[str], paper: int) -> None:
        tree = List(tuple(Atom(name) for name in names))
        for line in format(tree, paper=paper, ribbon=paper).split("\n"):
            assert len(line) <= paper


# =============================================================================
# Clauses in context
# =============================================================================


class TestClauses:
    def test_clause_outside_any_construct(self) -> None:
        assert format(clause((X,), Atom("ok"))) == "(X) -> ok"

    def test_case(self) -> None:
        tree = CaseExpr(X, (clause((Atom("a"),), Atom("ok")),))
        assert format(tree) == "case X of a -> ok end"

    def test_case_with_several_clauses(self) -> None:
        tree = CaseExpr(
            X,
            (clause((Atom("a"),), Atom("ok")), clause((Underscore(),), Atom("error"))),
        )
        assert format(tree) == "case X of\n  a -> ok;\n  _ -> error\nend"

    def test_guard(self) -> None:
        tree = CaseExpr(X, (clause((N,), Atom("pos"), op(N, ">", Integer(0))),))
        assert format(tree) == "case X of N when N > 0 -> pos end"

    def test_if_without_guard_prints_true(self) -> None:
        tree = IfExpr((Clause((), None, (Atom("ok"),)),))
        assert format(tree) == "if true -> ok end"

    def test_if_with_several_clauses(self) -> None:
        tree = IfExpr(
            (Clause((), Variable("A"), (Atom("a"),)), Clause((), None, (Atom("b"),)))
        )
        assert format(tree) == "if A -> a;\n   true -> b\nend"

    def test_fun(self) -> None:
        assert format(FunExpr((clause((X,), X),))) == "fun (X) -> X end"

    def test_named_fun(self) -> None:
        tree = NamedFunExpr(Variable("F"), (clause((Integer(0),), Integer(1)),))
        assert format(tree) == "fun F(0) -> 1 end"

    def test_function(self) -> None:
        tree = Function(Atom("foo"), (Clause((), None, (Atom("ok"),)),))
        assert format(tree) == "foo() -> ok."

    def test_function_with_several_clauses(self) -> None:
        recursive = op(N, "*", call("fact", op(N, "-", Integer(1))))
        tree = Function(
            Atom("fact"),
            (clause((Integer(0),), Integer(1)), clause((N,), recursive)),
        )
        assert format(tree) == "fact(0) -> 1;\nfact(N) -> N * fact(N - 1)."

    def test_function_body_breaks_under_head(self) -> None:
        body = call("long_function_name", Atom("argument"))
        tree = Function(Atom("foo"), (Clause((), None, (body,)),))
        assert format(tree, paper=20) == "foo() ->\n    long_function_name(argument)."

    def test_body_expressions_are_separated(self) -> None:
        tree = Function(Atom("foo"), (Clause((), None, (call("bar"), Atom("ok"))),))
        assert format(tree) == "foo() -> bar(), ok."
        assert format(tree, paper=12) == "foo() ->\n    bar(),\n    ok."


class TestBlocks:
    def test_begin_end(self) -> None:
        assert format(BlockExpr((Atom("a"), Atom("b")))) == "begin a, b end"

    def test_try_catch(self) -> None:
        handler = clause((ClassQualifier(Atom("error"), Variable("R")),), Variable("R"))
        tree = TryExpr((call("f"),), handlers=(handler,))
        assert format(tree) == "try f() catch error:R -> R end"

    def test_try_with_every_section(self) -> None:
        tree = TryExpr(
            (call("f"),),
            clauses=(clause((Atom("ok"),), Atom("ok")),),
            handlers=(clause((ClassQualifier(Underscore(), Underscore()),), Atom("error")),),
            after=(call("g"),),
        )
        expected = "try f() of\n  ok -> ok\ncatch\n  _:_ -> error\nafter\n  g()\nend"
        assert format(tree, paper=20) == expected

    def test_stacktrace_variable(self) -> None:
        qualifier = ClassQualifier(Atom("error"), Variable("R"), Variable("S"))
        assert format(qualifier) == "error:R:S"

    def test_receive_with_timeout(self) -> None:
        tree = ReceiveExpr(
            (clause((Variable("Msg"),), Variable("Msg")),),
            timeout=Integer(1000),
            action=(Atom("timeout"),),
        )
        expected = "receive\n  Msg -> Msg\n  after 1000 -> timeout\nend"
        assert format(tree, paper=30) == expected


# =============================================================================
# Types and attributes
# =============================================================================


class TestTypes:
    def test_list_shorthands(self) -> None:
        assert format(type_app("nil")) == "[]"
        assert format(type_app("list", type_app("integer"))) == "[integer()]"
        assert format(type_app("nonempty_list", type_app("integer"))) == "[integer(), ...]"

    def test_remote_list_type_is_not_shortened(self) -> None:
        tree = TypeApplication(ModuleQualifier(Atom("m"), Atom("list")), (T,))
        assert format(tree) == "m:list(T)"

    def test_user_type(self) -> None:
        assert format(UserTypeApplication(Atom("tree"), (T,))) == "tree(T)"

    def test_function_types(self) -> None:
        assert format(FunctionType((Atom("a"),), Atom("b"))) == "fun((a) -> b)"
        assert format(FunctionType(None, Atom("ok"))) == "fun((...) -> ok)"
        assert format(FunType()) == "fun()"

    def test_maps_and_tuples(self) -> None:
        assert format(MapType(None)) == "map()"
        fields = (MapTypeAssoc(Atom("a"), Atom("b")), MapTypeExact(Atom("c"), Atom("d")))
        assert format(MapType(fields)) == "#{a => b, c := d}"
        assert format(TupleType(None)) == "tuple()"

    def test_range(self) -> None:
        assert format(IntegerRangeType(Integer(1), Integer(10))) == "1..10"

    @pytest.mark.parametrize(
        ("m", "n", "expected"),
        [(0, 0, "<<>>"), (8, 0, "<<_:8>>"), (0, 8, "<<_:_*8>>"), (8, 4, "<<_:8, _:_*4>>")],
    )
    def test_bitstrings(self, m: int, n: int, expected: str) -> None:
        assert format(BitstringType(Integer(m), Integer(n))) == expected

    def test_annotated_type(self) -> None:
        assert format(AnnotatedType(Variable("Name"), type_app("atom"))) == "Name :: atom()"

    def test_annotation_in_union_is_parenthesized(self) -> None:
        tree = TypeUnion((AnnotatedType(X, Atom("a")), Atom("b")))
        assert format(tree) == "(X :: a) | b"

    def test_nested_union_is_flat(self) -> None:
        tree = TypeUnion((TypeUnion((Atom("a"), Atom("b"))), Atom("c")))
        assert format(tree) == "a | b | c"

    def test_record_type(self) -> None:
        tree = RecordType(Atom("r"), (RecordTypeField(Atom("a"), type_app("integer")),))
        assert format(tree) == "#r{a :: integer()}"


class TestAttributes:
    def test_generic(self) -> None:
        assert format(attribute("module", Atom("foo"))) == "-module(foo)."
        exports = List((ArityQualifier(Atom("foo"), Integer(1)),))
        assert format(attribute("export", exports)) == "-export([foo/1])."

    def test_without_arguments(self) -> None:
        assert format(Attribute(Atom("endif"))) == "-endif."

    def test_if_directive_is_not_quoted(self) -> None:
        assert format(attribute("if", Atom("true"))) == "-if(true)."

    def test_spec(self) -> None:
        signature = FunctionType((type_app("integer"),), type_app("atom"))
        spec = Tuple((Tuple((Atom("foo"), Integer(1))), List((signature,))))
        assert format(attribute("spec", spec)) == "-spec foo(integer()) -> atom()."

    def test_remote_spec(self) -> None:
        signature = FunctionType((), Atom("ok"))
        name = Tuple((Atom("m"), Atom("foo"), Integer(0)))
        assert format(attribute("spec", Tuple((name, List((signature,)))))) == "-spec m:foo() -> ok."

    def test_constrained_spec(self) -> None:
        constraint = Constraint(Atom("is_subtype"), (T, type_app("atom")))
        signature = ConstrainedFunctionType(FunctionType((T,), T), Conjunction((constraint,)))
        spec = Tuple((Tuple((Atom("id"), Integer(1))), List((signature,))))
        assert format(attribute("spec", spec)) == "-spec id(T) -> T when T :: atom()."

    def test_callback_with_several_clauses(self) -> None:
        clauses = List(
            (
                FunctionType((Atom("a"),), Atom("x")),
                FunctionType((Atom("b"),), Atom("y")),
            )
        )
        spec = Tuple((Tuple((Atom("h"), Integer(1))), clauses))
        assert format(attribute("callback", spec)) == "-callback h(a) -> x;\n           (b) -> y."

    def test_type(self) -> None:
        payload = Tuple((Atom("id"), type_app("integer"), Nil()))
        assert format(attribute("type", payload)) == "-type id() :: integer()."

    def test_parameterized_opaque(self) -> None:
        body = TypeUnion((Atom("leaf"), TupleType((Atom("node"), T))))
        payload = Tuple((Atom("tree"), body, List((T,))))
        assert format(attribute("opaque", payload)) == "-opaque tree(T) :: leaf | {node, T}."

    def test_export_type(self) -> None:
        names = List((Tuple((Atom("id"), Integer(0))), Tuple((Atom("tree"), Integer(1)))))
        assert format(attribute("export_type", names)) == "-export_type([id/0, tree/1])."

    def test_typed_record_field(self) -> None:
        field = TypedRecordField(RecordField(Atom("a"), Integer(1)), type_app("integer"))
        tree = attribute("record", Atom("r"), Tuple((field,)))
        assert format(tree) == "-record(r, {a = 1 :: integer()})."

    def test_bare_macro_in_spec_is_printed_verbatim(self) -> None:
        signature = FunctionType((Macro(T),), Atom("ok"))
        spec = Tuple((Tuple((Atom("foo"), Integer(1))), List((signature,))))
        assert format(attribute("spec", spec)) == "-spec foo(?T) -> ok."

    def test_dodge_macros_keeps_macros_with_arguments(self) -> None:
        tree = Tuple((Macro(T), Macro(T, (Atom("a"),))))
        dodged = dodge_macros(tree)
        assert dodged.elements[0] == Text("?T")
        assert dodged.elements[1] == Macro(T, (Atom("a"),))
        assert format(dodged) == "{?T, ?T(a)}"

    @pytest.mark.parametrize(
        "tree",
        [
            attribute("spec", Atom("foo")),
            Attribute(Atom("spec")),
            attribute("type", Tuple((Atom("t"), Atom("x"), Atom("bad")))),
            attribute("export_type", List((Atom("x"),))),
            attribute("spec", Tuple((Atom("foo"), List((Atom("a"),), T)))),
        ],
    )
    def test_malformed(self, tree: Attribute) -> None:
        with pytest.raises(MalformedAttributeError):
            format(tree)


# =============================================================================
# Forms, comments and markers
# =============================================================================


class TestForms:
    def test_forms_separated_by_blank_line(self) -> None:
        tree = FormList(
            (
                attribute("module", Atom("m")),
                Function(Atom("foo"), (Clause((), None, (Atom("ok"),)),)),
            )
        )
        assert format(tree) == "-module(m).\n\nfoo() -> ok."

    def test_standalone_comment(self) -> None:
        assert format(Comment((" hello", " world"))) == "% hello\n% world"

    def test_padded_standalone_comment(self) -> None:
        assert format(Comment((" a", " b"), padding=4)) == "    % a\n    % b"

    def test_header_comment_form(self) -> None:
        tree = FormList((Comment((" header",)), attribute("module", Atom("m"))))
        assert format(tree) == "% header\n\n-module(m)."

    def test_eof_marker_is_empty(self) -> None:
        assert format(EofMarker()) == ""


class TestMarkers:
    INFO = ErrorInfo(3, "erl_parse", "syntax error")

    def test_error_with_formatter(self) -> None:
        renderer = ErlangRenderer(error_formatters={"erl_parse": str})
        assert renderer.format(ErrorMarker(self.INFO)) == "** 3: syntax error **"

    def test_error_without_formatter_prints_term(self) -> None:
        assert format(ErrorMarker(self.INFO)) == '** {3, erl_parse, "syntax error"} **'

    def test_failing_formatter_falls_back(self) -> None:
        def broken(term: object) -> str:
            raise ValueError(term)

        renderer = ErlangRenderer(error_formatters={"erl_parse": broken})
        assert renderer.format(ErrorMarker(self.INFO)) == '** {3, erl_parse, "syntax error"} **'

    def test_non_text_result_falls_back(self) -> None:
        renderer = ErlangRenderer(error_formatters={"erl_parse": lambda term: 42})
        assert renderer.format(ErrorMarker(self.INFO)) == '** {3, erl_parse, "syntax error"} **'

    def test_warning_without_line(self) -> None:
        renderer = ErlangRenderer(error_formatters={"lint": lambda term: f"{term} variable"})
        marker = WarningMarker(ErrorInfo(0, "lint", "unused"))
        assert renderer.format(marker) == "%% WARNING: unused variable"

    def test_arbitrary_payload(self) -> None:
        assert format(ErrorMarker(("bad", 1))) == '** {"bad", 1} **'


# =============================================================================
# Errors
# =============================================================================


@dataclass(frozen=True, slots=True)
class Bogus(Node):
    pass


class TestErrors:
    def test_unknown_node(self) -> None:
        with pytest.raises(UnknownNodeError, match="Bogus"):
            format(Bogus())

    def test_unknown_node_deep_in_tree(self) -> None:
        with pytest.raises(UnknownNodeError):
            format(Tuple((Atom("a"), Bogus())))

    def test_error_names_location(self) -> None:
        with pytest.raises(UnknownNodeError) as exc_info:
            format(Bogus(location=SourceLocation(5, 2)))
        assert str(exc_info.value).startswith("5:2 ")
        assert exc_info.value.location == SourceLocation(5, 2)

    def test_config_is_used(self) -> None:
        renderer = ErlangRenderer(FormatConfig(paper=20))
        assert renderer.config.paper == 20
