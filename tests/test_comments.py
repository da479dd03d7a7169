"""Tests for comment attachment."""

from erlpretty import (
    Atom,
    CaseExpr,
    Clause,
    Comment,
    FormList,
    Function,
    List,
    Placement,
    Tuple,
    Variable,
    format,
)
from erlpretty.comments import stack_comment_lines
from erlpretty.layout import resolve


def leading(*lines: str, padding: int | None = None) -> Comment:
    return Comment(lines, padding)


def trailing(*lines: str, padding: int | None = None) -> Comment:
    return Comment(lines, padding, Placement.TRAILING)


class TestStacking:
    def test_lines_get_percent_prefix(self) -> None:
        assert resolve(stack_comment_lines([" x", " y"])) == "% x\n% y"

    def test_no_lines(self) -> None:
        assert resolve(stack_comment_lines([])) == ""


class TestAttachment:
    def test_leading_above_trailing_beside(self) -> None:
        node = Atom("ok", comments=(leading(" a"), trailing(" b")))
        assert format(node) == "% a\nok  % b"

    def test_leading_ignores_padding(self) -> None:
        node = Atom("ok", comments=(leading(" a", padding=6),))
        assert format(node) == "% a\nok"

    def test_multi_line_leading(self) -> None:
        node = Atom("ok", comments=(leading(" a", " b"),))
        assert format(node) == "% a\n% b\nok"

    def test_explicit_trailing_padding(self) -> None:
        node = Atom("ok", comments=(trailing(" b", padding=4),))
        assert format(node) == "ok    % b"

    def test_trailing_comments_stack_beside_first_line(self) -> None:
        node = Atom("ok", comments=(trailing(" b"), trailing(" c")))
        assert format(node) == "ok  % b\n    % c"


class TestPlacementInContext:
    def test_comma_moves_before_trailing_comment(self) -> None:
        tree = Tuple((Atom("a", comments=(trailing(" c"),)), Atom("b")))
        assert format(tree) == "{a,  % c\n b}"

    def test_leading_comment_on_list_element(self) -> None:
        tree = List((Atom("a"), Atom("b", comments=(leading(" b"),))))
        assert format(tree) == "[a,\n % b\n b]"

    def test_full_stop_moves_before_trailing_comment(self) -> None:
        body = Atom("ok", comments=(trailing(" done"),))
        tree = Function(Atom("foo"), (Clause((), None, (body,)),))
        assert format(tree) == "foo() ->\n    ok.  % done"

    def test_arrow_moves_before_trailing_comment(self) -> None:
        pattern = Atom("a", comments=(trailing(" c"),))
        tree = CaseExpr(Variable("X"), (Clause((pattern,), None, (Atom("ok"),)),))
        assert format(tree) == "case X of\n  a ->  % c\n      ok\nend"

    def test_comment_above_function(self) -> None:
        function = Function(
            Atom("foo"),
            (Clause((), None, (Atom("ok"),)),),
            comments=(leading(" Doc"),),
        )
        tree = FormList((Atom("x"), function))
        assert format(tree) == "x\n\n% Doc\nfoo() -> ok."
