"""Tests for small utilities: logger namespacing and StringBuilder."""

import logging

import pytest

from erlpretty import Atom, ErrorInfo, ErrorMarker, Formatter, format
from erlpretty.stringbuilder import StringBuilder
from erlpretty.utils import get_logger


class TestGetLogger:
    def test_prefix_added(self) -> None:
        assert get_logger("mymodule").name == "erlpretty.mymodule"

    def test_package_names_kept(self) -> None:
        assert get_logger("erlpretty").name == "erlpretty"
        assert get_logger("erlpretty.layout.engine").name == "erlpretty.layout.engine"

    def test_failing_error_formatter_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken(term: object) -> str:
            raise ValueError("no such message")

        formatter = Formatter(error_formatters={"erl_lint": broken})
        with caplog.at_level(logging.DEBUG, logger="erlpretty"):
            formatter(ErrorMarker(ErrorInfo(1, "erl_lint", "x")))
        assert any("no such message" in record.getMessage() for record in caplog.records)

    def test_formatting_logs_render_and_resolve(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="erlpretty"):
            format(Atom("ok"))
        names = {record.name for record in caplog.records}
        assert {"erlpretty.renderers.erlang", "erlpretty.layout.engine"} <= names


class TestStringBuilder:
    def test_lines_joined_without_trailing_newline(self) -> None:
        sb = StringBuilder()
        sb.append_line("foo() ->", 0).append_line("ok.", 4)
        assert sb.build() == "foo() ->\n    ok."
        assert len(sb) == 2

    def test_trailing_whitespace_dropped(self) -> None:
        sb = StringBuilder()
        sb.append_line("a   ", 2)
        assert sb.build() == "  a"

    def test_blank_line_has_no_indent(self) -> None:
        sb = StringBuilder()
        sb.append_line("a").append_line("", 8).append_line("b")
        assert sb.build() == "a\n\nb"
