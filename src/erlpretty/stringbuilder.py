"""StringBuilder for O(n) string accumulation.

Appends to a list, joins once at the end: O(n) total vs O(n²) for
repeated string concatenation. The layout engine emits resolved lines
through it.

Thread Safety:
StringBuilder instances are local to each resolve() call.
No shared mutable state.

"""

from __future__ import annotations


class StringBuilder:
    """Efficient string accumulator.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.append_line("foo() ->", 0)
            >>> sb.append_line("ok.", 4)
            >>> sb.build()
            'foo() ->\\n    ok.'

    """

    __slots__ = ("_parts", "_lines")

    def __init__(self) -> None:
        """Initialize empty StringBuilder."""
        self._parts: list[str] = []
        self._lines = 0

    def append_line(self, s: str, indent: int = 0) -> StringBuilder:
        """Append one output line indented by ``indent`` spaces.

        Lines are separated by newlines; no newline follows the last line.
        Trailing whitespace is dropped and blank lines carry no indentation.

        """
        if self._lines:
            self._parts.append("\n")
        self._lines += 1
        s = s.rstrip()
        if s:
            if indent > 0:
                self._parts.append(" " * indent)
            self._parts.append(s)
        return self

    def build(self) -> str:
        """Join all parts into final string."""
        return "".join(self._parts)

    def __len__(self) -> int:
        """Return number of lines appended so far."""
        return self._lines
