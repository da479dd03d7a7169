"""Layout resolution: turns a document into bounded-width text.

The solver is greedy and works left to right, top to bottom. Every choice
point (``sep`` and ``par``) is decided once, from the current column and a
look-ahead of the width that must still follow on the same line:

- ``sep`` goes horizontal when every item fits flat on the current line,
  otherwise every item gets a line of its own;
- ``par`` keeps adding flat items to the current line while they fit and
  starts a new line otherwise; an item that needs several lines always
  starts a new line and is followed by one.

A line fits when its end stays within the paper width and its text,
not counting indentation, stays within the ribbon width. A single token
wider than the budget is emitted anyway.

Thread Safety:
    A fresh _Resolver is created per resolve() call. Documents are
    immutable and may be shared.

"""

from erlpretty.config import PAPER, RIBBON
from erlpretty.layout.documents import (
    Above,
    Beside,
    Document,
    Empty,
    Floating,
    Nest,
    Sep,
    Text,
)
from erlpretty.stringbuilder import StringBuilder
from erlpretty.utils.logger import get_logger

logger = get_logger(__name__)

_UNBOUNDED = 1 << 30


class _Line:
    """One output line: text anchored at an absolute column."""

    __slots__ = ("column", "text")

    def __init__(self, column: int, text: str) -> None:
        self.column = column
        self.text = text


class _Anchor:
    """Insertion point in front of a trailing comment."""

    __slots__ = ("line", "index", "priority")

    def __init__(self, line: _Line, index: int, priority: int) -> None:
        self.line = line
        self.index = index
        self.priority = priority


class _Box:
    """A concrete layout of one document.

    ``end`` is the column where content placed beside the box continues.
    ``last_start`` is the column where the text of the last line begins,
    used for ribbon measurement. When ``closed`` is set the box ends with a
    forced line break: whatever follows starts on a new line at ``end``.
    ``anchor`` marks where a closed box's trailing comment begins, so a
    separator that follows can still be put in front of it.

    """

    __slots__ = ("lines", "end", "last_start", "closed", "anchor")

    def __init__(
        self,
        lines: list[_Line],
        end: int,
        last_start: int,
        closed: bool,
        anchor: _Anchor | None = None,
    ) -> None:
        self.lines = lines
        self.end = end
        self.last_start = last_start
        self.closed = closed
        self.anchor = anchor

    def extend(self, other: "_Box") -> None:
        """Append ``other`` on the lines after this box."""
        self.lines.extend(other.lines)
        self.end = other.end
        self.last_start = other.last_start
        self.closed = other.closed
        self.anchor = other.anchor


class _Resolver:
    """Per-call state: widths plus memo tables keyed by document identity."""

    __slots__ = ("_paper", "_ribbon", "_empty", "_rigid", "_head", "_parts")

    def __init__(self, paper: int, ribbon: int) -> None:
        self._paper = paper
        self._ribbon = ribbon
        self._empty: dict[int, bool] = {}
        self._rigid: dict[int, bool] = {}
        self._head: dict[int, int] = {}
        self._parts: dict[int, list[Document]] = {}

    def lay(self, doc: Document) -> _Box:
        return self._lay(doc, 0, 0, 0, 0)

    # -- Structural measures ---------------------------------------------------

    def is_empty(self, doc: Document) -> bool:
        """True when ``doc`` produces no lines at all."""
        key = id(doc)
        cached = self._empty.get(key)
        if cached is not None:
            return cached
        match doc:
            case Empty():
                result = True
            case Text():
                result = False
            case Nest(body=body) | Floating(body=body):
                result = self.is_empty(body)
            case Above(upper=first, lower=second) | Beside(left=first, right=second):
                result = self.is_empty(first) and self.is_empty(second)
            case Sep(items=items):
                result = all(self.is_empty(item) for item in items)
            case _:
                raise TypeError(f"not a layout document: {doc!r}")
        self._empty[key] = result
        return result

    def parts(self, doc: Beside) -> list[Document]:
        """Flatten a chain of ``beside`` into its non-empty parts.

        Adjacent floating parts are reordered so that higher horizontal
        priority ends up further right.

        """
        key = id(doc)
        cached = self._parts.get(key)
        if cached is not None:
            return cached
        parts: list[Document] = []
        stack: list[Document] = [doc]
        while stack:
            current = stack.pop()
            if isinstance(current, Beside):
                stack.append(current.right)
                stack.append(current.left)
            elif not self.is_empty(current):
                parts.append(current)
        swapped = True
        while swapped:
            swapped = False
            for i in range(len(parts) - 1):
                left, right = parts[i], parts[i + 1]
                if (
                    isinstance(left, Floating)
                    and isinstance(right, Floating)
                    and left.horizontal > right.horizontal
                ):
                    parts[i], parts[i + 1] = right, left
                    swapped = True
        self._parts[key] = parts
        return parts

    def rigid(self, doc: Document) -> bool:
        """True when ``doc`` always lays out as one line with no break after."""
        key = id(doc)
        cached = self._rigid.get(key)
        if cached is not None:
            return cached
        match doc:
            case Empty() | Text():
                result = True
            case Nest(body=body) | Floating(body=body):
                result = self.rigid(body)
            case Beside():
                result = all(self.rigid(part) for part in self.parts(doc))
            case Above(upper=upper, lower=lower):
                result = self.is_empty(upper) and self.rigid(lower)
            case Sep(items=items):
                present = [item for item in items if not self.is_empty(item)]
                result = len(present) <= 1 and all(self.rigid(item) for item in present)
            case _:
                raise TypeError(f"not a layout document: {doc!r}")
        self._rigid[key] = result
        return result

    def head(self, doc: Document) -> int:
        """Width of the first line of ``doc`` when broken as much as possible."""
        key = id(doc)
        cached = self._head.get(key)
        if cached is not None:
            return cached
        match doc:
            case Empty():
                result = 0
            case Text(string=string):
                result = len(string)
            case Nest(body=body) | Floating(body=body):
                result = self.head(body)
            case Beside():
                result = self._lookahead(self.parts(doc), 0, 0)
            case Above(upper=upper, lower=lower):
                result = self.head(lower) if self.is_empty(upper) else self.head(upper)
            case Sep(items=items):
                present = [item for item in items if not self.is_empty(item)]
                result = self.head(present[0]) if present else 0
            case _:
                raise TypeError(f"not a layout document: {doc!r}")
        self._head[key] = result
        return result

    def _lookahead(self, parts: list[Document], index: int, rest: int) -> int:
        """Minimum width that parts[index:] put on the current line."""
        width = 0
        for part in parts[index:]:
            width += self.head(part)
            if not self.rigid(part):
                return width
        return width + rest

    def flat(self, doc: Document, budget: int) -> str | None:
        """Single-line rendering of ``doc`` within ``budget`` columns.

        Returns None when ``doc`` cannot be put on one line (it contains a
        forced break or a vertical stack) or is wider than ``budget``.

        """
        if budget < 0:
            return None
        match doc:
            case Empty():
                return ""
            case Text(string=string):
                return string if len(string) <= budget else None
            case Nest(body=body) | Floating(body=body):
                return self.flat(body, budget)
            case Beside():
                pieces: list[str] = []
                for part in self.parts(doc):
                    piece = self.flat(part, budget)
                    if piece is None:
                        return None
                    budget -= len(piece)
                    pieces.append(piece)
                return "".join(pieces)
            case Above(upper=upper, lower=lower):
                if self.is_empty(upper):
                    return self.flat(lower, budget)
                return None
            case Sep(items=items):
                pieces = []
                for item in items:
                    if self.is_empty(item):
                        continue
                    if pieces:
                        budget -= 1
                    piece = self.flat(item, budget)
                    if piece is None:
                        return None
                    budget -= len(piece)
                    pieces.append(piece)
                return " ".join(pieces)
            case _:
                raise TypeError(f"not a layout document: {doc!r}")

    def _budget(self, column: int, start: int, rest: int) -> int:
        return min(self._paper - column, self._ribbon - (column - start)) - rest

    # -- Layout ----------------------------------------------------------------

    def _lay(self, doc: Document, col: int, margin: int, start: int, rest: int) -> _Box:
        """Lay out ``doc`` starting at column ``col``.

        Args:
            doc: Document to lay out
            col: Column of the first character
            margin: Column that lines after the first are aligned to
            start: Column where the text of the current line began
            rest: Width that must still fit after the last line

        """
        match doc:
            case Empty():
                return _Box([], col, start, False)
            case Text(string=string):
                return _Box([_Line(col, string)], col + len(string), start, False)
            case Nest(indent=indent, body=body):
                if col == start:
                    return self._lay(body, col + indent, margin + indent, col + indent, rest)
                return self._lay(body, col, margin, start, rest)
            case Floating(body=body, horizontal=horizontal):
                box = self._lay(body, col, margin, start, rest)
                if box.closed and horizontal > 0 and box.lines:
                    box.anchor = _Anchor(box.lines[0], 0, horizontal)
                return box
            case Beside():
                return self._lay_beside(self.parts(doc), col, margin, start, rest)
            case Above(upper=upper, lower=lower):
                if self.is_empty(upper):
                    return self._lay(lower, col, margin, start, rest)
                box = self._lay(upper, col, margin, start, 0)
                if self.is_empty(lower):
                    return _Box(box.lines, margin, margin, True, box.anchor)
                box.extend(self._lay(lower, margin, margin, margin, rest))
                return box
            case Sep(items=items, offset=offset, fill=fill):
                present = [item for item in items if not self.is_empty(item)]
                if not present:
                    return _Box([], col, start, False)
                if len(present) == 1:
                    return self._lay(present[0], col, margin, start, rest)
                if fill:
                    return self._lay_fill(present, offset, col, margin, start, rest)
                flat = self.flat(doc, self._budget(col, start, rest))
                if flat is not None:
                    return _Box([_Line(col, flat)], col + len(flat), start, False)
                return self._lay_vertical(present, offset, col, margin, start, rest)
            case _:
                raise TypeError(f"not a layout document: {doc!r}")

    def _lay_beside(
        self, parts: list[Document], col: int, margin: int, start: int, rest: int
    ) -> _Box:
        if not parts:
            return _Box([], col, start, False)
        box = self._lay(parts[0], col, margin, start, self._lookahead(parts, 1, rest))
        for index in range(1, len(parts)):
            part_rest = self._lookahead(parts, index + 1, rest)
            if box.closed:
                if self._splice(box.anchor, parts[index]):
                    continue
                box.extend(self._lay(parts[index], box.end, box.end, box.end, part_rest))
                continue
            nxt = self._lay(parts[index], box.end, box.end, box.last_start, part_rest)
            if not nxt.lines:
                continue
            last = box.lines[-1]
            first = nxt.lines[0]
            pad = " " * (first.column - box.end)
            if nxt.anchor is not None and nxt.anchor.line is first:
                nxt.anchor.line = last
                nxt.anchor.index += len(last.text) + len(pad)
            last.text += pad + first.text
            box.lines.extend(nxt.lines[1:])
            box.end = nxt.end
            box.last_start = nxt.last_start
            box.closed = nxt.closed
            box.anchor = nxt.anchor
        return box

    def _splice(self, anchor: _Anchor | None, part: Document) -> bool:
        """Insert a floating separator in front of a trailing comment."""
        if anchor is None or not isinstance(part, Floating):
            return False
        if part.horizontal >= anchor.priority or not self.rigid(part):
            return False
        piece = self.flat(part, _UNBOUNDED)
        if piece is None:
            return False
        line = anchor.line
        line.text = line.text[: anchor.index] + piece + line.text[anchor.index :]
        anchor.index += len(piece)
        return True

    def _lay_vertical(
        self,
        items: list[Document],
        offset: int,
        col: int,
        margin: int,
        start: int,
        rest: int,
    ) -> _Box:
        inner = margin + offset
        last = len(items) - 1
        box = self._lay(items[0], col, margin, start, 0)
        for index in range(1, len(items)):
            item_rest = rest if index == last else 0
            box.extend(self._lay(items[index], inner, inner, inner, item_rest))
        return box

    def _lay_fill(
        self,
        items: list[Document],
        offset: int,
        col: int,
        margin: int,
        start: int,
        rest: int,
    ) -> _Box:
        inner = margin + offset
        last = len(items) - 1
        box = self._lay(items[0], col, margin, start, 0)
        multiline = len(box.lines) > 1
        for index in range(1, len(items)):
            item = items[index]
            item_rest = rest if index == last else 0
            if not multiline and not box.closed:
                column = box.end + 1
                flat = self.flat(item, self._budget(column, box.last_start, item_rest))
                if flat is not None:
                    box.lines[-1].text += " " + flat
                    box.end = column + len(flat)
                    continue
            nxt = self._lay(item, inner, inner, inner, item_rest)
            multiline = len(nxt.lines) > 1
            box.extend(nxt)
        return box


def resolve(doc: Document, paper: int = PAPER, ribbon: int = RIBBON) -> str:
    """Resolve a document into text.

    Args:
        doc: Document to lay out
        paper: Preferred maximum line length, including indentation
        ribbon: Preferred maximum line length, not counting indentation

    Returns:
        The laid-out text, lines separated by ``\\n``, without a trailing
        newline and without trailing whitespace on any line.

    """
    logger.debug("resolving document (paper=%d, ribbon=%d)", paper, ribbon)
    box = _Resolver(paper, ribbon).lay(doc)
    sb = StringBuilder()
    for line in box.lines:
        sb.append_line(line.text, line.column)
    return sb.build()


__all__ = ["resolve"]
