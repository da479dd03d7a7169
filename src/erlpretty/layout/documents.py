"""Document algebra for bounded-width layout.

A document is an immutable value standing for a set of possible text
layouts. Documents are composed with the constructors in this module and
resolved into concrete text by :func:`erlpretty.layout.engine.resolve`.

The algebra follows Hughes' pretty-printing combinators:

- ``text(s)``: a single line of text
- ``nest(n, d)``: ``d`` shifted right by ``n`` columns when it starts a line
- ``above(d1, d2)``: ``d2`` on the lines below ``d1``, same left margin
- ``beside(d1, d2)``: ``d2`` continuing the last line of ``d1``; the rest of
  ``d2`` is aligned with the column where it started
- ``sep(ds)``: all of ``ds`` on one line separated by spaces, or all stacked
- ``par(ds, offset)``: ``ds`` filled into lines like words in a paragraph
- ``floating(d, h, v)``: ``d``, but free to change places with neighbouring
  floating documents according to the priorities ``h`` and ``v``
- ``break_(d)``: ``d`` followed by a forced line break
- ``empty()``: the document with neither width nor height

Thread Safety:
    All documents are frozen dataclasses and safe to share across threads.

"""

from collections.abc import Iterable
from dataclasses import dataclass

# =============================================================================
# Document variants
# =============================================================================


@dataclass(frozen=True, slots=True)
class Document:
    """Base class for all layout documents."""


@dataclass(frozen=True, slots=True)
class Empty(Document):
    """The document with neither width nor height.

    Unlike ``text("")`` it occupies no line at all, so ``above(d, empty())``
    forces a line break after ``d`` without leaving a blank line.

    """


@dataclass(frozen=True, slots=True)
class Text(Document):
    """A fixed string on a single line."""

    string: str


@dataclass(frozen=True, slots=True)
class Nest(Document):
    """Indents ``body`` by ``indent`` columns relative to its context."""

    indent: int
    body: Document


@dataclass(frozen=True, slots=True)
class Above(Document):
    """``lower`` placed on the lines following ``upper``."""

    upper: Document
    lower: Document


@dataclass(frozen=True, slots=True)
class Beside(Document):
    """``right`` placed directly after the last character of ``left``."""

    left: Document
    right: Document


@dataclass(frozen=True, slots=True)
class Sep(Document):
    """A sequence laid out horizontally or vertically.

    With ``fill`` unset the choice is all-or-nothing; with ``fill`` set the
    items are packed into as few lines as fit (paragraph style). Lines after
    the first are indented by ``offset`` relative to the enclosing margin.

    """

    items: tuple[Document, ...]
    offset: int = 0
    fill: bool = False


@dataclass(frozen=True, slots=True)
class Floating(Document):
    """A document that may swap places with adjacent floating documents.

    In a horizontal chain a floating document with a higher ``horizontal``
    priority moves to the right of a neighbouring floating document with a
    lower one.

    """

    body: Document
    horizontal: int = 0
    vertical: int = 0


_EMPTY = Empty()

# =============================================================================
# Constructors
# =============================================================================


def empty() -> Document:
    """Return the empty document."""
    return _EMPTY


def text(string: str) -> Document:
    """Return a document for a single line of text.

    The string must not contain line breaks.

    """
    return Text(string)


def nest(indent: int, doc: Document) -> Document:
    """Indent ``doc`` by ``indent`` columns."""
    if indent == 0:
        return doc
    return Nest(indent, doc)


def above(upper: Document, lower: Document) -> Document:
    """Place ``lower`` below ``upper``."""
    return Above(upper, lower)


def beside(left: Document, right: Document) -> Document:
    """Place ``right`` directly after ``left``."""
    return Beside(left, right)


def sep(docs: Iterable[Document]) -> Document:
    """Arrange ``docs`` all on one line or all stacked vertically."""
    return _sequence(docs, 0, fill=False)


def par(docs: Iterable[Document], offset: int = 0) -> Document:
    """Arrange ``docs`` in paragraph style.

    Any element that needs more than one line is put on lines of its own;
    lines after the first are indented ``offset`` columns relative to the
    start of the first element.

    """
    return _sequence(docs, offset, fill=True)


def floating(doc: Document, horizontal: int = 0, vertical: int = 0) -> Document:
    """Mark ``doc`` as floating with the given priorities."""
    return Floating(doc, horizontal, vertical)


def break_(doc: Document) -> Document:
    """Force a line break after ``doc``."""
    return Above(doc, _EMPTY)


def follow(first: Document, second: Document, offset: int = 0) -> Document:
    """Separate two documents by a space or by a line break plus ``offset``.

    Produces either ``first second`` or ``first`` with ``second`` starting
    on the next line, ``offset`` columns in. ``second`` may itself span
    several lines in both cases.

    """
    return beside(par([first, text("")], offset), second)


def _sequence(docs: Iterable[Document], offset: int, *, fill: bool) -> Document:
    items = tuple(docs)
    if not items:
        return _EMPTY
    if len(items) == 1:
        return items[0]
    return Sep(items, offset, fill)


__all__ = [
    "Above",
    "Beside",
    "Document",
    "Empty",
    "Floating",
    "Nest",
    "Sep",
    "Text",
    "above",
    "beside",
    "break_",
    "empty",
    "floating",
    "follow",
    "nest",
    "par",
    "sep",
    "text",
]
