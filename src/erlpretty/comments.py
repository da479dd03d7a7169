"""Comment attachment.

Wraps the document of a node with the comments the parser attached to it:
leading comments go on the lines directly above, trailing comments go at
the end of the node's first line, each padded by a few spaces.

Both blocks are floating and end with a forced line break, so code placed
after a trailing comment continues on the next line, and separators such
as ``,`` slide in front of the comment.

"""

from collections.abc import Sequence

from erlpretty.layout import Document, above, beside, break_, empty, floating, text
from erlpretty.nodes import Comment, Placement

# Default number of spaces before a trailing comment.
PADDING = 2


def stack_comment_lines(lines: Sequence[str]) -> Document:
    """Stack comment lines, each prefixed with ``%``."""
    docs = [text("%" + line) for line in lines]
    if not docs:
        return empty()
    result = docs[-1]
    for doc in reversed(docs[:-1]):
        result = above(doc, result)
    return result


def _stack_comments(comments: Sequence[Comment], pad: bool) -> Document:
    result: Document | None = None
    for comment in reversed(comments):
        doc = stack_comment_lines(comment.lines)
        if pad:
            padding = PADDING if comment.padding is None else comment.padding
            doc = beside(text(" " * max(padding, 0)), doc)
        result = doc if result is None else above(doc, result)
    return result if result is not None else empty()


def lay_leading(comments: Sequence[Comment], doc: Document) -> Document:
    """Put leading comments above ``doc``, ignoring their padding."""
    if not comments:
        return doc
    return above(floating(break_(_stack_comments(comments, False)), -1, -1), doc)


def lay_trailing(comments: Sequence[Comment], doc: Document) -> Document:
    """Put trailing comments beside ``doc``, each with its own padding."""
    if not comments:
        return doc
    return beside(doc, floating(break_(_stack_comments(comments, True)), 1, 0))


def attach_comments(doc: Document, comments: Sequence[Comment]) -> Document:
    """Wrap ``doc`` with its attached comments.

    Trailing comments are attached first and leading comments last, so
    the leading block sits above the node and its trailing comments.

    """
    if not comments:
        return doc
    leading = [c for c in comments if c.placement is Placement.LEADING]
    trailing = [c for c in comments if c.placement is Placement.TRAILING]
    return lay_leading(leading, lay_trailing(trailing, doc))


def standalone_comment(comment: Comment) -> Document:
    """Document for a comment that is a node of its own.

    Standalone comments are not padded unless they say so.

    """
    doc = stack_comment_lines(comment.lines)
    if comment.padding is not None and comment.padding > 0:
        doc = beside(text(" " * comment.padding), doc)
    return floating(break_(doc))


__all__ = [
    "PADDING",
    "attach_comments",
    "lay_leading",
    "lay_trailing",
    "stack_comment_lines",
    "standalone_comment",
]
