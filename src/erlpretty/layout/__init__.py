"""Bounded-width document layout.

The renderer builds documents with the constructors exported here and hands
them to :func:`resolve`, which picks a layout for a given paper and ribbon
width.

Example:
    >>> from erlpretty.layout import beside, par, resolve, text
    >>> doc = beside(text("foo("), beside(par([text("a,"), text("b")]), text(")")))
    >>> resolve(doc)
    'foo(a, b)'

"""

from erlpretty.layout.documents import (
    Above,
    Beside,
    Document,
    Empty,
    Floating,
    Nest,
    Sep,
    Text,
    above,
    beside,
    break_,
    empty,
    floating,
    follow,
    nest,
    par,
    sep,
    text,
)
from erlpretty.layout.engine import resolve

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
    "resolve",
    "sep",
    "text",
]
