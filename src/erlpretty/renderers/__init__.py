"""erlpretty renderers.

Renderers convert typed syntax trees into layout documents and text.

Available Renderers:
- ErlangRenderer: Renders syntax trees to Erlang source text

Thread Safety:
All per-render state lives in immutable RenderContext values created for
each call. Safe for concurrent use from multiple threads.

"""

from erlpretty.renderers.context import ClauseKind, RenderContext
from erlpretty.renderers.erlang import ErlangRenderer, ErrorFormatter, dodge_macros
from erlpretty.renderers.protocol import SyntaxRenderer

__all__ = [
    "ClauseKind",
    "ErlangRenderer",
    "ErrorFormatter",
    "RenderContext",
    "SyntaxRenderer",
    "dodge_macros",
]
