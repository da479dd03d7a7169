"""SyntaxRenderer protocol: stable interface for syntax tree renderers.

Any renderer that turns a node into a layout document and into text
conforms to this protocol. The built-in ``ErlangRenderer`` is the
reference implementation.

Example:
    from erlpretty.renderers.protocol import SyntaxRenderer

    def print_module(renderer: SyntaxRenderer, forms: FormList) -> str:
        return renderer.format(forms)

"""

from typing import Protocol

from erlpretty.layout import Document
from erlpretty.nodes import Node


class SyntaxRenderer(Protocol):
    """Protocol for syntax tree renderers."""

    def layout(self, node: Node) -> Document:
        """Translate a syntax tree into a layout document.

        The result can be embedded in a larger document before it is
        resolved.

        """
        ...

    def format(self, node: Node) -> str:
        """Translate and resolve a syntax tree into source text."""
        ...
