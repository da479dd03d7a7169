"""Exception classes for erlpretty.

Provides standardized exceptions for error handling throughout erlpretty.

Rendering errors are programming errors: they signal a mismatch between the
syntax tree handed in and the grammar the renderer targets, and are never
recovered from inside the package.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from erlpretty.location import SourceLocation


class ErlprettyError(Exception):
    """Base exception for all erlpretty errors.

    Subclass this for specific error categories.
    """

    pass


class RenderError(ErlprettyError):
    """Error while translating a syntax tree into a layout document."""

    def __init__(self, message: str, location: SourceLocation | None = None) -> None:
        """Initialize render error with optional location.

        Args:
            message: Error description
            location: Position of the offending node (optional)
        """
        self.message = message
        self.location = location

        prefix = ""
        if location is not None and location.line > 0:
            prefix = f"{location} "
        super().__init__(f"{prefix}{message}")


class UnknownNodeError(RenderError):
    """Raised for a node type the renderer has no rule for."""

    def __init__(self, node: object) -> None:
        self.node = node
        location = getattr(node, "location", None)
        super().__init__(f"cannot render node of type {type(node).__name__}", location)


class MalformedAttributeError(RenderError):
    """Raised when an attribute's arguments do not have the expected shape.

    For example a ``-spec`` attribute whose argument is not a single
    ``{Name, Types}`` tuple.
    """

    def __init__(
        self,
        attribute: str,
        detail: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.attribute = attribute
        super().__init__(f"malformed -{attribute} attribute: {detail}", location)


class UnknownOperatorError(ErlprettyError):
    """Raised when an operator symbol has no precedence entry."""

    def __init__(self, symbol: str, table: str) -> None:
        self.symbol = symbol
        self.table = table
        super().__init__(f"no {table} precedence for operator {symbol!r}")


class ConfigError(ErlprettyError):
    """Raised for invalid format configuration values."""

    pass


class SerializationError(ErlprettyError):
    """Raised when a serialized syntax tree cannot be decoded."""

    pass
