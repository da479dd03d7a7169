"""Source location tracking for syntax tree nodes.

Provides SourceLocation dataclass for positions reported by the external
parser. Used in error messages and by error/warning markers.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Position of a node in the original Erlang source.

    Lines and columns are 1-indexed. A line of 0 marks a synthetic node
    (one the parser did not read from source).

    Attributes:
        line: Line number (1-indexed, 0 when unknown)
        column: Column number (1-indexed, 0 when unknown)
        source_file: Source file path (optional)

    Examples:
            >>> loc = SourceLocation(12, 5, "src/foo.erl")
            >>> str(loc)
            'src/foo.erl:12:5'

    """

    line: int
    column: int = 0
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "foo.erl:10:5", "10:5" or "10"
        """
        position = f"{self.line}:{self.column}" if self.column else f"{self.line}"
        if self.source_file:
            return f"{self.source_file}:{position}"
        return position

    @property
    def is_known(self) -> bool:
        """True when the location points into real source text."""
        return self.line > 0

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Create an unknown/placeholder location.

        Use for nodes created synthetically or when location is unavailable.
        """
        return cls(line=0, column=0)


UNKNOWN_LOCATION = SourceLocation.unknown()
