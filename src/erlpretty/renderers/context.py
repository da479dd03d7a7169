"""Per-node rendering context.

A RenderContext travels down the tree with every render call. It is
immutable: each child gets a derived copy, so a context can never be
changed behind the back of the node that created it.

Thread Safety:
    Frozen dataclass; safe to share.

"""

from dataclasses import dataclass, replace
from enum import Enum, auto

from erlpretty.config import FormatConfig, TextEncoding
from erlpretty.layout import Document


class ClauseKind(Enum):
    """The construct a clause is rendered in.

    Decides how a generic clause prints: ``(Args) -> Body`` for functions
    and funs, ``Pattern -> Body`` for case/receive/try, ``Guard -> Body``
    for if.

    """

    NONE = auto()
    CASE = auto()
    IF = auto()
    RECEIVE = auto()
    TRY = auto()
    FUN = auto()
    SPEC = auto()
    FUNCTION = auto()


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Immutable state threaded through the translation.

    Attributes:
        prec: Lowest precedence the enclosing position accepts without
            parentheses
        paper: Paper width of the whole render pass
        ribbon: Ribbon width of the whole render pass
        break_indent: Indentation for broken clause bodies and operands
        sub_indent: Indentation for nested blocks
        clause: Construct the next clause belongs to
        function_name: Name document printed before each clause head when
            ``clause`` is ``FUNCTION``
        encoding: Encoding used to spell atoms, characters and strings

    """

    prec: int = 0
    paper: int = 80
    ribbon: int = 56
    break_indent: int = 4
    sub_indent: int = 2
    clause: ClauseKind = ClauseKind.NONE
    function_name: Document | None = None
    encoding: TextEncoding = TextEncoding.UTF8

    @classmethod
    def from_config(cls, config: FormatConfig) -> "RenderContext":
        return cls(
            paper=config.paper,
            ribbon=config.ribbon,
            break_indent=config.break_indent,
            sub_indent=config.sub_indent,
            encoding=config.encoding,
        )

    def with_prec(self, prec: int) -> "RenderContext":
        if prec == self.prec:
            return self
        return replace(self, prec=prec)

    def reset_prec(self) -> "RenderContext":
        """Context for freshly bracketed positions (elements, arguments)."""
        return self.with_prec(0)

    def with_clause(
        self, clause: ClauseKind, function_name: Document | None = None
    ) -> "RenderContext":
        return replace(self, clause=clause, function_name=function_name)

    def without_clause(self) -> "RenderContext":
        if self.clause is ClauseKind.NONE and self.function_name is None:
            return self
        return replace(self, clause=ClauseKind.NONE, function_name=None)
