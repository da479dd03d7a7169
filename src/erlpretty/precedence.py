"""Operator precedence tables for Erlang expressions and types.

Each infix operator maps to a ``(left, own, right)`` triple and each prefix
operator to an ``(own, right)`` pair. An operand is rendered with the
binding precedence of its side as the minimum its context tolerates; an
operand whose own precedence is lower gets parenthesized.

Expression and type operators live in separate tables because the two
grammars give the same symbols different precedences (``#`` as record
operator vs. record type, ``..`` only in types).

Example:
    >>> infix_prec("+")
    (400, 400, 500)
    >>> type_infix_prec("|")
    (180, 170, 170)

"""

from types import MappingProxyType

from erlpretty.errors import UnknownOperatorError

type InfixPrec = tuple[int, int, int]
type PrefixPrec = tuple[int, int]

# Precedence of a function application: (callee, own).
FUNC_PREC: PrefixPrec = (800, 700)

# Highest precedence; forces parentheses around any operator expression.
MAX_PREC = 900

INFIX_PRECEDENCE: MappingProxyType[str, InfixPrec] = MappingProxyType({
    "=": (150, 100, 100),
    "!": (150, 100, 100),
    "orelse": (160, 150, 150),
    "andalso": (200, 160, 160),
    "==": (300, 200, 300),
    "/=": (300, 200, 300),
    "=<": (300, 200, 300),
    "<": (300, 200, 300),
    ">=": (300, 200, 300),
    ">": (300, 200, 300),
    "=:=": (300, 200, 300),
    "=/=": (300, 200, 300),
    "++": (400, 300, 300),
    "--": (400, 300, 300),
    "+": (400, 400, 500),
    "-": (400, 400, 500),
    "bor": (400, 400, 500),
    "bxor": (400, 400, 500),
    "bsl": (400, 400, 500),
    "bsr": (400, 400, 500),
    "or": (400, 400, 500),
    "xor": (400, 400, 500),
    "*": (500, 500, 600),
    "/": (500, 500, 600),
    "div": (500, 500, 600),
    "rem": (500, 500, 600),
    "band": (500, 500, 600),
    "and": (500, 500, 600),
    "#": (800, 700, 800),
    ":": (900, 800, 900),
    ".": (900, 900, 1000),
})

PREFIX_PRECEDENCE: MappingProxyType[str, PrefixPrec] = MappingProxyType({
    "catch": (0, 100),
    "+": (600, 700),
    "-": (600, 700),
    "bnot": (600, 700),
    "not": (600, 700),
    "#": (700, 800),
})

TYPE_INFIX_PRECEDENCE: MappingProxyType[str, InfixPrec] = MappingProxyType({
    "=": (150, 100, 100),
    "::": (160, 150, 150),
    "|": (180, 170, 170),
    "..": (300, 200, 300),
    "+": (400, 400, 500),
    "-": (400, 400, 500),
    "bor": (400, 400, 500),
    "bxor": (400, 400, 500),
    "bsl": (400, 400, 500),
    "bsr": (400, 400, 500),
    "*": (500, 500, 600),
    "div": (500, 500, 600),
    "rem": (500, 500, 600),
    "band": (500, 500, 600),
    "#": (800, 700, 800),
})

TYPE_PREFIX_PRECEDENCE: MappingProxyType[str, PrefixPrec] = MappingProxyType({
    "-": (600, 700),
    "bnot": (600, 700),
    "#": (700, 800),
})


def infix_prec(symbol: str) -> InfixPrec:
    """Precedence triple of an expression infix operator."""
    try:
        return INFIX_PRECEDENCE[symbol]
    except KeyError:
        raise UnknownOperatorError(symbol, "infix") from None


def prefix_prec(symbol: str) -> PrefixPrec:
    """Precedence pair of an expression prefix operator."""
    try:
        return PREFIX_PRECEDENCE[symbol]
    except KeyError:
        raise UnknownOperatorError(symbol, "prefix") from None


def type_infix_prec(symbol: str) -> InfixPrec:
    """Precedence triple of a type-level infix operator."""
    try:
        return TYPE_INFIX_PRECEDENCE[symbol]
    except KeyError:
        raise UnknownOperatorError(symbol, "type infix") from None


def type_prefix_prec(symbol: str) -> PrefixPrec:
    """Precedence pair of a type-level prefix operator."""
    try:
        return TYPE_PREFIX_PRECEDENCE[symbol]
    except KeyError:
        raise UnknownOperatorError(symbol, "type prefix") from None


def needs_parentheses(context_prec: int, own_prec: int) -> bool:
    """True when a construct of ``own_prec`` must be bracketed in a context
    that tolerates nothing below ``context_prec``."""
    return context_prec > own_prec


__all__ = [
    "FUNC_PREC",
    "INFIX_PRECEDENCE",
    "MAX_PREC",
    "PREFIX_PRECEDENCE",
    "TYPE_INFIX_PRECEDENCE",
    "TYPE_PREFIX_PRECEDENCE",
    "infix_prec",
    "needs_parentheses",
    "prefix_prec",
    "type_infix_prec",
    "type_prefix_prec",
]
