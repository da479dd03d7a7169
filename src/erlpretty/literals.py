"""Literal spelling and normalization.

Three jobs:

- spell atoms, characters and strings the way Erlang reads them back,
  honouring the target source encoding;
- tidy float literals (``1.50000000000000000000e+00`` becomes ``1.5``);
- split long string literals into adjacent segments that fit the ribbon,
  never breaking an escape sequence apart.

Example:
    >>> tidy_float(float_literal(1.5))
    '1.5'
    >>> string_segments('"aaaa bbbb cccc dddd"', 18)
    ['"aaaa bbbb cccc "', '"dddd"']

"""

from erlpretty.config import TextEncoding

RESERVED_WORDS = frozenset({
    "after", "and", "andalso", "band", "begin", "bnot", "bor", "bsl", "bsr",
    "bxor", "case", "catch", "cond", "div", "end", "fun", "if", "let", "not",
    "of", "or", "orelse", "receive", "rem", "try", "when", "xor",
})

_NAMED_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\b": "\\b",
    "\f": "\\f",
    "\x1b": "\\e",
    "\x7f": "\\d",
}

_OCTAL = "01234567"

# =============================================================================
# Atoms, characters, strings
# =============================================================================


def _escape_char(c: str, quote: str | None, encoding: TextEncoding) -> str:
    code = ord(c)
    if c == quote:
        return "\\" + c
    if c == "\\":
        return "\\\\"
    if " " <= c <= "~":
        return c
    if 0xA0 <= code <= 0xFF:
        return c
    if code > 0xFF and encoding is TextEncoding.UTF8:
        return c
    named = _NAMED_ESCAPES.get(c)
    if named is not None:
        return named
    if code < 0xA0:
        return f"\\{code >> 6}{(code >> 3) & 7}{code & 7}"
    return f"\\x{{{code:X}}}"


def _quote(value: str, quote: str, encoding: TextEncoding) -> str:
    body = "".join(_escape_char(c, quote, encoding) for c in value)
    return f"{quote}{body}{quote}"


def _is_lower(c: str) -> bool:
    return "a" <= c <= "z" or ("\xdf" <= c <= "\xff" and c != "\xf7")


def _is_name_char(c: str) -> bool:
    return (
        _is_lower(c)
        or "A" <= c <= "Z"
        or ("\xc0" <= c <= "\xde" and c != "\xd7")
        or "0" <= c <= "9"
        or c in "_@"
    )


def atom_needs_quotes(name: str) -> bool:
    """True when ``name`` is not readable as a bare atom."""
    if not name or name in RESERVED_WORDS:
        return True
    if not _is_lower(name[0]):
        return True
    return not all(_is_name_char(c) for c in name[1:])


def atom_literal(name: str, encoding: TextEncoding = TextEncoding.UTF8) -> str:
    """Spell an atom, quoting it when needed.

    Example:
        >>> atom_literal("ok"), atom_literal("hello world"), atom_literal("end")
        ('ok', "'hello world'", "'end'")

    """
    if atom_needs_quotes(name):
        return _quote(name, "'", encoding)
    return name


def string_literal(value: str, encoding: TextEncoding = TextEncoding.UTF8) -> str:
    """Spell a string literal including its double quotes."""
    return _quote(value, '"', encoding)


def char_literal(value: str, encoding: TextEncoding = TextEncoding.UTF8) -> str:
    """Spell a character literal: ``$a``, ``$\\s`` for space, ``$\\n``."""
    if value == " ":
        return "$\\s"
    return "$" + _escape_char(value, None, encoding)


def integer_literal(value: int, literal: str | None = None) -> str:
    """Spell an integer, preferring the source spelling when known."""
    return literal if literal is not None else str(value)


# =============================================================================
# Floats
# =============================================================================


def float_literal(value: float) -> str:
    """Raw scientific spelling with 20 decimals, as Erlang prints floats."""
    return f"{value:.20e}"


def tidy_float(literal: str) -> str:
    """Shorten a float literal without changing the value it denotes.

    The integer part, the decimal point and the first decimal are kept.
    The remaining mantissa is cut at the first run of three zeros. A zero
    exponent is dropped; any other exponent keeps an explicit sign and
    loses its leading zeros.

    Example:
        >>> tidy_float("3.000000"), tidy_float("1.50000e+00"), tidy_float("2.0e-000")
        ('3.0', '1.5', '2.0')

    """
    for index, c in enumerate(literal):
        if c == "." and index + 1 < len(literal):
            head = literal[: index + 2]
            return head + _tidy_mantissa(literal[index + 2 :])
        if c == "e":
            return literal[:index] + _tidy_exponent(literal[index:])
    return literal


def _tidy_mantissa(digits: str) -> str:
    for index, c in enumerate(digits):
        if digits.startswith("000", index):
            return digits[:index] + _tidy_exponent(digits[index + 3 :])
        if c == "e":
            return digits[:index] + _tidy_exponent(digits[index:])
    return digits


def _tidy_exponent(rest: str) -> str:
    index = rest.find("e")
    if index < 0:
        return ""
    exponent = rest[index + 1 :]
    if exponent[:1] in ("+", "-"):
        sign, digits = exponent[0], exponent[1:]
    else:
        sign, digits = "+", exponent
    stripped = digits.lstrip("0")
    if digits and not stripped:
        return ""
    return f"e{sign}{stripped}"


def float_text(value: float) -> str:
    """Spell a float for output.

    Uses the tidied raw spelling when it still denotes ``value``. Tidying
    cuts the mantissa at any run of three zeros, which can drop
    significant digits (``100.0005``); the shortest spelling that reads
    back as ``value`` is used then.

    Example:
        >>> float_text(0.1), float_text(100.0005), float_text(1e22)
        ('1.0e-1', '100.0005', '1.0e+22')

    """
    tidied = tidy_float(float_literal(value))
    if float(tidied) == value:
        return tidied
    mantissa, _, exponent = repr(value).partition("e")
    if "." not in mantissa and mantissa.lstrip("-").isdigit():
        mantissa += ".0"
    return mantissa + (_tidy_exponent("e" + exponent) if exponent else "")


# =============================================================================
# String splitting
# =============================================================================

# Raw whitespace at a split point, and how it is spelled in the first segment.
_SPLIT_WHITESPACE = {" ": " ", "\t": "\\t", "\n": "\\n"}

# Splitting is refused when fewer characters than this remain.
MIN_TAIL = 5

# How far past the width budget to look for whitespace before splitting
# at the next character boundary anyway.
MAX_OVERSHOOT = 10


def _escape_end(literal: str, index: int) -> int:
    """Index just past the escape sequence starting at ``literal[index]``.

    Handles ``\\^X`` control escapes, up to three octal digits,
    ``\\x{...}`` hex escapes and single-character escapes.

    """
    size = len(literal)
    pos = index + 1
    if literal.startswith("^", pos) and pos + 1 < size:
        return pos + 2
    if literal.startswith("x{", pos):
        pos += 2
        while pos < size and literal[pos].isascii() and literal[pos].isalnum():
            pos += 1
        if pos < size and literal[pos] == "}":
            pos += 1
        return pos
    octal = 0
    while octal < 3 and pos + octal < size and literal[pos + octal] in _OCTAL:
        octal += 1
    if octal >= 2:
        return pos + octal
    return min(pos + 1, size)


def split_string(literal: str, width: int, length: int) -> tuple[str, str]:
    """Split ``literal`` once, after roughly ``width`` characters.

    Args:
        literal: Quoted string literal (the opening quote counts)
        width: Characters to consume before a split is allowed
        length: Characters remaining, counted from ``literal[0]``

    Returns:
        ``(head, tail)``; ``tail`` is empty when no split point was found.
        ``head + tail`` is the input, except that a raw tab or newline at the
        split point is spelled as an escape in ``head``.

    """
    size = len(literal)
    index = 0
    while index < size:
        c = literal[index]
        if width <= 0 and length >= MIN_TAIL and c in _SPLIT_WHITESPACE:
            return literal[:index] + _SPLIT_WHITESPACE[c], literal[index + 1 :]
        if c == "\\":
            end = _escape_end(literal, index)
            width -= end - index
            length -= end - index
            index = end
            continue
        if width <= -MAX_OVERSHOOT and length >= MIN_TAIL:
            return literal[:index], literal[index:]
        width -= 1
        length -= 1
        index += 1
    return literal, ""


def string_segments(literal: str, ribbon: int) -> list[str]:
    """Break a quoted string literal into quoted segments.

    Each segment is meant to go on its own line; Erlang concatenates
    adjacent string literals. The segment width is two thirds of the
    ribbon. Literals no longer than that come back as a single segment.

    """
    width = ribbon * 2 // 3
    segments: list[str] = []
    length = len(literal)
    while length > width > 0:
        head, tail = split_string(literal, width - 1, length)
        if not tail:
            break
        segments.append(head + '"')
        literal = '"' + tail
        length = len(literal)
    segments.append(literal)
    return segments


__all__ = [
    "RESERVED_WORDS",
    "atom_literal",
    "atom_needs_quotes",
    "char_literal",
    "float_literal",
    "float_text",
    "integer_literal",
    "split_string",
    "string_literal",
    "string_segments",
    "tidy_float",
]
