"""
Trivia-aware terminal scanners for SystemVerilog.

Handles:
  - White space, // line comments and /* */ block comments (trivia)
  - Literal punctuation (`symbol`) and reserved words (`keyword`)
  - Simple, escaped and system identifiers
  - Number formats: unsized decimal, sized/based (8'hFF, 4'b1010, 'd7,
    8'sd5), unbased unsized ('0, '1, 'x, 'z) and real (1.5, 2.5e10)
  - String literals

Every scanner skips leading trivia only. Trivia after a terminal is left in
place for whatever comes next, so the rest of a successful parse is exactly
the input that follows the last terminal.
"""

from __future__ import annotations
import string

from svfront.hdl_parser.tokens import Span, Token, TokenType, KEYWORDS
from svfront.hdl_parser.combinators import Failure, Parser, Result, Success

_IDENT_START = frozenset(string.ascii_letters + "_")
_IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_$")
_DECIMAL_DIGITS = frozenset(string.digits + "_")
_BASED_DIGITS = {
    "b": frozenset("01xXzZ?_"),
    "o": frozenset("01234567xXzZ?_"),
    "d": frozenset(string.digits + "xXzZ?_"),
    "h": frozenset(string.hexdigits + "xXzZ?_"),
}
_WHITESPACE = " \t\r\n\f\v"


def skip_trivia(s: Span) -> Span:
    """Skip white space and comments. An unterminated block comment runs to the end."""
    src = s.source
    n = len(src)
    i = s.offset
    while i < n:
        ch = src[i]

        if ch in _WHITESPACE:
            i += 1
            continue

        # Line comment
        if src.startswith("//", i):
            j = src.find("\n", i)
            i = n if j < 0 else j
            continue

        # Block comment
        if src.startswith("/*", i):
            j = src.find("*/", i + 2)
            i = n if j < 0 else j + 2
            continue

        break
    return s.advance(i - s.offset)


def _ident_end(src: str, i: int) -> int:
    n = len(src)
    while i < n and src[i] in _IDENT_CHARS:
        i += 1
    return i


# ---- Punctuation and keywords ----

def symbol(text: str) -> Parser[Token]:
    """Match literal punctuation `text` after optional trivia."""
    expected = repr(text)

    def parse(s: Span) -> Result[Token]:
        s = skip_trivia(s)
        if s.startswith(text):
            return Success(s.advance(len(text)), s.token(TokenType.SYMBOL, len(text)))
        return Failure.at(s, expected)
    return parse


def keyword(word: str) -> Parser[Token]:
    """Match the reserved word `word` as a whole word."""
    expected = repr(word)

    def parse(s: Span) -> Result[Token]:
        s = skip_trivia(s)
        end = s.offset + len(word)
        if s.startswith(word) and _ident_end(s.source, end) == end:
            return Success(s.advance(len(word)), s.token(TokenType.KEYWORD, len(word)))
        return Failure.at(s, expected)
    return parse


def any_keyword(words: frozenset[str], expected: str) -> Parser[Token]:
    """Match one reserved word out of `words`."""
    def parse(s: Span) -> Result[Token]:
        s = skip_trivia(s)
        src = s.source
        if s.peek() in _IDENT_START:
            end = _ident_end(src, s.offset)
            if src[s.offset:end] in words:
                length = end - s.offset
                return Success(s.advance(length), s.token(TokenType.KEYWORD, length))
        return Failure.at(s, expected)
    return parse


# ---- Identifiers ----

def identifier_token(s: Span) -> Result[Token]:
    """Simple identifier that is not a reserved word, or an escaped identifier."""
    s = skip_trivia(s)
    src = s.source
    ch = s.peek()

    if ch in _IDENT_START:
        end = _ident_end(src, s.offset)
        if src[s.offset:end] in KEYWORDS:
            return Failure.at(s, "identifier")
        length = end - s.offset
        return Success(s.advance(length), s.token(TokenType.SIMPLE_IDENT, length))

    # Escaped identifier: \ followed by printable non-blank characters
    if ch == "\\":
        end = s.offset + 1
        while end < len(src) and src[end] not in _WHITESPACE:
            end += 1
        length = end - s.offset
        if length > 1:
            return Success(s.advance(length), s.token(TokenType.ESCAPED_IDENT, length))

    return Failure.at(s, "identifier")


def system_identifier_token(s: Span) -> Result[Token]:
    """$name, excluding the $root and $unit scope keywords."""
    s = skip_trivia(s)
    if s.peek() == "$":
        end = _ident_end(s.source, s.offset + 1)
        name = s.source[s.offset:end]
        if end > s.offset + 1 and name not in ("$root", "$unit"):
            length = end - s.offset
            return Success(s.advance(length), s.token(TokenType.SYSTEM_IDENT, length))
    return Failure.at(s, "system identifier")


# ---- Literals ----

def number_token(s: Span) -> Result[Token]:
    """Read a number literal.

    Formats: 123, 8'hFF, 8 'h FF, 4'b1010, 3'd7, 'h1A, 8'sd5, '0, '1, 'x, 'z,
    1.5, 2.5e10, 1.0e-3
    """
    s = skip_trivia(s)
    src = s.source
    n = len(src)
    start = s.offset

    # Size prefix or plain number
    i = start
    if i < n and src[i].isdigit():
        while i < n and src[i] in _DECIMAL_DIGITS:
            i += 1

    # Based literal: [size] [blanks] '[s]<base> [blanks] <digits>
    q = i
    if i > start:
        while q < n and src[q] in _WHITESPACE:
            q += 1
    if q < n and src[q] == "'":
        j = q + 1
        if j < n and src[j] in "sS":
            j += 1
        if j < n and src[j].lower() in _BASED_DIGITS:
            digits = _BASED_DIGITS[src[j].lower()]
            d = j + 1
            while d < n and src[d] in _WHITESPACE:
                d += 1
            k = d
            while k < n and src[k] in digits:
                k += 1
            if k > d:
                return Success(s.advance(k - start), s.token(TokenType.BASED_NUMBER, k - start))
        elif q == start and j == q + 1 and j < n and src[j] in "01xXzZ" and _ident_end(src, j + 1) == j + 1:
            return Success(s.advance(2), s.token(TokenType.UNBASED_UNSIZED, 2))

    if i == start:
        return Failure.at(s, "number")

    # Real number: fractional part and/or exponent
    is_real = False
    if i + 1 < n and src[i] == "." and src[i + 1].isdigit():
        is_real = True
        i += 1
        while i < n and src[i] in _DECIMAL_DIGITS:
            i += 1
    if i < n and src[i] in "eE":
        j = i + 1
        if j < n and src[j] in "+-":
            j += 1
        if j < n and src[j].isdigit():
            is_real = True
            i = j
            while i < n and src[i] in _DECIMAL_DIGITS:
                i += 1

    tt = TokenType.REAL_NUMBER if is_real else TokenType.UNSIGNED_NUMBER
    return Success(s.advance(i - start), s.token(tt, i - start))


def string_token(s: Span) -> Result[Token]:
    """Double-quoted string; the token keeps both quotes."""
    s = skip_trivia(s)
    src = s.source
    if s.peek() != '"':
        return Failure.at(s, "string")
    i = s.offset + 1
    while i < len(src):
        ch = src[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            length = i + 1 - s.offset
            return Success(s.advance(length), s.token(TokenType.STRING, length))
        if ch == "\n":
            break
        i += 1
    return Failure.at(s.advance(min(i, len(src)) - s.offset), "closing '\"'")
