"""
Public entry points for parsing SystemVerilog lvalues and attributes.

Inside the grammar a mismatch is a `Failure` value that the enclosing
alternation or sequence handles. Here, at the top, the whole input must be
consumed and a failure becomes a `ParseError` for the caller.
"""

from __future__ import annotations
import logging
from typing import Callable, TypeVar

from svfront.hdl_parser.tokens import Span
from svfront.hdl_parser.lexer import skip_trivia
from svfront.hdl_parser.combinators import Failure, FailureKind, Parser, Result, Success, furthest
from svfront.hdl_parser.expressions import expression
from svfront.hdl_parser.lvalues import net_lvalue, variable_lvalue, nonrange_variable_lvalue
from svfront.hdl_parser.attributes import attribute_instance
from svfront.hdl_parser.ast_nodes import (
    NetLvalue, VariableLvalue, NonrangeVariableLvalue, AttributeInstance,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ParseError(Exception):
    """A top-level parse failed. The message points at the failing column:

        Parse error at <input>:L1:5: expected '}' (got end of input)
            {a, b
                 ^
    """

    def __init__(self, failure: Failure, filename: str = "<input>"):
        span = failure.span
        self.failure = failure
        self.filename = filename
        self.line = span.line
        self.col = span.col

        if failure.kind == FailureKind.INCOMPLETE:
            got = "end of input"
        else:
            got = repr(_word_at(span))

        lines = span.source.split("\n")
        context = lines[span.line - 1] if span.line <= len(lines) else ""
        caret = " " * (span.col - 1) + "^"
        super().__init__(
            f"Parse error at {filename}:L{span.line}:{span.col}: "
            f"expected {failure.expected} (got {got})\n"
            f"    {context}\n"
            f"    {caret}"
        )


def _word_at(span: Span) -> str:
    """The text at `span` up to the next blank, for error messages."""
    text = span.source[span.offset:span.offset + 20]
    return text.split(None, 1)[0] if text.strip() else text


def all_consuming(p: Parser[T]) -> Parser[T]:
    """Run `p` and require that only trivia is left afterwards."""
    def parse(s: Span) -> Result[T]:
        r = p(s)
        if not r:
            return r
        rest = skip_trivia(r.rest)
        if not rest.at_end():
            return furthest(Failure(rest, FailureKind.UNEXPECTED, "end of input"), r.error)
        return Success(rest, r.value)
    return parse


def parse(production: Callable[[Span], Result[T]], source: str, filename: str = "<input>") -> T:
    """Parse the whole of `source` with `production`, raising ParseError on failure.

    Input nested deeper than the interpreter's recursion limit allows is
    reported as a ParseError at the start of the input.
    """
    if not isinstance(source, str):
        raise TypeError(f"source must be str, not {type(source).__name__}")
    expression.cache_clear()
    try:
        r = all_consuming(production)(Span(source))
    except RecursionError:
        r = Failure(Span(source), FailureKind.UNEXPECTED, "shallower nesting (input nested too deeply)")
    finally:
        expression.cache_clear()
    if not r:
        logger.debug(
            "%s failed at %s:L%d:%d: expected %s",
            getattr(production, "__name__", production), filename,
            r.span.line, r.span.col, r.expected,
        )
        raise ParseError(r, filename)
    return r.value


# ============================================================
# Public API
# ============================================================

def parse_net_lvalue(source: str, filename: str = "<input>") -> NetLvalue:
    """Parse `source` as a net_lvalue."""
    return parse(net_lvalue, source, filename)


def parse_variable_lvalue(source: str, filename: str = "<input>") -> VariableLvalue:
    """Parse `source` as a variable_lvalue."""
    return parse(variable_lvalue, source, filename)


def parse_nonrange_variable_lvalue(source: str, filename: str = "<input>") -> NonrangeVariableLvalue:
    """Parse `source` as a nonrange_variable_lvalue."""
    return parse(nonrange_variable_lvalue, source, filename)


def parse_attribute_instance(source: str, filename: str = "<input>") -> AttributeInstance:
    """Parse `source` as a single (* ... *) attribute instance."""
    return parse(attribute_instance, source, filename)
