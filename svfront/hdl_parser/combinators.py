"""
Parse results and the combinators the grammar productions are built from.

Every production is a plain function `Span -> Success | Failure`. A failure
is a value, not an exception: `Failure` is falsy and `Success` is truthy, so
productions read as

    r = identifier(s)
    if not r:
        return r

Spans are immutable, so a caller that sees a failure still holds the cursor
it passed in; alternation simply retries the next branch with it.

A success may still carry the furthest failure it recovered from (an `opt`
that matched nothing, the element that ended a repetition). When the next
step fails earlier in the input than that, the carried failure is reported
instead, so `{a, }` is reported at the `}` rather than at the `,`.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar, Union

from svfront.hdl_parser.tokens import Span

T = TypeVar("T")
U = TypeVar("U")


class FailureKind(Enum):
    UNEXPECTED = auto()     # a literal or sub-production did not match
    INCOMPLETE = auto()     # input ran out mid-match


@dataclass(frozen=True)
class Failure:
    span: Span              # where the mismatch was detected
    kind: FailureKind
    expected: str

    def __bool__(self):
        return False

    @classmethod
    def at(cls, span: Span, expected: str) -> Failure:
        kind = FailureKind.INCOMPLETE if span.at_end() else FailureKind.UNEXPECTED
        return cls(span, kind, expected)


@dataclass(frozen=True)
class Success(Generic[T]):
    rest: Span
    value: T
    error: Optional[Failure] = None     # furthest failure recovered from


Result = Union[Success[T], Failure]
Parser = Callable[[Span], Union[Success[T], Failure]]


def furthest(a: Optional[Failure], b: Optional[Failure]) -> Optional[Failure]:
    """The failure that got further into the input; `a` wins ties."""
    if a is None:
        return b
    if b is None or a.span.offset >= b.span.offset:
        return a
    return b


# ---- Choice ----

def alt(*parsers: Parser) -> Parser:
    """Ordered choice: the first branch that succeeds wins.

    Every branch starts from the same span. When all branches fail, the
    failure that got furthest into the input is returned.
    """
    def parse(s: Span) -> Result:
        failure = None
        for p in parsers:
            r = p(s)
            if r:
                return r
            failure = furthest(failure, r)
        return failure
    return parse


def opt(p: Parser[T]) -> Parser[Optional[T]]:
    def parse(s: Span) -> Result:
        r = p(s)
        if r:
            return r
        return Success(s, None, r)
    return parse


# ---- Sequence ----

def seq(*parsers: Parser) -> Parser[tuple]:
    """Run parsers one after another; short-circuits on the first failure."""
    def parse(s: Span) -> Result:
        values = []
        error = None
        for p in parsers:
            r = p(s)
            if not r:
                return furthest(r, error)
            values.append(r.value)
            error = furthest(r.error, error)
            s = r.rest
        return Success(s, tuple(values), error)
    return parse


def preceded(first: Parser, p: Parser[T]) -> Parser[T]:
    def parse(s: Span) -> Result:
        r = first(s)
        if not r:
            return r
        second = p(r.rest)
        if not second:
            return furthest(second, r.error)
        return Success(second.rest, second.value, furthest(second.error, r.error))
    return parse


def terminated(p: Parser[T], last: Parser) -> Parser[T]:
    def parse(s: Span) -> Result:
        r = p(s)
        if not r:
            return r
        end = last(r.rest)
        if not end:
            return furthest(end, r.error)
        return Success(end.rest, r.value, furthest(end.error, r.error))
    return parse


def delimited(open_: Parser, p: Parser[T], close: Parser) -> Parser[T]:
    return preceded(open_, terminated(p, close))


# ---- Repetition ----

def many0(p: Parser[T]) -> Parser[tuple]:
    """Zero or more; stops at the first failure or at an empty match."""
    def parse(s: Span) -> Result:
        values = []
        error = None
        while True:
            r = p(s)
            if not r:
                error = furthest(r, error)
                break
            error = furthest(r.error, error)
            if r.rest.offset == s.offset:
                break
            values.append(r.value)
            s = r.rest
        return Success(s, tuple(values), error)
    return parse


def many1(p: Parser[T]) -> Parser[tuple]:
    def parse(s: Span) -> Result:
        r = p(s)
        if not r:
            return r
        more = many0(p)(r.rest)
        return Success(more.rest, (r.value,) + more.value, furthest(more.error, r.error))
    return parse


def separated_nonempty_list(sep: Parser, p: Parser[T]) -> Parser[tuple]:
    """`p {sep p}`; never yields an empty tuple."""
    def parse(s: Span) -> Result:
        r = p(s)
        if not r:
            return r
        more = many0(preceded(sep, p))(r.rest)
        return Success(more.rest, (r.value,) + more.value, furthest(more.error, r.error))
    return parse


# ---- Mapping ----

def mapped(p: Parser[T], fn: Callable[[T], U]) -> Parser[U]:
    def parse(s: Span) -> Result:
        r = p(s)
        if not r:
            return r
        return Success(r.rest, fn(r.value), r.error)
    return parse
