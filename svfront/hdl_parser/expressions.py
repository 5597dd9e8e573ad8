"""
Identifier, select and expression productions.

These are the productions the lvalue and attribute grammars are built on:
  - identifiers, package scopes and implicit class handles
  - hierarchical identifiers ($root.top.u[2].sig)
  - bit, part, indexed-part and member selects
  - expressions: ternary, binary operators in IEEE 1800 precedence order,
    unary and reduction operators, number/string literals, scoped
    references, system calls, parentheses, concatenation, replication and
    streaming concatenation
  - assignment pattern type tags (int'{...}, type(x)'{...})

Constant expressions share the expression grammar; constancy is a semantic
property and is not checked here.
"""

from __future__ import annotations
from functools import lru_cache

from svfront.hdl_parser.tokens import Span, INTEGER_ATOM_TYPES, INTEGER_VECTOR_TYPES
from svfront.hdl_parser.lexer import (
    skip_trivia, symbol, keyword, any_keyword,
    identifier_token, system_identifier_token, number_token, string_token,
)
from svfront.hdl_parser.combinators import (
    Failure, Result, Success, furthest,
    alt, opt, seq, preceded, terminated, delimited, many0, many1,
    separated_nonempty_list, mapped,
)
from svfront.hdl_parser.ast_nodes import *


# ============================================================
# Identifiers and scopes
# ============================================================

def identifier(s: Span) -> Result[Identifier]:
    return mapped(identifier_token, Identifier)(s)


def package_scope(s: Span) -> Result[PackageScope]:
    """pkg:: or $unit::"""
    return mapped(
        terminated(alt(keyword("$unit"), identifier), symbol("::")),
        PackageScope,
    )(s)


def implicit_class_handle(s: Span) -> Result[ImplicitClassHandle]:
    return alt(
        mapped(seq(keyword("this"), preceded(symbol("."), keyword("super"))), ImplicitClassHandle),
        mapped(keyword("this"), lambda kw: ImplicitClassHandle((kw,))),
        mapped(keyword("super"), lambda kw: ImplicitClassHandle((kw,))),
    )(s)


def implicit_class_handle_or_package_scope(s: Span) -> Result[Scope]:
    return alt(terminated(implicit_class_handle, symbol(".")), package_scope)(s)


def _hierarchy_level(s: Span) -> Result[HierarchyLevel]:
    return mapped(
        terminated(seq(identifier, constant_bit_select), symbol(".")),
        lambda v: HierarchyLevel(*v),
    )(s)


def hierarchical_identifier(s: Span) -> Result[HierarchicalIdentifier]:
    """[$root .] { identifier constant_bit_select . } identifier"""
    return mapped(
        seq(opt(terminated(keyword("$root"), symbol("."))), many0(_hierarchy_level), identifier),
        lambda v: HierarchicalIdentifier(*v),
    )(s)


hierarchical_variable_identifier = hierarchical_identifier


def ps_or_hierarchical_net_identifier(s: Span) -> Result[ScopedIdentifier]:
    """[package_scope] hierarchical_identifier"""
    return mapped(
        seq(opt(package_scope), hierarchical_identifier),
        lambda v: ScopedIdentifier(*v),
    )(s)


# ============================================================
# Selects
# ============================================================

def bit_select(s: Span) -> Result[tuple[Expr, ...]]:
    """{ [ expression ] }"""
    return many0(delimited(symbol("["), expression, symbol("]")))(s)


def constant_bit_select(s: Span) -> Result[tuple[Expr, ...]]:
    return many0(delimited(symbol("["), constant_expression, symbol("]")))(s)


def part_select_range(s: Span) -> Result[PartSelectRange]:
    """msb : lsb | base +: width | base -: width"""
    return alt(
        mapped(seq(expression, preceded(symbol(":"), expression)), lambda v: RangeSelect(*v)),
        mapped(
            seq(expression, alt(symbol("+:"), symbol("-:")), expression),
            lambda v: IndexedRange(*v),
        ),
    )(s)


def _member_and_bits(s: Span) -> Result[tuple]:
    """Member path plus trailing bit select: `.a[1].b[2]` or just `[2]`.

    The last `.name bits` pair supplies the member identifier and the bit
    select of the whole select, so `many1` over pairs covers the grammar
    `{ . member bit_select } . member bit_select` without lookahead.
    """
    pairs = many1(seq(preceded(symbol("."), identifier), bit_select))(s)
    if pairs:
        *path, (last, bits) = pairs.value
        member = MemberSelect(tuple(HierarchyLevel(name, sel) for name, sel in path), last)
        return Success(pairs.rest, (member, bits), pairs.error)
    bits = bit_select(s)
    return Success(bits.rest, (None, bits.value), furthest(bits.error, pairs))


def select(s: Span) -> Result[Select]:
    """[member] bit_select [ '[' part_select_range ']' ]"""
    r = _member_and_bits(s)
    (member, bits), s = r.value, r.rest
    part = opt(delimited(symbol("["), part_select_range, symbol("]")))(s)
    return Success(part.rest, Select(member, bits, part.value), furthest(part.error, r.error))


def constant_select(s: Span) -> Result[ConstantSelect]:
    r = select(s)
    sel = r.value
    return Success(r.rest, ConstantSelect(sel.member, sel.bit_select, sel.part_select_range), r.error)


def nonrange_select(s: Span) -> Result[NonrangeSelect]:
    """[member] bit_select"""
    r = _member_and_bits(s)
    return Success(r.rest, NonrangeSelect(*r.value), r.error)


# ============================================================
# Expressions (operator precedence)
# ============================================================

# Lowest to highest precedence. All levels are left-associative.
_BINARY_LEVELS = (
    ("||",),
    ("&&",),
    ("|",),
    ("^", "^~", "~^"),
    ("&",),
    ("==", "!=", "===", "!==", "==?", "!=?"),
    ("<", "<=", ">", ">="),
    ("<<", ">>", "<<<", ">>>"),
    ("+", "-"),
    ("*", "/", "%"),
    ("**",),
)

# Longest first, so `||` is never read as `|` followed by a reduction.
_BINARY_OPS = sorted({op for level in _BINARY_LEVELS for op in level}, key=len, reverse=True)
_PRECEDENCE = {op: level for level, ops in enumerate(_BINARY_LEVELS) for op in ops}
_UNARY_OPS = sorted(
    ["+", "-", "!", "~", "&", "~&", "|", "~|", "^", "~^", "^~"], key=len, reverse=True
)


def _longest_operator(ops: list[str], expected: str):
    matchers = [symbol(op) for op in ops]

    def parse(s: Span) -> Result:
        for m in matchers:
            r = m(s)
            if r:
                return r
        return Failure.at(skip_trivia(s), expected)
    return parse


binary_operator = _longest_operator(_BINARY_OPS, "binary operator")
unary_operator = _longest_operator(_UNARY_OPS, "unary operator")


@lru_cache(maxsize=4096)
def expression(s: Span) -> Result[Expr]:
    """Memoised on the span: `{`, `[` and `(` alternatives that share a
    prefix re-read it from the cache instead of re-parsing it."""
    return _ternary(s)


constant_expression = expression


def _ternary(s: Span) -> Result[Expr]:
    r = _binary(s)
    if not r:
        return r
    cond, s = r.value, r.rest
    branches = seq(preceded(symbol("?"), expression), preceded(symbol(":"), _ternary))(s)
    if not branches:
        return Success(r.rest, r.value, furthest(branches, r.error))
    true_val, false_val = branches.value
    return Success(branches.rest, TernaryOp(cond, true_val, false_val), branches.error)


def _reduce(operands: list, operators: list):
    op = operators.pop()
    right = operands.pop()
    left = operands.pop()
    operands.append(BinaryOp(op, left, right))


def _binary(s: Span) -> Result[Expr]:
    """Operator-precedence loop over `_BINARY_LEVELS` with explicit stacks."""
    r = unary_expression(s)
    if not r:
        return r
    operands = [r.value]
    operators = []
    error = r.error
    s = r.rest

    while True:
        op = binary_operator(s)
        if not op:
            break
        right = unary_expression(op.rest)
        if not right:
            # `a[i +: 4]`, `(* x = 1 *)`: the operator belongs to the caller
            error = furthest(right, error)
            break
        level = _PRECEDENCE[op.value.value]
        while operators and _PRECEDENCE[operators[-1].value] >= level:
            _reduce(operands, operators)
        operators.append(op.value)
        operands.append(right.value)
        error = furthest(right.error, error)
        s = right.rest

    while operators:
        _reduce(operands, operators)
    return Success(s, operands[0], error)


def unary_expression(s: Span) -> Result[Expr]:
    """{ unary_operator } primary"""
    ops = many0(unary_operator)(s)
    r = primary(ops.rest)
    if not r:
        return r
    value = r.value
    for op in reversed(ops.value):
        value = UnaryOp(op, value)
    return Success(r.rest, value, r.error)


# ---- Primaries ----

def primary(s: Span) -> Result[Expr]:
    return alt(
        number,
        string_literal,
        identifier_ref,
        system_call,
        delimited(symbol("("), expression, symbol(")")),
        concatenation,
        multiple_concatenation,
        streaming_concatenation,
    )(s)


def number(s: Span) -> Result[NumberLiteral]:
    return mapped(number_token, NumberLiteral)(s)


def string_literal(s: Span) -> Result[StringLiteral]:
    return mapped(string_token, StringLiteral)(s)


def identifier_ref(s: Span) -> Result[IdentifierRef]:
    """[implicit_class_handle . | package_scope] hierarchical_identifier select"""
    return mapped(
        seq(opt(implicit_class_handle_or_package_scope), hierarchical_identifier, select),
        lambda v: IdentifierRef(*v),
    )(s)


def system_call(s: Span) -> Result[SystemCall]:
    """$name [ ( expression, ... ) ]"""
    return mapped(
        seq(
            system_identifier_token,
            opt(delimited(symbol("("), separated_nonempty_list(symbol(","), expression), symbol(")"))),
        ),
        lambda v: SystemCall(v[0], v[1] or ()),
    )(s)


def concatenation(s: Span) -> Result[Concat]:
    """{ expression, ... }"""
    return mapped(
        delimited(symbol("{"), separated_nonempty_list(symbol(","), expression), symbol("}")),
        Concat,
    )(s)


def multiple_concatenation(s: Span) -> Result[Repeat]:
    """{ count concatenation }"""
    return mapped(
        delimited(symbol("{"), seq(expression, concatenation), symbol("}")),
        lambda v: Repeat(*v),
    )(s)


# ============================================================
# Streaming concatenation
# ============================================================

def integer_type(s: Span) -> Result[IntegerType]:
    return mapped(
        any_keyword(INTEGER_ATOM_TYPES | INTEGER_VECTOR_TYPES, "integer type"),
        IntegerType,
    )(s)


def array_range_expression(s: Span) -> Result:
    """expression | msb : lsb | base +: width | base -: width"""
    return alt(part_select_range, expression)(s)


def stream_expression(s: Span) -> Result[StreamExpression]:
    """expression [with [ array_range_expression ]]"""
    return mapped(
        seq(
            expression,
            opt(preceded(keyword("with"), delimited(symbol("["), array_range_expression, symbol("]")))),
        ),
        lambda v: StreamExpression(*v),
    )(s)


def _stream_concatenation(s: Span) -> Result[tuple[StreamExpression, ...]]:
    return delimited(
        symbol("{"), separated_nonempty_list(symbol(","), stream_expression), symbol("}"),
    )(s)


def streaming_concatenation(s: Span) -> Result[StreamingConcatenation]:
    """{ stream_operator [slice_size] stream_concatenation }

    The slice size is tried last: `{>> {a}}` would otherwise read `{a}` as
    a slice size and then miss the stream list.
    """
    stream_operator = alt(symbol(">>"), symbol("<<"))
    slice_size = alt(integer_type, constant_expression)
    return delimited(
        symbol("{"),
        alt(
            mapped(
                seq(stream_operator, _stream_concatenation),
                lambda v: StreamingConcatenation(v[0], None, v[1]),
            ),
            mapped(
                seq(stream_operator, slice_size, _stream_concatenation),
                lambda v: StreamingConcatenation(*v),
            ),
        ),
        symbol("}"),
    )(s)


# ============================================================
# Assignment pattern type tags
# ============================================================

def type_reference(s: Span) -> Result[TypeReference]:
    """type ( expression )"""
    return mapped(
        preceded(keyword("type"), delimited(symbol("("), expression, symbol(")"))),
        TypeReference,
    )(s)


def assignment_pattern_expression_type(s: Span) -> Result[AssignmentPatternExpressionType]:
    """integer_atom_type | type_reference | ps_type_identifier | ps_parameter_identifier"""
    return alt(
        mapped(any_keyword(INTEGER_ATOM_TYPES, "integer atom type"), IntegerType),
        type_reference,
        mapped(seq(opt(package_scope), identifier), lambda v: TypeName(*v)),
    )(s)
