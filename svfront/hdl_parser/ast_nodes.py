"""
Abstract Syntax Tree nodes for SystemVerilog lvalues and attributes.

The AST mirrors the IEEE 1800 grammar rules it was parsed with. Nodes are
frozen and hold tuples, so a tree cannot change after the parse that built
it. Leaves are `Token`s, which point into the source buffer instead of
copying text out of it.

Sum types (NetLvalue, VariableLvalue, Expr, ...) are closed `Union`s of the
dataclasses below; consumers dispatch on them with isinstance.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

from svfront.hdl_parser.tokens import Token, TokenType


# ============================================================
# Base
# ============================================================

@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""
    pass


# ============================================================
# Identifiers and scopes
# ============================================================

@dataclass(frozen=True)
class Identifier(ASTNode):
    """Simple or escaped identifier: my_signal, \\bus+index"""
    token: Token

    @property
    def name(self) -> str:
        return self.token.value


@dataclass(frozen=True)
class PackageScope(ASTNode):
    """pkg:: or $unit::"""
    name: Union[Identifier, Token]  # Token for $unit


@dataclass(frozen=True)
class ImplicitClassHandle(ASTNode):
    """this. / super. / this.super."""
    keywords: tuple[Token, ...]


Scope = Union[ImplicitClassHandle, PackageScope]


@dataclass(frozen=True)
class HierarchyLevel(ASTNode):
    """One `name[i]...` step of a dotted path, or of a member select."""
    identifier: Identifier
    bit_select: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class HierarchicalIdentifier(ASTNode):
    """[$root .] { identifier constant_bit_select . } identifier"""
    root: Optional[Token]
    hierarchy: tuple[HierarchyLevel, ...]
    identifier: Identifier

    @property
    def path(self) -> str:
        """Dotted name without selects: top.sub.signal"""
        names = [level.identifier.name for level in self.hierarchy]
        names.append(self.identifier.name)
        if self.root is not None:
            names.insert(0, self.root.value)
        return ".".join(names)


@dataclass(frozen=True)
class ScopedIdentifier(ASTNode):
    """[package_scope] hierarchical_identifier"""
    scope: Optional[PackageScope]
    identifier: HierarchicalIdentifier


# ============================================================
# Selects
# ============================================================

@dataclass(frozen=True)
class RangeSelect(ASTNode):
    """Part select: [msb:lsb]"""
    msb: Expr
    lsb: Expr


@dataclass(frozen=True)
class IndexedRange(ASTNode):
    """Indexed part select: [base +: width] or [base -: width]"""
    base: Expr
    op: Token               # "+:" or "-:"
    width: Expr


PartSelectRange = Union[RangeSelect, IndexedRange]


@dataclass(frozen=True)
class MemberSelect(ASTNode):
    """Member path in front of a bit select: .a[1].b"""
    path: tuple[HierarchyLevel, ...]
    identifier: Identifier


@dataclass(frozen=True)
class Select(ASTNode):
    """[member] bit_select [ '[' part_select_range ']' ]"""
    member: Optional[MemberSelect] = None
    bit_select: tuple[Expr, ...] = ()
    part_select_range: Optional[PartSelectRange] = None


@dataclass(frozen=True)
class ConstantSelect(Select):
    """Select whose indices are constant expressions."""
    pass


@dataclass(frozen=True)
class NonrangeSelect(ASTNode):
    """[member] bit_select -- no part select allowed."""
    member: Optional[MemberSelect] = None
    bit_select: tuple[Expr, ...] = ()


# ============================================================
# Expressions
# ============================================================

def resolve_number(raw: str) -> tuple[Union[int, float], int, bool]:
    """Parse a number literal. Returns (value, width, signed).

    x/z/? digits read as 0. Unsized literals are 32 bits wide; unbased
    unsized literals ('0, '1, 'x, 'z) report a self-determined width of 1.
    """
    raw = "".join(raw.split()).replace("_", "")

    if "'" in raw:
        size_str, rest = raw.split("'", 1)

        if len(rest) == 1 and not size_str:
            return (1 if rest == "1" else 0, 1, False)

        signed = False
        if rest and rest[0].lower() == "s":
            signed = True
            rest = rest[1:]

        base_char = rest[0].lower()
        digits = rest[1:] if len(rest) > 1 else "0"
        for xz in "xXzZ?":
            digits = digits.replace(xz, "0")

        base_map = {"b": 2, "o": 8, "d": 10, "h": 16}
        base = base_map.get(base_char, 10)

        width = int(size_str) if size_str else 32
        value = int(digits, base) if digits else 0
        return (value, width, signed)

    if "." in raw or "e" in raw.lower():
        return (float(raw), 64, True)
    return (int(raw), 32, False)


@dataclass(frozen=True)
class Expr(ASTNode):
    """Base class for expressions."""
    pass


@dataclass(frozen=True)
class NumberLiteral(Expr):
    """Numeric literal: 42, 8'hFF, 4'b1010, '1, 2.5e3"""
    token: Token

    @property
    def raw(self) -> str:
        return self.token.value

    @property
    def value(self) -> Union[int, float]:
        return resolve_number(self.raw)[0]

    @property
    def width(self) -> int:
        return resolve_number(self.raw)[1]

    @property
    def is_signed(self) -> bool:
        return resolve_number(self.raw)[2]

    @property
    def is_real(self) -> bool:
        return self.token.type == TokenType.REAL_NUMBER


@dataclass(frozen=True)
class StringLiteral(Expr):
    """String literal: "hello" """
    token: Token

    @property
    def text(self) -> str:
        return self.token.value[1:-1]


@dataclass(frozen=True)
class IdentifierRef(Expr):
    """A (possibly scoped, hierarchical, selected) name used as a primary: pkg::a.b[3]"""
    scope: Optional[Scope]
    identifier: HierarchicalIdentifier
    select: Select


@dataclass(frozen=True)
class SystemCall(Expr):
    """System function call: $clog2(N), $time"""
    name: Token
    args: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class UnaryOp(Expr):
    """Unary operation: ~a, !a, &a, ~|a, -a"""
    op: Token
    operand: Expr


@dataclass(frozen=True)
class BinaryOp(Expr):
    """Binary operation: a + b, a & b, a === b, ..."""
    op: Token
    left: Expr
    right: Expr


@dataclass(frozen=True)
class TernaryOp(Expr):
    """Conditional: cond ? true_val : false_val"""
    cond: Expr
    true_val: Expr
    false_val: Expr


@dataclass(frozen=True)
class Concat(Expr):
    """Concatenation: {a, b, c}"""
    parts: tuple[Expr, ...]


@dataclass(frozen=True)
class Repeat(Expr):
    """Replication: {4{a}}"""
    count: Expr
    value: Concat


@dataclass(frozen=True)
class StreamExpression(ASTNode):
    """expression [with [ array_range_expression ]]"""
    expr: Expr
    with_range: Optional[Union[Expr, RangeSelect, IndexedRange]] = None


@dataclass(frozen=True)
class IntegerType(ASTNode):
    """Integer type keyword: byte, int, logic, ..."""
    keyword: Token


@dataclass(frozen=True)
class StreamingConcatenation(Expr):
    """{ >> [slice_size] { stream_expression, ... } }"""
    operator: Token         # ">>" or "<<"
    slice_size: Optional[Union[IntegerType, Expr]]
    exprs: tuple[StreamExpression, ...]


# ============================================================
# Assignment patterns
# ============================================================

@dataclass(frozen=True)
class TypeName(ASTNode):
    """Type or parameter name tagging an assignment pattern: pkg::T"""
    scope: Optional[PackageScope]
    identifier: Identifier


@dataclass(frozen=True)
class TypeReference(ASTNode):
    """type(expr)"""
    expr: Expr


AssignmentPatternExpressionType = Union[IntegerType, TypeReference, TypeName]


@dataclass(frozen=True)
class AssignmentPatternNetLvalue(ASTNode):
    """'{ net_lvalue, ... }"""
    items: tuple[NetLvalue, ...]


@dataclass(frozen=True)
class AssignmentPatternVariableLvalue(ASTNode):
    """'{ variable_lvalue, ... }"""
    items: tuple[VariableLvalue, ...]


# ============================================================
# Lvalues
# ============================================================

@dataclass(frozen=True)
class NetLvalueIdentifier(ASTNode):
    """ps_or_hierarchical_net_identifier constant_select"""
    identifier: ScopedIdentifier
    select: ConstantSelect


@dataclass(frozen=True)
class NetLvalueList(ASTNode):
    """{ net_lvalue, ... }"""
    items: tuple[NetLvalue, ...]


@dataclass(frozen=True)
class NetLvaluePattern(ASTNode):
    """[assignment_pattern_expression_type] '{ net_lvalue, ... }"""
    type: Optional[AssignmentPatternExpressionType]
    pattern: AssignmentPatternNetLvalue


NetLvalue = Union[NetLvalueIdentifier, NetLvalueList, NetLvaluePattern]


@dataclass(frozen=True)
class VariableLvalueIdentifier(ASTNode):
    """[implicit_class_handle . | package_scope] hierarchical_variable_identifier select"""
    scope: Optional[Scope]
    identifier: HierarchicalIdentifier
    select: Select


@dataclass(frozen=True)
class VariableLvalueList(ASTNode):
    """{ variable_lvalue, ... }"""
    items: tuple[VariableLvalue, ...]


@dataclass(frozen=True)
class VariableLvaluePattern(ASTNode):
    """[assignment_pattern_expression_type] '{ variable_lvalue, ... }"""
    type: Optional[AssignmentPatternExpressionType]
    pattern: AssignmentPatternVariableLvalue


@dataclass(frozen=True)
class VariableLvalueConcatenation(ASTNode):
    """streaming_concatenation used as an lvalue"""
    concatenation: StreamingConcatenation


VariableLvalue = Union[
    VariableLvalueIdentifier,
    VariableLvalueList,
    VariableLvaluePattern,
    VariableLvalueConcatenation,
]


@dataclass(frozen=True)
class NonrangeVariableLvalue(ASTNode):
    """[implicit_class_handle . | package_scope] hierarchical_variable_identifier nonrange_select"""
    scope: Optional[Scope]
    identifier: HierarchicalIdentifier
    select: NonrangeSelect


# ============================================================
# Attributes
# ============================================================

@dataclass(frozen=True)
class AttrSpec(ASTNode):
    """attr_name [= constant_expression]"""
    identifier: Identifier
    value: Optional[Expr] = None

    @property
    def name(self) -> str:
        return self.identifier.name


@dataclass(frozen=True)
class AttributeInstance(ASTNode):
    """(* attr_spec, ... *)"""
    specs: tuple[AttrSpec, ...]
