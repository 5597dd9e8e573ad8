"""
Lvalue grammars: net_lvalue, variable_lvalue and nonrange_variable_lvalue.

    net_lvalue ::=
          ps_or_hierarchical_net_identifier constant_select
        | { net_lvalue { , net_lvalue } }
        | [ assignment_pattern_expression_type ] assignment_pattern_net_lvalue

    variable_lvalue ::=
          [ implicit_class_handle . | package_scope ] hierarchical_variable_identifier select
        | { variable_lvalue { , variable_lvalue } }
        | [ assignment_pattern_expression_type ] assignment_pattern_variable_lvalue
        | streaming_concatenation

    nonrange_variable_lvalue ::=
          [ implicit_class_handle . | package_scope ] hierarchical_variable_identifier nonrange_select

Alternatives are tried in the order written and the first one that matches
wins. The order is significant: an identifier-tagged pattern such as
`T'{a, b}` is claimed by the identifier branch, which matches `T` alone.
"""

from __future__ import annotations

from svfront.hdl_parser.tokens import Span
from svfront.hdl_parser.lexer import symbol
from svfront.hdl_parser.combinators import (
    Result, alt, opt, seq, delimited, separated_nonempty_list, mapped,
)
from svfront.hdl_parser.expressions import (
    constant_select, select, nonrange_select,
    hierarchical_variable_identifier, implicit_class_handle_or_package_scope,
    ps_or_hierarchical_net_identifier, assignment_pattern_expression_type,
    streaming_concatenation,
)
from svfront.hdl_parser.ast_nodes import (
    NetLvalue, NetLvalueIdentifier, NetLvalueList, NetLvaluePattern,
    VariableLvalue, VariableLvalueIdentifier, VariableLvalueList,
    VariableLvaluePattern, VariableLvalueConcatenation,
    NonrangeVariableLvalue,
    AssignmentPatternNetLvalue, AssignmentPatternVariableLvalue,
)


def _braced_list(open_: str, item):
    """`open_ item {, item} }` as a non-empty tuple."""
    return delimited(symbol(open_), separated_nonempty_list(symbol(","), item), symbol("}"))


# ============================================================
# net_lvalue
# ============================================================

def net_lvalue(s: Span) -> Result[NetLvalue]:
    return alt(net_lvalue_identifier, net_lvalue_list, net_lvalue_pattern)(s)


def net_lvalue_identifier(s: Span) -> Result[NetLvalueIdentifier]:
    return mapped(
        seq(ps_or_hierarchical_net_identifier, constant_select),
        lambda v: NetLvalueIdentifier(*v),
    )(s)


def net_lvalue_list(s: Span) -> Result[NetLvalueList]:
    return mapped(_braced_list("{", net_lvalue), NetLvalueList)(s)


def net_lvalue_pattern(s: Span) -> Result[NetLvaluePattern]:
    return mapped(
        seq(opt(assignment_pattern_expression_type), assignment_pattern_net_lvalue),
        lambda v: NetLvaluePattern(*v),
    )(s)


def assignment_pattern_net_lvalue(s: Span) -> Result[AssignmentPatternNetLvalue]:
    """'{ net_lvalue {, net_lvalue} }"""
    return mapped(_braced_list("'{", net_lvalue), AssignmentPatternNetLvalue)(s)


# ============================================================
# variable_lvalue
# ============================================================

def variable_lvalue(s: Span) -> Result[VariableLvalue]:
    return alt(
        variable_lvalue_identifier,
        variable_lvalue_list,
        variable_lvalue_pattern,
        mapped(streaming_concatenation, VariableLvalueConcatenation),
    )(s)


def variable_lvalue_identifier(s: Span) -> Result[VariableLvalueIdentifier]:
    return mapped(
        seq(opt(implicit_class_handle_or_package_scope), hierarchical_variable_identifier, select),
        lambda v: VariableLvalueIdentifier(*v),
    )(s)


def variable_lvalue_list(s: Span) -> Result[VariableLvalueList]:
    return mapped(_braced_list("{", variable_lvalue), VariableLvalueList)(s)


def variable_lvalue_pattern(s: Span) -> Result[VariableLvaluePattern]:
    return mapped(
        seq(opt(assignment_pattern_expression_type), assignment_pattern_variable_lvalue),
        lambda v: VariableLvaluePattern(*v),
    )(s)


def assignment_pattern_variable_lvalue(s: Span) -> Result[AssignmentPatternVariableLvalue]:
    """'{ variable_lvalue {, variable_lvalue} }"""
    return mapped(_braced_list("'{", variable_lvalue), AssignmentPatternVariableLvalue)(s)


# ============================================================
# nonrange_variable_lvalue
# ============================================================

def nonrange_variable_lvalue(s: Span) -> Result[NonrangeVariableLvalue]:
    """Used where a part select is illegal, e.g. foreach loop variables."""
    return mapped(
        seq(opt(implicit_class_handle_or_package_scope), hierarchical_variable_identifier, nonrange_select),
        lambda v: NonrangeVariableLvalue(*v),
    )(s)
