"""
Attribute instances: (* key1 = value1, key2 *)

    attribute_instance ::= (* attr_spec { , attr_spec } *)
    attr_spec          ::= attr_name [ = constant_expression ]
"""

from __future__ import annotations
from typing import Iterable, Optional

from svfront.hdl_parser.tokens import Span
from svfront.hdl_parser.lexer import symbol
from svfront.hdl_parser.combinators import (
    Result, opt, seq, preceded, delimited, many0, separated_nonempty_list, mapped,
)
from svfront.hdl_parser.expressions import identifier, constant_expression
from svfront.hdl_parser.ast_nodes import AttributeInstance, AttrSpec, Expr


def attribute_instance(s: Span) -> Result[AttributeInstance]:
    return mapped(
        delimited(symbol("(*"), separated_nonempty_list(symbol(","), attr_spec), symbol("*)")),
        AttributeInstance,
    )(s)


def attr_spec(s: Span) -> Result[AttrSpec]:
    return mapped(
        seq(identifier, opt(preceded(symbol("="), constant_expression))),
        lambda v: AttrSpec(*v),
    )(s)


def attribute_instances(s: Span) -> Result[tuple[AttributeInstance, ...]]:
    """{ attribute_instance } -- the attribute prefix of declarations and statements."""
    return many0(attribute_instance)(s)


def attributes_to_dict(instances: Iterable[AttributeInstance]) -> dict[str, Optional[Expr]]:
    """Flatten attribute instances into name -> value (None when no value is given).

    A later attr_spec with the same name overrides an earlier one.
    """
    attrs = {}
    for inst in instances:
        for spec in inst.specs:
            attrs[spec.name] = spec.value
    return attrs
