"""
Tests for attribute instances (* key = value *).
"""

import sys
import os
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from svfront.hdl_parser.tokens import Span
from svfront.hdl_parser.attributes import (
    attribute_instance, attr_spec, attribute_instances, attributes_to_dict,
)
from svfront.hdl_parser.parser import parse_attribute_instance, ParseError
from svfront.hdl_parser.ast_nodes import *


def test_attributes_without_value():
    """Test: (* full_case, parallel_case *)"""
    inst = parse_attribute_instance("(* full_case, parallel_case *)")
    assert isinstance(inst, AttributeInstance)
    assert [spec.name for spec in inst.specs] == ["full_case", "parallel_case"]
    assert all(spec.value is None for spec in inst.specs)
    print("✓ test_attributes_without_value")


def test_attribute_with_number():
    """Test: (* full_case=1 *)"""
    inst = parse_attribute_instance("(* full_case=1 *)")
    assert len(inst.specs) == 1
    assert isinstance(inst.specs[0].value, NumberLiteral)
    assert inst.specs[0].value.raw == "1"
    print("✓ test_attribute_with_number")


def test_multiple_attributes_with_values():
    """Test: (* full_case=1, parallel_case = 0 *) -- blanks around = are fine"""
    inst = parse_attribute_instance("(* full_case=1, parallel_case = 0 *)")
    assert [spec.name for spec in inst.specs] == ["full_case", "parallel_case"]
    assert [spec.value.value for spec in inst.specs] == [1, 0]
    print("✓ test_multiple_attributes_with_values")


def test_attribute_with_string():
    """Test: (* keep = "true" *)"""
    inst = parse_attribute_instance('(* keep = "true" *)')
    value = inst.specs[0].value
    assert isinstance(value, StringLiteral)
    assert value.text == "true"
    print("✓ test_attribute_with_string")


def test_attribute_with_expression():
    """Test: (* maxfan = 2 * WIDTH *) -- the closing *) is not a multiplication"""
    inst = parse_attribute_instance("(* maxfan = 2 * WIDTH *)")
    value = inst.specs[0].value
    assert isinstance(value, BinaryOp)
    assert value.op.value == "*"
    assert value.right.identifier.identifier.name == "WIDTH"
    print("✓ test_attribute_with_expression")


def test_attribute_without_blanks():
    """Test: (*keep*)"""
    inst = parse_attribute_instance("(*keep*)")
    assert inst.specs[0].name == "keep"
    print("✓ test_attribute_without_blanks")


def test_empty_attribute_rejected():
    """Test: (* *) has no attr_spec and does not parse"""
    assert not attribute_instance(Span("(* *)"))
    assert not attribute_instance(Span("(**)"))
    try:
        parse_attribute_instance("(* *)")
        assert False, "Expected ParseError"
    except ParseError as e:
        assert "identifier" in str(e)
    print("✓ test_empty_attribute_rejected")


def test_missing_delimiters_rejected():
    """Test: missing (* or *) fails"""
    assert not attribute_instance(Span("full_case *)"))
    assert not attribute_instance(Span("(* full_case"))
    assert not attribute_instance(Span("(* full_case )"))
    print("✓ test_missing_delimiters_rejected")


def test_sensitivity_star_is_not_an_attribute():
    """Test: @(*) style (*) does not parse as an attribute"""
    assert not attribute_instance(Span("(*)"))
    print("✓ test_sensitivity_star_is_not_an_attribute")


def test_attr_spec_alone():
    """Test: attr_spec stops before a trailing comma"""
    r = attr_spec(Span("keep = 1, next"))
    assert r
    assert r.value.name == "keep"
    assert r.rest.rest == ", next"
    print("✓ test_attr_spec_alone")


def test_attribute_instance_remaining_input():
    """Test: text after *) is returned unchanged"""
    r = attribute_instance(Span("(* keep *) wire w;"))
    assert r
    assert r.rest.rest == " wire w;"
    print("✓ test_attribute_instance_remaining_input")


def test_attribute_instances_sequence():
    """Test: several instances in a row, and none at all"""
    r = attribute_instances(Span("(* a *) (* b = 2 *) module"))
    assert r
    assert len(r.value) == 2
    assert r.rest.rest == " module"

    r = attribute_instances(Span("module"))
    assert r
    assert r.value == ()
    assert r.rest.offset == 0
    print("✓ test_attribute_instances_sequence")


def test_attributes_to_dict():
    """Test: flattening, later names override earlier ones"""
    r = attribute_instances(Span('(* keep, fsm_encoding = "one_hot" *) (* keep = 0 *)'))
    attrs = attributes_to_dict(r.value)
    assert list(attrs) == ["keep", "fsm_encoding"]
    assert attrs["keep"].value == 0
    assert attrs["fsm_encoding"].text == "one_hot"
    print("✓ test_attributes_to_dict")


def test_attribute_with_comments():
    """Test: comments count as blanks around attribute tokens"""
    inst = parse_attribute_instance("(* /* why */ keep // line\n = 1 *)")
    assert inst.specs[0].name == "keep"
    assert inst.specs[0].value.value == 1
    print("✓ test_attribute_with_comments")


def run_all():
    """Run all attribute tests"""
    tests = [
        test_attributes_without_value,
        test_attribute_with_number,
        test_multiple_attributes_with_values,
        test_attribute_with_string,
        test_attribute_with_expression,
        test_attribute_without_blanks,
        test_empty_attribute_rejected,
        test_missing_delimiters_rejected,
        test_sensitivity_star_is_not_an_attribute,
        test_attr_spec_alone,
        test_attribute_instance_remaining_input,
        test_attribute_instances_sequence,
        test_attributes_to_dict,
        test_attribute_with_comments,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"✗ {test.__name__}: {e}")
            failed += 1
            import traceback
            traceback.print_exc()

    print(f"\n{'='*50}")
    print(f"Attribute Tests: {passed} passed, {failed} failed, {passed+failed} total")

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    print("Running attribute tests...\n")
    run_all()
