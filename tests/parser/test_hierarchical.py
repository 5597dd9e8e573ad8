"""
Tests for hierarchical names, scopes and member selects.
"""

import sys
import os
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from svfront.hdl_parser.tokens import Span
from svfront.hdl_parser.expressions import (
    hierarchical_identifier, package_scope, select, nonrange_select,
)
from svfront.hdl_parser.parser import parse_net_lvalue, parse_variable_lvalue, parse
from svfront.hdl_parser.ast_nodes import *


def test_hierarchical_lvalue():
    """Test: top.sub.signal as a net lvalue"""
    lv = parse_net_lvalue("top.sub.signal")
    hier = lv.identifier.identifier
    assert [level.identifier.name for level in hier.hierarchy] == ["top", "sub"]
    assert hier.identifier.name == "signal"
    assert hier.path == "top.sub.signal"
    print("✓ test_hierarchical_lvalue")


def test_nested_hierarchical_lvalue():
    """Test: deeply nested hierarchical reference"""
    lv = parse_variable_lvalue("top.level1.level2.level3.signal")
    assert lv.identifier.path == "top.level1.level2.level3.signal"
    assert len(lv.identifier.hierarchy) == 4
    print("✓ test_nested_hierarchical_lvalue")


def test_hierarchy_with_instance_index():
    """Test: gen[2].u_core.acc[7:0] -- bit selects on a path level"""
    lv = parse_variable_lvalue("gen[2].u_core.acc[7:0]")
    hier = lv.identifier
    assert hier.hierarchy[0].identifier.name == "gen"
    assert [b.value for b in hier.hierarchy[0].bit_select] == [2]
    assert hier.hierarchy[1].bit_select == ()
    assert hier.identifier.name == "acc"
    part = lv.select.part_select_range
    assert (part.msb.value, part.lsb.value) == (7, 0)
    print("✓ test_hierarchy_with_instance_index")


def test_root_prefix():
    """Test: $root.top.sig"""
    lv = parse_net_lvalue("$root.top.sig")
    hier = lv.identifier.identifier
    assert hier.root is not None
    assert hier.root.value == "$root"
    assert hier.path == "$root.top.sig"
    print("✓ test_root_prefix")


def test_unit_scope():
    """Test: $unit::cfg"""
    lv = parse_variable_lvalue("$unit::cfg")
    assert isinstance(lv.scope, PackageScope)
    assert lv.scope.name.value == "$unit"
    assert lv.identifier.identifier.name == "cfg"
    print("✓ test_unit_scope")


def test_package_scope_requires_double_colon():
    """Test: pkg: is not a package scope"""
    assert package_scope(Span("pkg::x"))
    assert not package_scope(Span("pkg:x"))
    print("✓ test_package_scope_requires_double_colon")


def test_escaped_identifier():
    """Test: \\bus[0] is one escaped identifier"""
    lv = parse_net_lvalue("\\bus[0] ")
    hier = lv.identifier.identifier
    assert hier.identifier.token.type == TokenType.ESCAPED_IDENT
    assert hier.identifier.name == "\\bus[0]"
    assert lv.select.bit_select == ()
    print("✓ test_escaped_identifier")


def test_keyword_is_not_an_identifier():
    """Test: reserved words cannot name a signal"""
    assert not hierarchical_identifier(Span("wire"))
    assert not hierarchical_identifier(Span("top.module"))
    r = hierarchical_identifier(Span("wire_1"))
    assert r and r.value.identifier.name == "wire_1"
    print("✓ test_keyword_is_not_an_identifier")


def test_member_select():
    """Test: a member path in a select: .field[1].flag[0]"""
    r = select(Span(".field[1].flag[0][3:0]"))
    assert r
    sel = r.value
    assert sel.member is not None
    assert [level.identifier.name for level in sel.member.path] == ["field"]
    assert [b.value for b in sel.member.path[0].bit_select] == [1]
    assert sel.member.identifier.name == "flag"
    assert [b.value for b in sel.bit_select] == [0]
    assert isinstance(sel.part_select_range, RangeSelect)
    print("✓ test_member_select")


def test_nonrange_member_select():
    """Test: nonrange_select takes members and bits but stops at a range"""
    r = nonrange_select(Span(".f[2][3:0]"))
    assert r
    assert r.value.member.identifier.name == "f"
    assert [b.value for b in r.value.bit_select] == [2]
    assert r.rest.rest == "[3:0]"
    print("✓ test_nonrange_member_select")


def test_path_with_blanks_around_dots():
    """Test: a . b .c -- blanks and comments between path steps"""
    r = hierarchical_identifier(Span("a . b /* x */ .c = 1"))
    assert r
    assert r.value.path == "a.b.c"
    assert r.rest.rest == " = 1"
    print("✓ test_path_with_blanks_around_dots")


def test_parse_with_any_production():
    """Test: parse() accepts any production"""
    hier = parse(hierarchical_identifier, "  top.u0.q  ")
    assert hier.path == "top.u0.q"
    print("✓ test_parse_with_any_production")


def run_all():
    """Run all hierarchical tests"""
    tests = [
        test_hierarchical_lvalue,
        test_nested_hierarchical_lvalue,
        test_hierarchy_with_instance_index,
        test_root_prefix,
        test_unit_scope,
        test_package_scope_requires_double_colon,
        test_escaped_identifier,
        test_keyword_is_not_an_identifier,
        test_member_select,
        test_nonrange_member_select,
        test_path_with_blanks_around_dots,
        test_parse_with_any_production,
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
    print(f"Hierarchical Tests: {passed} passed, {failed} failed, {passed+failed} total")

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    print("Running hierarchical tests...\n")
    run_all()
