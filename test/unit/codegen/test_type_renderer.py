"""Unit tests for rendering reflected types back to source."""

import itertools

import pytest

from lazyproxy.codegen.type_renderer import render_type
from lazyproxy.reflection import ClassDescriptor, IntersectionType, NamedType, UnionType, parse_type


@pytest.fixture
def scope():
    return ClassDescriptor("App\\Child", parent=ClassDescriptor("App\\Base"))


class TestNamedTypes:
    def test_no_type(self):
        assert render_type(None) is None

    def test_builtin(self):
        assert render_type(parse_type("int")) == "int"

    def test_class_is_fully_qualified(self):
        assert render_type(parse_type("App\\Foo")) == "\\App\\Foo"

    def test_nullable(self):
        assert render_type(parse_type("?App\\Foo")) == "?\\App\\Foo"
        assert render_type(parse_type("?int")) == "?int"

    def test_mixed_is_never_nullable(self):
        assert render_type(parse_type("mixed")) == "mixed"
        assert render_type(NamedType("mixed", allows_null=True)) == "mixed"

    def test_static(self):
        assert render_type(parse_type("static")) == "static"
        assert render_type(parse_type("?static")) == "?static"

    def test_self_resolves_to_scope(self, scope):
        assert render_type(parse_type("self"), scope) == "\\App\\Child"
        assert render_type(parse_type("?self"), scope) == "?\\App\\Child"

    def test_parent_resolves_to_scope_parent(self, scope):
        assert render_type(parse_type("parent"), scope) == "\\App\\Base"

    def test_parent_without_parent_class(self):
        assert render_type(parse_type("parent"), ClassDescriptor("App\\Orphan")) == "parent"

    def test_relative_names_without_scope(self):
        assert render_type(parse_type("self")) == "self"


class TestCompositeTypes:
    def test_union_is_sorted(self):
        assert render_type(parse_type("string|int|App\\Foo")) == "\\App\\Foo|int|string"

    def test_union_order_does_not_matter(self):
        names = [NamedType("string"), NamedType("App\\Foo"), NamedType("false"), NamedType("null")]
        rendered = {render_type(UnionType(tuple(p))) for p in itertools.permutations(names)}
        assert rendered == {"\\App\\Foo|false|null|string"}

    def test_intersection(self):
        assert render_type(parse_type("App\\B&App\\A")) == "\\App\\A&\\App\\B"

    def test_intersection_in_union_is_parenthesized(self):
        assert render_type(parse_type("null|(App\\B&App\\A)")) == "(\\App\\A&\\App\\B)|null"

    def test_self_inside_union(self, scope):
        assert render_type(parse_type("self|int"), scope) == "\\App\\Child|int"


class TestOmitBuiltins:
    def test_builtin_only_renders_empty(self):
        assert render_type(parse_type("int"), omit_builtins=True) == ""
        assert render_type(parse_type("int|string"), omit_builtins=True) == ""

    def test_keeps_classes(self):
        assert render_type(parse_type("int|App\\Foo|null"), omit_builtins=True) == "\\App\\Foo"

    def test_no_nullable_marker(self):
        assert render_type(parse_type("?App\\Foo"), omit_builtins=True) == "\\App\\Foo"

    def test_empty_intersection_is_dropped_from_union(self):
        union = UnionType((IntersectionType((NamedType("int"), NamedType("string"))), NamedType("App\\Foo")))
        assert render_type(union, omit_builtins=True) == "\\App\\Foo"


def test_rendering_is_deterministic(scope):
    t = parse_type("(App\\A&App\\B)|self|int|null")
    assert len({render_type(t, scope) for _ in range(5)}) == 1
