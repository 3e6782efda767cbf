import pytest

from lazyproxy.exceptions import ClassNotFoundError, TypeSyntaxError
from lazyproxy.reflection import (
    ClassDescriptor,
    ClassRegistry,
    IntersectionType,
    MethodDescriptor,
    NamedType,
    UnionType,
    parse_type,
)


class TestParseType:
    def test_builtin(self):
        assert parse_type("int") == NamedType("int")
        assert parse_type("int").is_builtin

    def test_class_name_drops_leading_separator(self):
        assert parse_type("\\App\\Foo") == NamedType("App\\Foo")
        assert not parse_type("App\\Foo").is_builtin

    def test_nullable(self):
        assert parse_type("?App\\Foo") == NamedType("App\\Foo", allows_null=True)

    def test_mixed_allows_null(self):
        assert parse_type("mixed").allows_null

    def test_relative_names_are_not_builtin(self):
        for name in ("self", "parent", "static"):
            assert not parse_type(name).is_builtin

    def test_union(self):
        t = parse_type("int|string|App\\Foo")
        assert t == UnionType((NamedType("int"), NamedType("string"), NamedType("App\\Foo")))
        assert not t.allows_null

    def test_union_with_null_collapses_to_nullable(self):
        assert parse_type("App\\Foo|null") == NamedType("App\\Foo", allows_null=True)
        assert parse_type("null|int") == NamedType("int", allows_null=True)

    def test_larger_union_with_null_stays_union(self):
        t = parse_type("int|string|null")
        assert isinstance(t, UnionType)
        assert t.allows_null

    def test_intersection(self):
        assert parse_type("A&B") == IntersectionType((NamedType("A"), NamedType("B")))

    def test_dnf(self):
        t = parse_type("(A&B)|C")
        assert t == UnionType((IntersectionType((NamedType("A"), NamedType("B"))), NamedType("C")))

    @pytest.mark.parametrize("text", ["", "A&B|C", "1Foo", "?", "A&", "Foo Bar"])
    def test_invalid(self, text):
        with pytest.raises(TypeSyntaxError):
            parse_type(text)


def test_get_methods_own_declarations_win():
    base = ClassDescriptor("Base", methods=[MethodDescriptor("run"), MethodDescriptor("stop")])
    child = ClassDescriptor("Child", parent=base, methods=[MethodDescriptor("RUN")])

    methods = child.get_methods()

    assert [m.name for m in methods] == ["RUN", "stop"]
    assert methods[0].declaring_class is child
    assert methods[1].declaring_class is base


def test_get_methods_filters_visibility():
    cls = ClassDescriptor(
        "Foo",
        methods=[
            MethodDescriptor("a"),
            MethodDescriptor("b", visibility="protected"),
            MethodDescriptor("c", visibility="private"),
        ],
    )
    assert [m.name for m in cls.get_methods(("public", "protected"))] == ["a", "b"]


def test_get_method_is_case_insensitive(registry):
    mailer = registry.get("App\\Mailer")
    assert mailer.get_method("GETTRANSPORT").name == "getTransport"
    assert mailer.has_method("label")
    assert not mailer.has_method("nope")


def test_get_properties_skips_inherited_private(registry):
    names = [p.name for p in registry.get("App\\Mailer").get_properties()]
    assert names == ["transport", "item10", "item9", "id", "instances", "shared", "label"]


def test_is_subclass_of(registry):
    mailer = registry.get("App\\Mailer")
    assert mailer.is_subclass_of("App\\Mailer")
    assert mailer.is_subclass_of("\\app\\base")
    assert mailer.is_subclass_of("App\\MailerInterface")
    assert not mailer.is_subclass_of("App\\Transport")
    assert not mailer.is_subclass_of("")


def test_registry_lookup(registry):
    assert registry.exists("\\App\\Greeter")
    assert registry.get("app\\greeter").name == "App\\Greeter"
    with pytest.raises(ClassNotFoundError, match='"App\\\\Nope" does not exist'):
        registry.get("App\\Nope")


def test_from_dict_links_parents_interfaces_and_prototypes():
    registry = ClassRegistry.from_dict(
        {
            "classes": [
                {"name": "Child", "parent": "Base", "methods": [{"name": "count", "prototype": "Base::count"}]},
                {"name": "Base", "methods": [{"name": "count", "tentative_return_type": True}]},
            ]
        }
    )
    child = registry.get("Child")
    assert child.parent is registry.get("Base")
    assert child.get_method("count").prototype is registry.get("Base").get_method("count")


def test_from_dict_interface_methods_are_abstract(registry):
    assert registry.get("App\\MailerInterface").get_method("send").is_abstract


def test_from_dict_unknown_parent():
    with pytest.raises(ClassNotFoundError):
        ClassRegistry.from_dict({"classes": [{"name": "Child", "parent": "Missing"}]})
