from lazyproxy.property_scopes import (
    PropertyScopeCache,
    export_property_scopes,
    export_string,
    get_property_scopes,
    natural_compare,
    sort_naturally,
)
from lazyproxy.reflection import ClassDescriptor, PropertyDescriptor


def test_get_property_scopes(registry):
    scopes = get_property_scopes(registry.get("App\\Mailer"))

    assert scopes["transport"] == ("App\\Mailer", "transport", None)
    assert scopes["\0App\\Mailer\0transport"] == ("App\\Mailer", "transport", None)
    assert scopes["id"] == ("App\\Mailer", "id", "App\\Mailer")
    assert scopes["shared"] == ("App\\Mailer", "shared", None)
    assert scopes["\0*\0shared"] == ("App\\Mailer", "shared", None)
    assert scopes["\0App\\Base\0secret"] == ("App\\Base", "secret", None)
    assert scopes["secret"] == ("App\\Base", "secret", None)
    assert "instances" not in scopes


def test_readonly_scope_is_declaring_class_for_inherited_properties():
    base = ClassDescriptor("Base", properties=[PropertyDescriptor("id", is_readonly=True)])
    child = ClassDescriptor("Child", parent=base)

    assert get_property_scopes(child)["id"] == ("Child", "id", "Base")


def test_natural_sort():
    assert sort_naturally(["item10", "item9", "item1", "\0*\0a", "b"]) == ["\0*\0a", "b", "item1", "item9", "item10"]
    assert natural_compare("a2", "a10") == -1
    assert natural_compare("a10", "a10") == 0


def test_export_string():
    assert export_string("foo") == "'foo'"
    assert export_string("App\\Foo") == "'App\\\\Foo'"
    assert export_string("it's") == "'it\\'s'"
    assert export_string("\0*\0bar") == "\"\\0\".'*'.\"\\0\".'bar'"
    assert export_string("") == "''"


def test_export_property_scopes(registry, cache):
    code = export_property_scopes(registry.get("App\\Mailer"), cache)
    lines = code.split("\n")

    assert lines[0] == "["
    assert lines[1] == "        \"\\0\".'*'.\"\\0\".'shared' => [parent::class, 'shared', null],"
    assert lines[2] == "        \"\\0\".'App\\\\Base'.\"\\0\".'secret' => ['App\\\\Base', 'secret', null],"
    assert lines[3] == "        \"\\0\".parent::class.\"\\0\".'transport' => [parent::class, 'transport', null],"
    assert lines[4] == "        'id' => [parent::class, 'id', parent::class],"
    assert lines[5] == "        'item9' => [parent::class, 'item9', null],"
    assert lines[6] == "        'item10' => [parent::class, 'item10', null],"
    assert lines[-1] == "    ]"


def test_export_is_independent_of_declaration_order(cache):
    a = ClassDescriptor("Foo", properties=[PropertyDescriptor("b"), PropertyDescriptor("a")])
    b = ClassDescriptor("Foo", properties=[PropertyDescriptor("a"), PropertyDescriptor("b")])

    assert export_property_scopes(a, PropertyScopeCache()) == export_property_scopes(b, PropertyScopeCache())


def test_export_without_properties(cache):
    assert export_property_scopes(ClassDescriptor("Empty"), cache) == "[]"


def test_cache_memoizes_per_class_name(registry):
    cache = PropertyScopeCache()
    mailer = registry.get("App\\Mailer")

    first = cache.get(mailer)
    assert "app\\mailer" in cache
    assert cache.get(mailer) is first

    cache.clear()
    assert "App\\Mailer" not in cache
    assert cache.get(mailer) is not first
