"""Property scopes: which class owns each property a lazy object must initialize.

The runtime's hydrator needs, for every property name it may see (including
the NUL-mangled names of private and protected properties), the class whose
scope can read and write it. Generated classes embed that map as a constant.
"""

from __future__ import annotations

import functools
import re
import typing

from .reflection import ClassDescriptor

# (owning class, declared property name, class allowed to initialize it if read-only)
PropertyScope = tuple[str, str, typing.Optional[str]]


def get_property_scopes(cls: ClassDescriptor) -> dict[str, PropertyScope]:
    scopes: dict[str, PropertyScope] = {}
    class_name = cls.name

    for prop in cls.get_properties():
        if prop.is_static:
            continue
        name = prop.name

        if prop.visibility == "private":
            scopes[name] = (class_name, name, class_name if prop.is_readonly else None)
            scopes[f"\0{class_name}\0{name}"] = scopes[name]
            continue

        scopes[name] = (class_name, name, prop.declaring_class if prop.is_readonly else None)
        if prop.visibility == "protected":
            scopes[f"\0*\0{name}"] = scopes[name]

    for ancestor in cls.ancestors():
        for prop in ancestor.properties:
            if prop.visibility != "private" or prop.is_static:
                continue
            scope = (ancestor.name, prop.name, ancestor.name if prop.is_readonly else None)
            scopes[f"\0{ancestor.name}\0{prop.name}"] = scope
            scopes.setdefault(prop.name, scope)

    return scopes


class PropertyScopeCache:
    """Memoizes property scopes per class name for the lifetime of the process.

    Entries are never invalidated; `clear()` exists for tests and long-running
    tools that reload class metadata.
    """

    def __init__(self):
        self._scopes: dict[str, dict[str, PropertyScope]] = {}

    def get(self, cls: ClassDescriptor) -> dict[str, PropertyScope]:
        key = cls.name.lower()
        scopes = self._scopes.get(key)
        if scopes is None:
            scopes = get_property_scopes(cls)
            # single assignment: readers see either nothing or the complete map
            self._scopes[key] = scopes
        return scopes

    def __contains__(self, class_name: str) -> bool:
        return class_name.lower() in self._scopes

    def clear(self):
        self._scopes.clear()


default_cache = PropertyScopeCache()


def _natural_key(value: str) -> list[typing.Union[str, int]]:
    return [int(chunk) if i % 2 else chunk for i, chunk in enumerate(re.split(r"(\d+)", value))]


def natural_compare(a: str, b: str) -> int:
    """Compare like the runtime's `strnatcmp`: digit runs compare by value."""
    key_a, key_b = _natural_key(a), _natural_key(b)
    return (key_a > key_b) - (key_a < key_b)


def sort_naturally(keys: typing.Iterable[str]) -> list[str]:
    return sorted(keys, key=functools.cmp_to_key(natural_compare))


def _join_nul(parts: list[str]) -> str:
    code = '."\\0".'.join(parts)
    # empty sides left by leading, trailing or repeated NUL bytes
    code = code.replace('.."\\0"', '."\\0"')
    return code.strip(".") or "''"


def export_string(value: str) -> str:
    """Export a string as a single-quoted literal, NUL bytes spliced in as "\\0"."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return _join_nul([f"'{part}'" if part else "" for part in escaped.split("\0")])


def _export_scalar(value: typing.Optional[str], class_name: str) -> str:
    if value is None:
        return "null"
    if value == class_name:
        return "parent::class"
    return export_string(value)


def _export_key(key: str, class_name: str) -> str:
    if "\0" not in key:
        return export_string(key)
    _, scope, name = key.split("\0", 2)
    return _join_nul(["", _export_scalar(scope, class_name), export_string(name)])


def export_property_scopes(cls: ClassDescriptor, cache: typing.Optional[PropertyScopeCache] = None) -> str:
    """Render the property scopes of `cls` as a short-array literal for a class constant.

    Entries are sorted naturally by key so the output is stable across runs.
    The class's own name is replaced by `parent::class` since the literal ends
    up inside a class extending it. Lines are indented for a class body.
    """
    scopes = (cache if cache is not None else default_cache).get(cls)
    if not scopes:
        return "[]"

    lines = ["["]
    for key in sort_naturally(scopes):
        owner, name, readonly_scope = scopes[key]
        entry = f"{_export_scalar(owner, cls.name)}, {export_string(name)}, {_export_scalar(readonly_scope, cls.name)}"
        lines.append(f"        {_export_key(key, cls.name)} => [{entry}],")
    lines.append("    ]")
    return "\n".join(lines)
