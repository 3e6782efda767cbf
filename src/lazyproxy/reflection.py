"""Minimal reflection model of the classes lazy objects are generated for.

Descriptors mirror what the runtime's reflection API reports about a class:
its ancestry, its methods with their full signatures and its properties.
They are plain data, built either directly or from a JSON-shaped document
through `ClassRegistry.from_dict`.
"""

from __future__ import annotations

import dataclasses
import re
import typing
from collections.abc import Iterable, Iterator

import typing_extensions

from .exceptions import ClassNotFoundError, TypeSyntaxError

# The one internal class that lazy objects are allowed to extend
STD_CLASS = "stdClass"

BUILTIN_TYPES = frozenset(
    {
        "int",
        "float",
        "string",
        "bool",
        "array",
        "callable",
        "iterable",
        "object",
        "mixed",
        "void",
        "never",
        "null",
        "false",
        "true",
    }
)

Visibility: typing_extensions.TypeAlias = typing_extensions.Literal["public", "protected", "private"]

_NAME_RE = re.compile(r"[a-zA-Z_\x7f-\uffff][a-zA-Z0-9_\x7f-\uffff]*(?:\\[a-zA-Z_\x7f-\uffff][a-zA-Z0-9_\x7f-\uffff]*)*")


def normalize_class_name(name: str) -> str:
    return name.lstrip("\\")


@dataclasses.dataclass(frozen=True)
class NamedType:
    name: str
    allows_null: bool = False

    @property
    def is_builtin(self) -> bool:
        return self.name.lower() in BUILTIN_TYPES


@dataclasses.dataclass(frozen=True)
class UnionType:
    types: tuple[TypeDescriptor, ...]

    @property
    def allows_null(self) -> bool:
        return any(isinstance(t, NamedType) and t.name.lower() in ("null", "mixed") for t in self.types)


@dataclasses.dataclass(frozen=True)
class IntersectionType:
    types: tuple[TypeDescriptor, ...]

    @property
    def allows_null(self) -> bool:
        return False


TypeDescriptor: typing_extensions.TypeAlias = typing.Union[NamedType, UnionType, IntersectionType]


def _parse_name(text: str, source: str) -> str:
    text = text.strip()
    name = normalize_class_name(text)
    if not _NAME_RE.fullmatch(name) or text.startswith("\\\\"):
        raise TypeSyntaxError(f"Invalid type name {text!r} in {source!r}")
    return name


def _named(text: str, source: str, allows_null: bool = False) -> NamedType:
    name = _parse_name(text, source)
    if name.lower() in ("mixed", "null"):
        allows_null = True
    return NamedType(name, allows_null)


def _parse_intersection(text: str, source: str) -> IntersectionType:
    parts = text.split("&")
    if len(parts) < 2:
        raise TypeSyntaxError(f"Intersection needs at least two types in {source!r}")
    return IntersectionType(tuple(_named(part, source) for part in parts))


def parse_type(text: str) -> TypeDescriptor:
    """Parse the textual form of a type as reported by reflection.

    Supports `?Foo`, unions (`A|B|null`), intersections (`A&B`) and
    disjunctive normal form (`(A&B)|C`). `Foo|null` is normalized to a
    nullable named type, the same way the runtime reports it.
    """
    source = text
    text = text.strip()
    if not text:
        raise TypeSyntaxError("Empty type")

    if text.startswith("?"):
        return _named(text[1:], source, allows_null=True)

    if "|" in text:
        branches: list[TypeDescriptor] = []
        for part in text.split("|"):
            part = part.strip()
            if part.startswith("(") and part.endswith(")"):
                branches.append(_parse_intersection(part[1:-1], source))
            elif "(" in part or ")" in part or "&" in part:
                raise TypeSyntaxError(f"Intersections must be parenthesized inside unions in {source!r}")
            else:
                branches.append(_named(part, source))

        if len(branches) == 2:
            nulls = [b for b in branches if isinstance(b, NamedType) and b.name.lower() == "null"]
            others = [b for b in branches if b not in nulls]
            if len(nulls) == 1 and len(others) == 1 and isinstance(others[0], NamedType):
                if others[0].name.lower() != "mixed":
                    return NamedType(others[0].name, allows_null=True)
        return UnionType(tuple(branches))

    if "&" in text:
        return _parse_intersection(text, source)

    return _named(text, source)


@dataclasses.dataclass
class ParameterDescriptor:
    name: str
    type: typing.Optional[TypeDescriptor] = None
    # Default value as printed by reflection, e.g. "'foo'", "self::BAR" or "NULL"
    default: typing.Optional[str] = None
    is_optional: bool = False
    is_variadic: bool = False
    by_reference: bool = False
    is_sensitive: bool = False


@dataclasses.dataclass(eq=False)
class FunctionDescriptor:
    name: str
    parameters: list[ParameterDescriptor] = dataclasses.field(default_factory=list)
    return_type: typing.Optional[TypeDescriptor] = None
    returns_reference: bool = False
    is_closure: bool = False
    has_tentative_return_type: bool = False


@dataclasses.dataclass(eq=False)
class MethodDescriptor(FunctionDescriptor):
    visibility: Visibility = "public"
    is_static: bool = False
    is_abstract: bool = False
    is_final: bool = False
    declaring_class: typing.Optional[ClassDescriptor] = dataclasses.field(default=None, repr=False)
    # Nearest ancestor declaration of the same method
    prototype: typing.Optional[MethodDescriptor] = dataclasses.field(default=None, repr=False)

    @property
    def class_name(self) -> str:
        return self.declaring_class.name if self.declaring_class else ""

    @property
    def is_public(self) -> bool:
        return self.visibility == "public"

    @property
    def is_protected(self) -> bool:
        return self.visibility == "protected"

    @property
    def is_private(self) -> bool:
        return self.visibility == "private"


@dataclasses.dataclass
class PropertyDescriptor:
    name: str
    visibility: Visibility = "public"
    is_static: bool = False
    is_readonly: bool = False
    type: typing.Optional[TypeDescriptor] = None
    declaring_class: typing.Optional[str] = None


@dataclasses.dataclass(eq=False)
class ClassDescriptor:
    name: str
    is_final: bool = False
    is_abstract: bool = False
    is_interface: bool = False
    is_trait: bool = False
    is_internal: bool = False
    is_readonly: bool = False
    parent: typing.Optional[ClassDescriptor] = None
    interfaces: list[ClassDescriptor] = dataclasses.field(default_factory=list)
    methods: list[MethodDescriptor] = dataclasses.field(default_factory=list)
    properties: list[PropertyDescriptor] = dataclasses.field(default_factory=list)

    def __post_init__(self):
        self.name = normalize_class_name(self.name)
        for method in self.methods:
            if method.declaring_class is None:
                method.declaring_class = self
        for prop in self.properties:
            if prop.declaring_class is None:
                prop.declaring_class = self.name

    @property
    def short_name(self) -> str:
        return self.name.rsplit("\\", 1)[-1]

    def ancestors(self) -> Iterator[ClassDescriptor]:
        parent = self.parent
        while parent is not None:
            yield parent
            parent = parent.parent

    def get_methods(self, visibilities: typing.Optional[Iterable[Visibility]] = None) -> list[MethodDescriptor]:
        """All methods, own declarations first, then inherited ones not overridden."""
        seen: dict[str, MethodDescriptor] = {}
        for method in self._all_methods():
            seen.setdefault(method.name.lower(), method)
        methods = list(seen.values())
        if visibilities is not None:
            allowed = set(visibilities)
            methods = [m for m in methods if m.visibility in allowed]
        return methods

    def _all_methods(self) -> Iterator[MethodDescriptor]:
        yield from self.methods
        if self.parent is not None:
            yield from self.parent._all_methods()
        for interface in self.interfaces:
            yield from interface._all_methods()

    def get_method(self, name: str) -> typing.Optional[MethodDescriptor]:
        lc_name = name.lower()
        for method in self._all_methods():
            if method.name.lower() == lc_name:
                return method
        return None

    def has_method(self, name: str) -> bool:
        return self.get_method(name) is not None

    def get_properties(self) -> list[PropertyDescriptor]:
        """Own properties plus the non-private ones inherited from ancestors."""
        properties = list(self.properties)
        names = {p.name for p in properties}
        for ancestor in self.ancestors():
            for prop in ancestor.properties:
                if prop.visibility != "private" and prop.name not in names:
                    properties.append(prop)
                    names.add(prop.name)
        return properties

    def is_subclass_of(self, name: str) -> bool:
        """Equivalent of the runtime's `is_a($this->name, $name, true)`."""
        lc_name = normalize_class_name(name).lower()
        if not lc_name:
            return False
        return self._is_a(lc_name)

    def _is_a(self, lc_name: str) -> bool:
        if self.name.lower() == lc_name:
            return True
        if self.parent is not None and self.parent._is_a(lc_name):
            return True
        return any(interface._is_a(lc_name) for interface in self.interfaces)


class ClassRegistry:
    """Supplies class descriptors by name, the way the runtime's class loader would."""

    def __init__(self, classes: Iterable[ClassDescriptor] = ()):
        self._classes: dict[str, ClassDescriptor] = {}
        for cls in classes:
            self.add(cls)

    def add(self, cls: ClassDescriptor) -> ClassDescriptor:
        self._classes[cls.name.lower()] = cls
        return cls

    def exists(self, name: str) -> bool:
        return normalize_class_name(name).lower() in self._classes

    def get(self, name: str) -> ClassDescriptor:
        try:
            return self._classes[normalize_class_name(name).lower()]
        except KeyError:
            raise ClassNotFoundError(f'Class "{name}" does not exist.', class_name=name)

    def __iter__(self) -> Iterator[ClassDescriptor]:
        return iter(self._classes.values())

    def __len__(self) -> int:
        return len(self._classes)

    @classmethod
    def from_dict(cls, document: dict[str, typing.Any]) -> ClassRegistry:
        """Build a linked registry from a JSON-shaped document.

        The document has a "classes" list; parents, interfaces and method
        prototypes reference other classes by name and may appear in any order.
        """
        registry = cls()
        entries = document.get("classes", [])
        for entry in entries:
            registry.add(_class_from_dict(entry))

        for entry in entries:
            descriptor = registry.get(entry["name"])
            if entry.get("parent"):
                descriptor.parent = registry.get(entry["parent"])
            descriptor.interfaces = [registry.get(name) for name in entry.get("interfaces", [])]

        for entry in entries:
            descriptor = registry.get(entry["name"])
            for method_entry in entry.get("methods", []):
                prototype = method_entry.get("prototype")
                if not prototype:
                    continue
                class_name, _, method_name = prototype.partition("::")
                method = descriptor.get_method(method_entry["name"])
                proto_method = registry.get(class_name).get_method(method_name or method_entry["name"])
                if proto_method is None:
                    raise ClassNotFoundError(f'Method "{prototype}()" does not exist.', class_name=class_name)
                method.prototype = proto_method

        return registry


def _optional_type(value: typing.Optional[str]) -> typing.Optional[TypeDescriptor]:
    return parse_type(value) if value else None


def _method_from_dict(entry: dict[str, typing.Any]) -> MethodDescriptor:
    return MethodDescriptor(
        name=entry["name"],
        parameters=[
            ParameterDescriptor(
                name=param["name"],
                type=_optional_type(param.get("type")),
                default=param.get("default"),
                is_optional=param.get("optional", "default" in param),
                is_variadic=param.get("variadic", False),
                by_reference=param.get("by_reference", False),
                is_sensitive=param.get("sensitive", False),
            )
            for param in entry.get("parameters", [])
        ],
        return_type=_optional_type(entry.get("return_type")),
        returns_reference=entry.get("returns_reference", False),
        has_tentative_return_type=entry.get("tentative_return_type", False),
        visibility=entry.get("visibility", "public"),
        is_static=entry.get("static", False),
        is_abstract=entry.get("abstract", False),
        is_final=entry.get("final", False),
    )


def _class_from_dict(entry: dict[str, typing.Any]) -> ClassDescriptor:
    is_interface = entry.get("interface", False)
    methods = [_method_from_dict(m) for m in entry.get("methods", [])]
    if is_interface:
        for method in methods:
            method.is_abstract = True
    return ClassDescriptor(
        name=entry["name"],
        is_final=entry.get("final", False),
        is_abstract=entry.get("abstract", False),
        is_interface=is_interface,
        is_trait=entry.get("trait", False),
        is_internal=entry.get("internal", False),
        is_readonly=entry.get("readonly", False),
        methods=methods,
        properties=[
            PropertyDescriptor(
                name=prop["name"],
                visibility=prop.get("visibility", "public"),
                is_static=prop.get("static", False),
                is_readonly=prop.get("readonly", False),
                type=_optional_type(prop.get("type")),
            )
            for prop in entry.get("properties", [])
        ],
    )
