"""Renders reflected type descriptors back to source text."""

from __future__ import annotations

import typing

from lazyproxy.reflection import ClassDescriptor, IntersectionType, NamedType, TypeDescriptor, UnionType


def _render_name(type_: NamedType, scope: typing.Optional[ClassDescriptor]) -> str:
    name = type_.name
    lc_name = name.lower()

    if lc_name in ("self", "parent") and scope is not None:
        if lc_name == "self":
            name = scope.name
        elif scope.parent is not None:
            name = scope.parent.name
        else:
            return "parent"
    elif lc_name in ("self", "parent", "static") or type_.is_builtin:
        return name

    return f"\\{name}"


def render_type(
    type_: typing.Optional[TypeDescriptor],
    scope: typing.Optional[ClassDescriptor] = None,
    omit_builtins: bool = False,
) -> typing.Optional[str]:
    """Render a type as it must appear in generated code.

    Args:
        type_: The type to render, None when the owner has no type declaration
        scope: The class `self` and `parent` are relative to, usually the
            declaring class of the method or property owning the type
        omit_builtins: Drop builtin types (int, mixed, null...) and keep only
            class names

    Returns:
        None if there was no type, "" if every member was filtered out,
        otherwise the canonical text. Union and intersection members are
        sorted so the output doesn't depend on reflection order.
    """
    if type_ is None:
        return None

    if isinstance(type_, UnionType):
        members, glue = type_.types, "|"
    elif isinstance(type_, IntersectionType):
        members, glue = type_.types, "&"
    else:
        members, glue = (type_,), None

    rendered = []
    for member in members:
        if isinstance(member, IntersectionType):
            inner = render_type(member, scope, omit_builtins)
            if inner:
                rendered.append(f"({inner})" if glue == "|" else inner)
            continue
        if isinstance(member, UnionType):
            inner = render_type(member, scope, omit_builtins)
            if inner:
                rendered.append(inner)
            continue
        if omit_builtins and member.is_builtin:
            continue
        rendered.append(_render_name(member, scope))

    if not rendered:
        return ""

    if glue is None:
        nullable = not omit_builtins and type_.allows_null and type_.name.lower() not in ("mixed", "null")
        return ("?" if nullable else "") + rendered[0]

    return glue.join(sorted(rendered))
