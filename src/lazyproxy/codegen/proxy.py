"""Generates lazy virtual proxy classes.

A virtual proxy implements the same contract as the real object and forwards
method calls to a real instance created on demand.
"""

from __future__ import annotations

import re
import typing
from collections.abc import Sequence

from lazyproxy.config import readonly_supported
from lazyproxy.exceptions import (
    ContractIneligibilityError,
    RequestIneligibilityError,
    StructuralIneligibilityError,
)
from lazyproxy.property_scopes import PropertyScopeCache, export_property_scopes
from lazyproxy.reflection import STD_CLASS, ClassDescriptor, MethodDescriptor

from . import templates
from .signature_renderer import render_signature
from .type_renderer import render_type

_PROXY_TRAIT_METHODS = frozenset(name.lower() for name in templates.PROXY_TRAIT_METHODS)


def _extends_internal_class(cls: typing.Optional[ClassDescriptor]) -> bool:
    if cls is None:
        return False
    return any(c.name != STD_CLASS and c.is_internal for c in (cls, *cls.ancestors()))


def _final_method_error(cls: typing.Optional[ClassDescriptor], method: MethodDescriptor) -> ContractIneligibilityError:
    class_name = cls.name if cls is not None else method.class_name
    return ContractIneligibilityError(
        f'Cannot generate lazy proxy: method "{class_name}::{method.name}()" is final.', class_name, method.name
    )


def _may_return_proxy(
    method: MethodDescriptor, cls: typing.Optional[ClassDescriptor], interfaces: Sequence[ClassDescriptor]
) -> bool:
    """Whether the method could return the proxy itself (e.g. fluent setters returning $this)."""
    return_type = render_type(method.return_type, method.declaring_class)
    if return_type is None:
        return True
    for name in re.split(r"[()|&]+", return_type):
        name = name.lstrip("?")
        if name in ("static", "object"):
            return True
        if any(r.is_subclass_of(name) for r in (cls, *interfaces) if r is not None):
            return True
    return False


def _collect_methods(
    cls: typing.Optional[ClassDescriptor], interfaces: Sequence[ClassDescriptor]
) -> list[MethodDescriptor]:
    methods = cls.get_methods(("public", "protected")) if cls is not None else []
    for interface in interfaces:
        if not interface.is_interface:
            raise RequestIneligibilityError(
                f'Cannot generate lazy proxy: "{interface.name}" is not an interface.', interface.name
            )
        methods.extend(interface.get_methods())
    return methods


def generate_proxy_methods(
    cls: typing.Optional[ClassDescriptor],
    interfaces: Sequence[ClassDescriptor],
    methods_have_to_be_proxied: bool = False,
) -> dict[str, str]:
    """Generate the forwarding methods of a proxy, keyed by lowercased method name.

    Args:
        cls: The proxied class, None for interface-only proxies
        interfaces: Additional interfaces the proxy implements
        methods_have_to_be_proxied: Forward every method, even those that are
            fine being inherited

    Raises:
        IneligibleClassError: When a method that needs forwarding is final
    """
    method_reflectors = _collect_methods(cls, interfaces)
    extends_internal_class = _extends_internal_class(cls)
    methods_have_to_be_proxied = methods_have_to_be_proxied or extends_internal_class
    methods: dict[str, str] = {}

    for method in method_reflectors:
        if method.name.lower() != "__get":
            continue
        return_type = render_type(method.return_type, method.declaring_class)
        if return_type is None or return_type == "mixed":
            continue
        if method.is_final:
            raise _final_method_error(cls, method)
        # a narrowed __get() means property reads must always be intercepted
        methods_have_to_be_proxied = True
        methods["__get"] = templates.PROXY_GET_METHOD.replace("): mixed", f"): {return_type}", 1)
        break

    seen: set[str] = set()
    final_methods: dict[str, MethodDescriptor] = {}

    for method in method_reflectors:
        lc_name = method.name.lower()
        if method.is_static:
            continue
        if lc_name in final_methods:
            # an interface asks for a method the class declares final
            raise _final_method_error(cls, final_methods[lc_name])
        if lc_name in methods or lc_name in seen:
            continue
        seen.add(lc_name)

        if method.is_final:
            if methods_have_to_be_proxied or lc_name in _PROXY_TRAIT_METHODS:
                raise _final_method_error(cls, method)
            final_methods[lc_name] = method
            continue
        if lc_name in _PROXY_TRAIT_METHODS or (method.is_protected and not method.is_abstract):
            continue

        signature = render_signature(method)
        parent_call = templates.parent_call(method.class_name, method.name, method.is_abstract)

        if signature.endswith("): never") or signature.endswith("): void"):
            body = templates.forward_void_body(method.name, parent_call)
        else:
            if not methods_have_to_be_proxied and not method.is_abstract and _may_return_proxy(method, cls, interfaces):
                # left to inheritance so that $this keeps pointing at the proxy
                continue
            body = templates.forward_return_body(method.name, parent_call)

        methods[lc_name] = f"    {signature}\n    {{\n{body}\n    }}"

    return methods


def generate_lazy_proxy(
    cls: typing.Optional[ClassDescriptor],
    interfaces: Sequence[ClassDescriptor] = (),
    cache: typing.Optional[PropertyScopeCache] = None,
    php_version_id: typing.Optional[int] = None,
) -> str:
    """Generate the body of a virtual proxy class, to be prefixed with `class <Name>`.

    Args:
        cls: The class to proxy, or None to proxy `interfaces` only
        interfaces: Interfaces the proxy must implement on top of `cls`
        cache: Property scope cache, the process-wide one by default
        php_version_id: Runtime version the code targets, from the environment by default

    Raises:
        IneligibleClassError: When the class or interfaces can't be proxied
    """
    if cls is not None and (cls.is_interface or cls.is_trait):
        raise RequestIneligibilityError(f'Cannot generate lazy proxy: "{cls.name}" is not a class.', cls.name)
    if cls is not None and cls.is_final:
        raise StructuralIneligibilityError(f'Cannot generate lazy proxy: class "{cls.name}" is final.', cls.name)
    if cls is None and not interfaces:
        raise RequestIneligibilityError("Cannot generate lazy proxy: no class nor interface given.")

    methods = generate_proxy_methods(cls, interfaces)

    readonly = "readonly " if readonly_supported(php_version_id) and cls is not None and cls.is_readonly else ""
    interface_names = list(dict.fromkeys(interface.name for interface in interfaces))
    implements = ", \\".join([*interface_names, templates.LAZY_OBJECT_INTERFACE])
    extends = f" extends \\{cls.name}" if cls is not None else ""
    real_type = "&\\".join(["parent" if cls is not None else "", *interface_names]).lstrip("&")

    if cls is None:
        initializer = templates.INITIALIZE_LAZY_OBJECT_METHOD.replace("): parent", f"): {real_type}", 1)
        methods = {"initializelazyobject": initializer, **methods}

    body = "\n" + "\n\n".join(methods.values()) + "\n" if methods else ""

    if cls is not None:
        property_scopes = export_property_scopes(cls, cache)[1:-6]
        body = f"""
    private const LAZY_OBJECT_PROPERTY_SCOPES = [
        'lazyObjectReal' => [self::class, 'lazyObjectReal', null],
        "\\0".self::class."\\0lazyObjectReal" => [self::class, 'lazyObjectReal', null],{property_scopes}
    ];
{body}"""

    return f"""\
{extends} implements \\{implements}
{{
    use \\{templates.LAZY_PROXY_TRAIT};

    private {readonly}int $lazyObjectId;
    private {readonly}{real_type} $lazyObjectReal;
{body}}}

{templates.PRELOAD_HINTS}"""
