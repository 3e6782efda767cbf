"""Generates lazy ghost classes.

A ghost extends the real class and initializes the instance in place the
first time one of its properties is accessed.
"""

from __future__ import annotations

import typing

from lazyproxy.config import readonly_supported
from lazyproxy.exceptions import ContractIneligibilityError, StructuralIneligibilityError
from lazyproxy.property_scopes import PropertyScopeCache, export_property_scopes
from lazyproxy.reflection import STD_CLASS, ClassDescriptor

from .templates import GHOST_TRAIT_METHODS, LAZY_GHOST_TRAIT, LAZY_OBJECT_INTERFACE, PRELOAD_HINTS
from .type_renderer import render_type


def check_ghost_eligibility(cls: ClassDescriptor) -> None:
    if cls.is_final:
        raise StructuralIneligibilityError(f'Cannot generate lazy ghost: class "{cls.name}" is final.', cls.name)
    if cls.is_interface or cls.is_abstract or cls.is_trait:
        raise StructuralIneligibilityError(
            f'Cannot generate lazy ghost: "{cls.name}" is not a concrete class.', cls.name
        )
    if cls.name != STD_CLASS and cls.is_internal:
        raise StructuralIneligibilityError(f'Cannot generate lazy ghost: class "{cls.name}" is internal.', cls.name)

    get_method = cls.get_method("__get")
    if get_method is not None:
        return_type = render_type(get_method.return_type, get_method.declaring_class)
        if return_type is not None and return_type != "mixed":
            raise ContractIneligibilityError(
                f'Cannot generate lazy ghost: return type of method "{cls.name}::__get()" should be "mixed".',
                cls.name,
                "__get",
            )

    for method_name in GHOST_TRAIT_METHODS:
        method = cls.get_method(method_name)
        if method is not None and method.is_final:
            raise ContractIneligibilityError(
                f'Cannot generate lazy ghost: method "{cls.name}::{method.name}()" is final.', cls.name, method.name
            )

    for ancestor in cls.ancestors():
        if ancestor.name != STD_CLASS and ancestor.is_internal:
            raise StructuralIneligibilityError(
                f'Cannot generate lazy ghost: class "{cls.name}" extends "{ancestor.name}" which is internal.',
                cls.name,
            )


def generate_lazy_ghost(
    cls: ClassDescriptor,
    cache: typing.Optional[PropertyScopeCache] = None,
    php_version_id: typing.Optional[int] = None,
) -> str:
    """Generate the body of a ghost class for `cls`, to be prefixed with `class <Name>`.

    Raises:
        IneligibleClassError: When the class can't be turned into a ghost
    """
    check_ghost_eligibility(cls)

    property_scopes = export_property_scopes(cls, cache)
    readonly = "readonly " if readonly_supported(php_version_id) and cls.is_readonly else ""

    return f"""\
 extends \\{cls.name} implements \\{LAZY_OBJECT_INTERFACE}
{{
    use \\{LAZY_GHOST_TRAIT};

    private {readonly}int $lazyObjectId;

    private const LAZY_OBJECT_PROPERTY_SCOPES = {property_scopes};
}}

{PRELOAD_HINTS}"""
