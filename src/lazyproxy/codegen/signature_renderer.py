"""Renders function and method declarations from their reflected signature."""

from __future__ import annotations

import typing

from lazyproxy.reflection import FunctionDescriptor, MethodDescriptor, ParameterDescriptor

from .default_fixer import fix_default
from .type_renderer import render_type

RETURN_TYPE_WILL_CHANGE = "#[\\ReturnTypeWillChange]"
SENSITIVE_PARAMETER = "#[\\SensitiveParameter]"

# What reflection prints for an optional parameter without a usable default
_NULL_DEFAULTS = ("<default>", "NULL")


def render_default(param: ParameterDescriptor, function: FunctionDescriptor) -> str:
    default = param.default
    if default is None or default in _NULL_DEFAULTS:
        return "null"
    if "\\" in default or "::" in default or "(" in default:
        return fix_default(default, function)
    return default


def render_parameter(param: ParameterDescriptor, function: FunctionDescriptor, with_type: bool = True) -> str:
    scope = function.declaring_class if isinstance(function, MethodDescriptor) else None
    code = f"{SENSITIVE_PARAMETER} " if param.is_sensitive else ""
    if with_type and param.type is not None:
        code += f"{render_type(param.type, scope)} "
    if param.by_reference:
        code += "&"
    if param.is_variadic:
        code += "..."
    code += f"${param.name}"
    if param.is_optional and not param.is_variadic:
        code += f" = {render_default(param, function)}"
    return code


def has_tentative_return_type(function: typing.Optional[FunctionDescriptor]) -> bool:
    """Whether the function or one of the declarations it overrides has a tentative return type.

    The prototype chain is followed until it ends or reaches an abstract method.
    """
    while function is not None:
        if function.has_tentative_return_type:
            return True
        if not isinstance(function, MethodDescriptor) or function.is_abstract:
            return False
        function = function.prototype
    return False


def render_signature(function: FunctionDescriptor, with_parameter_types: bool = True) -> str:
    """Render the declaration header of a function or method, without its body.

    e.g. `public static function &foo(?\\Bar $bar = null, ...$rest): static`
    """
    parameters = ", ".join(render_parameter(p, function, with_parameter_types) for p in function.parameters)
    name = "" if function.is_closure else function.name
    signature = f"function {'&' if function.returns_reference else ''}{name}({parameters})"

    scope = None
    if isinstance(function, MethodDescriptor):
        scope = function.declaring_class
        signature = f"{function.visibility} {'static ' if function.is_static else ''}{signature}"

    if function.return_type is not None:
        signature += f": {render_type(function.return_type, scope)}"

    if has_tentative_return_type(function):
        return f"{RETURN_TYPE_WILL_CHANGE} {signature}"

    return signature
