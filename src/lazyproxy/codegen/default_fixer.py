"""Re-qualifies names in default value expressions.

Reflection prints default values as they were written in the declaring class,
where `self`, `parent` and unqualified names were resolved relative to that
class and its namespace. Generated code lives elsewhere, so every such name
must become fully qualified.
"""

from __future__ import annotations

import re
from logging import getLogger

from lazyproxy.reflection import FunctionDescriptor, MethodDescriptor

logger = getLogger(__name__)

_STRING_LITERAL_RE = re.compile(r"""("(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')""", re.DOTALL)

# An identifier at the start of the expression or after "(" or " ", not followed by a named-argument colon
_IDENTIFIER_RE = re.compile(
    r"([( ]|^)([a-zA-Z_\x7f-\uffff][a-zA-Z0-9_\x7f-\uffff]*+(?:\\[a-zA-Z0-9_\x7f-\uffff]++)*+)(?!: )"
)


def _method_replacer(method: MethodDescriptor):
    declaring_class = method.declaring_class

    def replace(match: re.Match) -> str:
        prefix, name = match.group(1), match.group(2)
        if name == "new":
            return prefix + name
        if name == "self" and declaring_class is not None:
            return f"{prefix}\\{declaring_class.name}"
        if name in ("parent", "namespace\\parent"):
            if declaring_class is not None and declaring_class.parent is not None:
                return f"{prefix}\\{declaring_class.parent.name}"
            logger.debug(f"No parent class to resolve `parent` in a default value of {method.class_name}::{method.name}()")
            return prefix + "parent"
        return f"{prefix}\\{name}"

    return replace


def _function_replacer(match: re.Match) -> str:
    prefix, name = match.group(1), match.group(2)
    if name in ("new", "self", "parent"):
        return prefix + name
    return f"{prefix}\\{name}"


def fix_default(default: str, function: FunctionDescriptor) -> str:
    if isinstance(function, MethodDescriptor):
        replacer = _method_replacer(function)
    else:
        replacer = _function_replacer

    parts = []
    for part in _STRING_LITERAL_RE.split(default):
        if not part:
            continue
        if part[0] == '"':
            # double-quoted literals only come from internal classes and are already resolved
            parts.append(part)
        elif part[0] == "'":
            parts.append(part.replace("\0", "'.\"\\0\".'"))
        else:
            parts.append(_IDENTIFIER_RE.sub(replacer, part))

    return "".join(parts)
