import typing


class LazyProxyError(Exception):
    """Base class for every error raised by lazyproxy."""


class IneligibleClassError(LazyProxyError):
    """A class (or one of its methods) cannot be turned into a lazy ghost or proxy.

    Ineligibility is a static property of the class shape, so callers are
    expected to either skip lazy-loading for that class or report a
    configuration error. Retrying never helps.
    """

    category = "ineligible"

    def __init__(self, reason: str, class_name: typing.Optional[str] = None, method_name: typing.Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.class_name = class_name
        self.method_name = method_name


class StructuralIneligibilityError(IneligibleClassError):
    """The class or one of its ancestors is final, abstract, an interface or internal."""

    category = "structural"


class ContractIneligibilityError(IneligibleClassError):
    """The class declares something the lazy-loading mechanism must override but can't."""

    category = "contract"


class RequestIneligibilityError(IneligibleClassError):
    """The caller asked for something that doesn't make sense, e.g. a non-interface as interface."""

    category = "request"


class ClassNotFoundError(RequestIneligibilityError, LookupError):
    pass


class TypeSyntaxError(LazyProxyError, ValueError):
    pass


class InvalidArgumentError(LazyProxyError, ValueError):
    """Raised by the service dumper for invalid service definitions."""
