"""Dumps lazy services of a dependency injection container as ghosts or virtual proxies."""

from __future__ import annotations

import dataclasses
import hashlib
import re
import typing
from logging import getLogger

from .codegen import generate_lazy_ghost, generate_lazy_proxy
from .config import readonly_supported
from .exceptions import IneligibleClassError, InvalidArgumentError
from .property_scopes import PropertyScopeCache, export_string
from .reflection import ClassDescriptor, ClassRegistry

logger = getLogger(__name__)

# (method name, arguments, whether the call returns a modified clone)
MethodCall = tuple[str, list[typing.Any], bool]


@dataclasses.dataclass
class Definition:
    """The parts of a service definition the dumper looks at."""

    class_name: typing.Optional[str] = None
    lazy: bool = False
    shared: bool = True
    public: bool = False
    private: bool = True
    factory: typing.Any = None
    method_calls: list[MethodCall] = dataclasses.field(default_factory=list)
    tags: dict[str, list[dict[str, typing.Any]]] = dataclasses.field(default_factory=dict)

    def has_tag(self, name: str) -> bool:
        return name in self.tags

    def get_tag(self, name: str) -> list[dict[str, typing.Any]]:
        return self.tags.get(name, [])


class LazyServiceDumper:
    def __init__(
        self,
        registry: ClassRegistry,
        salt: str = "",
        cache: typing.Optional[PropertyScopeCache] = None,
        php_version_id: typing.Optional[int] = None,
    ):
        self.registry = registry
        self.salt = salt
        self.cache = cache
        self.php_version_id = php_version_id

    def is_proxy_candidate(self, definition: Definition, id: typing.Optional[str] = None) -> tuple[bool, bool]:
        """Whether the service can be lazy-loaded, and whether as a ghost object.

        Returns:
            Tuple of (is_candidate, as_ghost_object)
        """
        if definition.has_tag("proxy"):
            if not definition.lazy:
                raise InvalidArgumentError(
                    f'Invalid definition for service "{id or definition.class_name}": '
                    'setting the "proxy" tag on a service requires it to be "lazy".'
                )
            return True, False

        if not definition.lazy:
            return False, False

        class_name = definition.class_name
        if not class_name or not self.registry.exists(class_name):
            return False, False

        if definition.factory:
            return True, False

        for call in definition.method_calls:
            if len(call) > 2 and call[2]:
                return True, False

        try:
            generate_lazy_ghost(self.registry.get(class_name), self.cache, self.php_version_id)
        except IneligibleClassError as exc:
            logger.debug(f"Service {id or class_name} will be proxied instead of ghosted: {exc.reason}")
            return True, False

        return True, True

    def get_proxy_factory_code(self, definition: Definition, id: str, factory_code: str) -> str:
        instantiation = "return"

        if definition.shared:
            storage = "services" if definition.public and not definition.private else "privates"
            instantiation += f" $this->{storage}[{export_string(id)}] ="

        proxy_class = self.get_proxy_class(definition)

        if "$proxy" not in factory_code:
            return f"""\
        if (true === $lazyLoad) {{
            {instantiation} $this->createProxy('{proxy_class}', fn () => \\{proxy_class}::createLazyProxy(fn () => {factory_code}));
        }}

"""

        if re.fullmatch(r"\$this->\w+\(\$proxy\)", factory_code):
            factory_code = factory_code[: -len("($proxy)")] + "(...)"
        else:
            factory_code = f"fn ($proxy) => {factory_code}"

        return f"""\
        if (true === $lazyLoad) {{
            {instantiation} $this->createProxy('{proxy_class}', fn () => \\{proxy_class}::createLazyGhost({factory_code}));
        }}

"""

    def get_proxy_code(self, definition: Definition, id: typing.Optional[str] = None) -> str:
        service = id or definition.class_name
        is_candidate, as_ghost = self.is_proxy_candidate(definition, id)
        if not is_candidate:
            raise InvalidArgumentError(f'Cannot instantiate lazy proxy for service "{service}".')

        if not definition.class_name:
            raise InvalidArgumentError(f'Invalid definition for service "{id}": the service has no class.')
        proxy_class = self.get_proxy_class(definition)
        cls: typing.Optional[ClassDescriptor] = self.registry.get(definition.class_name)

        if as_ghost:
            try:
                return f"class {proxy_class}" + generate_lazy_ghost(cls, self.cache, self.php_version_id)
            except IneligibleClassError as exc:
                raise InvalidArgumentError(f'Cannot generate lazy ghost for service "{service}".') from exc

        interfaces: list[ClassDescriptor] = []

        if definition.has_tag("proxy"):
            for tag in definition.get_tag("proxy"):
                if "interface" not in tag:
                    raise InvalidArgumentError(
                        f'Invalid definition for service "{service}": '
                        'the "interface" attribute is missing on a "proxy" tag.'
                    )
                if not self.registry.exists(tag["interface"]):
                    raise InvalidArgumentError(
                        f'Invalid definition for service "{service}": '
                        f'several "proxy" tags found but "{tag["interface"]}" is not an interface.'
                    )
                interfaces.append(self.registry.get(tag["interface"]))

            if len(interfaces) == 1 and not interfaces[0].is_interface:
                cls = interfaces.pop()
        elif cls.is_interface:
            interfaces = [cls]
            cls = None

        readonly = "readonly " if readonly_supported(self.php_version_id) and cls is not None and cls.is_readonly else ""
        try:
            return f"{readonly}class {proxy_class}" + generate_lazy_proxy(
                cls, interfaces, self.cache, self.php_version_id
            )
        except IneligibleClassError as exc:
            raise InvalidArgumentError(f'Cannot generate lazy proxy for service "{service}".') from exc

    def get_proxy_class(self, definition: Definition) -> str:
        if not definition.class_name:
            raise InvalidArgumentError("Cannot generate a lazy proxy class for a service without a class.")
        cls = self.registry.get(definition.class_name)
        digest = hashlib.sha256(f"{self.salt}+{cls.name}".encode()).hexdigest()
        return f"{cls.short_name}_{digest[-7:]}"
