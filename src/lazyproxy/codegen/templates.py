"""Source templates and runtime symbol names shared by the ghost and proxy generators.

The generated classes are compiled by the lazy-object runtime, so every name
below must match that runtime exactly.
"""

VAR_EXPORTER_NAMESPACE = "Symfony\\Component\\VarExporter"

LAZY_OBJECT_INTERFACE = f"{VAR_EXPORTER_NAMESPACE}\\LazyObjectInterface"
LAZY_GHOST_TRAIT = f"{VAR_EXPORTER_NAMESPACE}\\LazyGhostTrait"
LAZY_PROXY_TRAIT = f"{VAR_EXPORTER_NAMESPACE}\\LazyProxyTrait"
HYDRATOR = f"{VAR_EXPORTER_NAMESPACE}\\Internal\\Hydrator"
LAZY_OBJECT_REGISTRY = f"{VAR_EXPORTER_NAMESPACE}\\Internal\\LazyObjectRegistry"
LAZY_OBJECT_STATE = f"{VAR_EXPORTER_NAMESPACE}\\Internal\\LazyObjectState"

# Methods provided by the traits; the generated class must be able to override them
GHOST_TRAIT_METHODS = (
    "createLazyGhost",
    "isLazyObjectInitialized",
    "initializeLazyObject",
    "resetLazyObject",
    "__get",
    "__set",
    "__isset",
    "__unset",
    "__clone",
    "__serialize",
    "__destruct",
    "setLazyObjectAsInitialized",
)

PROXY_TRAIT_METHODS = (
    "createLazyProxy",
    "isLazyObjectInitialized",
    "initializeLazyObject",
    "resetLazyObject",
    "__get",
    "__set",
    "__isset",
    "__unset",
    "__clone",
    "__serialize",
    "__unserialize",
    "__destruct",
)

PRELOAD_HINTS = f"""\
// Help opcache.preload discover always-needed symbols
class_exists(\\{HYDRATOR}::class);
class_exists(\\{LAZY_OBJECT_REGISTRY}::class);
class_exists(\\{LAZY_OBJECT_STATE}::class);
"""

# Spliced into proxies whose parent narrows the return type of __get();
# the "): mixed" of the first line is replaced by the parent's return type.
PROXY_GET_METHOD = (
    """\
    public function &__get($name): mixed
    {
        $propertyScopes = \\HYDRATOR::$propertyScopes[$this::class] ??= \\HYDRATOR::getPropertyScopes($this::class);
        $scope = null;
        $instance = $this;

        if ([$class, , $readonlyScope] = $propertyScopes[$name] ?? null) {
            $scope = \\REGISTRY::getScope($propertyScopes, $class, $name);

            if (null === $scope || isset($propertyScopes["\\0$scope\\0$name"])) {
                if (isset($this->lazyObjectReal)) {
                    $instance = $this->lazyObjectReal;
                }
                $parent = 2;
                goto get_in_scope;
            }
        }
        $parent = (\\REGISTRY::$parentMethods[self::class] ??= \\REGISTRY::getParentMethods(self::class))['get'];

        if (isset($this->lazyObjectReal)) {
            $instance = $this->lazyObjectReal;
        } else {
            if (2 === $parent) {
                return parent::__get($name);
            }
            $value = parent::__get($name);

            return $value;
        }

        if (!$parent && null === $class && !\\array_key_exists($name, (array) $instance)) {
            $frame = debug_backtrace(\\DEBUG_BACKTRACE_IGNORE_ARGS | \\DEBUG_BACKTRACE_PROVIDE_OBJECT, 1)[0];
            trigger_error(sprintf('Undefined property: %s::$%s in %s on line %s', $instance::class, $name, $frame['file'], $frame['line']), \\E_USER_NOTICE);
        }

        get_in_scope:

        try {
            if (null === $scope) {
                if (null === $readonlyScope && 1 !== $parent) {
                    return $instance->$name;
                }
                $value = $instance->$name;

                return $value;
            }
            $accessor = \\REGISTRY::$classAccessors[$scope] ??= \\REGISTRY::getClassAccessors($scope);

            return $accessor['get']($instance, $name, null !== $readonlyScope || 1 === $parent);
        } catch (\\Error $e) {
            if (\\Error::class !== $e::class || !str_starts_with($e->getMessage(), 'Cannot access uninitialized non-nullable property')) {
                throw $e;
            }

            try {
                if (null === $scope) {
                    $instance->$name = [];

                    return $instance->$name;
                }

                $accessor['set']($instance, $name, []);

                return $accessor['get']($instance, $name, null !== $readonlyScope || 1 === $parent);
            } catch (\\Error) {
                throw $e;
            }
        }
    }"""
    .replace("\\HYDRATOR", f"\\{HYDRATOR}")
    .replace("\\REGISTRY", f"\\{LAZY_OBJECT_REGISTRY}")
)

# Added to interface-only proxies; "): parent" is replaced by the proxied type
INITIALIZE_LAZY_OBJECT_METHOD = """\
    public function initializeLazyObject(): parent
    {
        if (isset($this->lazyObjectReal)) {
            return $this->lazyObjectReal;
        }

        return $this;
    }"""


def forward_void_body(method_name: str, parent_call: str) -> str:
    return f"""\
        if (isset($this->lazyObjectReal)) {{
            $this->lazyObjectReal->{method_name}(...\\func_get_args());
        }} else {{
            {parent_call};
        }}"""


def forward_return_body(method_name: str, parent_call: str) -> str:
    return f"""\
        if (isset($this->lazyObjectReal)) {{
            return $this->lazyObjectReal->{method_name}(...\\func_get_args());
        }}

        return {parent_call};"""


def parent_call(class_name: str, method_name: str, is_abstract: bool) -> str:
    if is_abstract:
        return f"throw new \\BadMethodCallException('Cannot forward abstract method \"{class_name}::{method_name}()\".')"
    return f"parent::{method_name}(...\\func_get_args())"
