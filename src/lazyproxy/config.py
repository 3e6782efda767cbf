"""Runtime configuration, read from the environment."""

import os
import typing

DEFAULT_PHP_VERSION_ID = 80200

# Read-only properties and classes exist from this runtime version on
READONLY_MIN_VERSION_ID = 80200


def php_version_id() -> int:
    value = os.getenv("LAZYPROXY_PHP_VERSION_ID", "")
    if not value:
        return DEFAULT_PHP_VERSION_ID
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"LAZYPROXY_PHP_VERSION_ID must be an integer, got {value!r}")


def readonly_supported(version_id: typing.Optional[int] = None) -> bool:
    if version_id is None:
        version_id = php_version_id()
    return version_id >= READONLY_MIN_VERSION_ID
