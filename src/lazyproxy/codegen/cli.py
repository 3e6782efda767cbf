#!/usr/bin/env python3
"""
Command line interface for lazy ghost and proxy generation.

Usage:
    python -m lazyproxy.codegen -r <classes.json> ghost <class> [<class> ...]
    python -m lazyproxy.codegen -r <classes.json> proxy [<class>] [-i <interface> ...]

The classes file is a JSON document describing the reflected classes, see
`ClassRegistry.from_dict`. Each generated class is named after the class it
wraps, suffixed with "Ghost" or "Proxy".

Examples:
    # Print a ghost for App\\Mailer
    python -m lazyproxy.codegen -r classes.json --stdout ghost 'App\\Mailer'

    # Write a proxy of App\\Mailer also implementing App\\Resettable to generated/
    python -m lazyproxy.codegen -r classes.json -o generated proxy 'App\\Mailer' -i 'App\\Resettable'

    # Proxy an interface only
    python -m lazyproxy.codegen -r classes.json proxy -i 'App\\MailerInterface'
"""

import argparse
import json
import subprocess
import sys
import typing
from pathlib import Path

from lazyproxy.config import readonly_supported
from lazyproxy.exceptions import InvalidArgumentError, LazyProxyError
from lazyproxy.property_scopes import PropertyScopeCache
from lazyproxy.reflection import ClassRegistry

from .ghost import generate_lazy_ghost
from .proxy import generate_lazy_proxy
from .writer import write_classes


def run_php_lint_on_file(file_path: Path) -> bool:
    """
    Run `php -l` on a generated file.

    Args:
        file_path: Path to the file to check

    Returns:
        True if the file parsed
    """
    result = subprocess.run(
        ["php", "-l", str(file_path)],
        capture_output=True,
        text=True,
    )
    return result.returncode == 0


def load_registry(path: Path) -> ClassRegistry:
    with path.open() as f:
        document = json.load(f)
    try:
        return ClassRegistry.from_dict(document)
    except KeyError as exc:
        raise InvalidArgumentError(f"Invalid classes file {path}: missing {exc} key.") from exc


def generate_classes(args: argparse.Namespace, registry: ClassRegistry) -> dict[str, str]:
    """Generate the requested classes, keyed by generated class name."""
    cache = PropertyScopeCache()
    classes: dict[str, str] = {}

    if args.kind == "ghost":
        for class_name in args.classes:
            cls = registry.get(class_name)
            name = f"{cls.short_name}Ghost"
            print(f"  Generating ghost: {name}", file=sys.stderr)
            classes[name] = f"class {name}" + generate_lazy_ghost(cls, cache, args.php_version_id)
        return classes

    cls = registry.get(args.class_name) if args.class_name else None
    interfaces = [registry.get(name) for name in args.interfaces]
    name = args.name or f"{(cls or interfaces[0]).short_name}Proxy"
    print(f"  Generating proxy: {name}", file=sys.stderr)
    readonly = "readonly " if cls is not None and cls.is_readonly and readonly_supported(args.php_version_id) else ""
    classes[name] = f"{readonly}class {name}" + generate_lazy_proxy(cls, interfaces, cache, args.php_version_id)
    return classes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate lazy ghost and virtual proxy classes from reflected class metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-r",
        "--registry",
        required=True,
        help="JSON file describing the reflected classes",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        default=".",
        help="Output directory for generated files (default: current directory)",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print all classes to stdout instead of writing files",
    )
    parser.add_argument(
        "--php-version-id",
        type=int,
        default=None,
        help="Runtime version the code targets (default: $LAZYPROXY_PHP_VERSION_ID or 80200)",
    )
    parser.add_argument(
        "--lint",
        action="store_true",
        help="Run `php -l` on the written files",
    )

    subparsers = parser.add_subparsers(dest="kind", required=True)

    ghost_parser = subparsers.add_parser("ghost", help="Generate lazy ghost classes")
    ghost_parser.add_argument("classes", nargs="+", help="Classes to generate ghosts for")

    proxy_parser = subparsers.add_parser("proxy", help="Generate a lazy virtual proxy class")
    proxy_parser.add_argument("class_name", nargs="?", default=None, help="Class to proxy (omit for interface-only)")
    proxy_parser.add_argument(
        "-i",
        "--interface",
        action="append",
        dest="interfaces",
        default=[],
        help="Interface the proxy implements (can be specified multiple times)",
    )
    proxy_parser.add_argument("--name", default=None, help="Name of the generated class")

    return parser


def main(argv: typing.Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.kind == "proxy" and not args.class_name and not args.interfaces:
        parser.error("proxy needs a class, at least one --interface, or both")

    print(f"Loading classes from {args.registry}...", file=sys.stderr)
    try:
        registry = load_registry(Path(args.registry))
        print(f"  Loaded {len(registry)} class(es)", file=sys.stderr)
        classes = generate_classes(args, registry)
    except (LazyProxyError, OSError, json.JSONDecodeError) as exc:
        print(f"\nError: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.stdout:
        for name in sorted(classes):
            print(f"// File: {name}.php\n")
            print(classes[name])
        return

    output_dir = Path(args.output_dir)
    failed = []
    for class_path in write_classes(output_dir, classes):
        print(f"  Wrote: {class_path}", file=sys.stderr)
        if args.lint and not run_php_lint_on_file(class_path):
            print(f"  Lint failed: {class_path}", file=sys.stderr)
            failed.append(class_path)

    if failed:
        sys.exit(1)

    print("\nGeneration completed successfully!", file=sys.stderr)


if __name__ == "__main__":
    main()
