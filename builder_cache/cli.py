"""
cli.py

Responsibility: thin CLI over the builder cache for the hosting tool and for
debugging a cache by hand.

Commands:
- `install [SPEC ...]`  reconcile the configured builders plus SPEC arguments
- `resolve SPEC`        load a builder and print where it came from
- `path`                print the cache root (bootstrapping it if needed)

The library modules do the work; this module only wires configuration into
them and turns `BuilderCacheError` into an exit status.
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import os
import sys
from pathlib import Path

from builder_cache.config import DEFAULT_CONFIG_NAME, BuilderCacheConfig, load_config
from builder_cache.errors import BuilderCacheError
from builder_cache.resolver import BUILTIN_BUILDERS

CACHE_DIR_ENV = "BUILDER_CACHE_DIR"


def _load(args: argparse.Namespace) -> BuilderCacheConfig:
    explicit = args.config is not None
    config = load_config(args.config or DEFAULT_CONFIG_NAME, required=explicit)

    # CLI overrides
    cache_dir = args.cache_dir or os.environ.get(CACHE_DIR_ENV)
    if cache_dir:
        config = dataclasses.replace(config, cache_dir=Path(cache_dir).expanduser())
    return config


def install_cmd(args: argparse.Namespace) -> int:
    config = _load(args)
    specs = [*config.builders, *args.specs]
    updated = asyncio.run(config.reconciler().install_builders(specs))
    if updated:
        print(f"Installed builders: {', '.join(updated)}")
    else:
        print("Builders up to date")
    return 0


def resolve_cmd(args: argparse.Namespace) -> int:
    config = _load(args)
    builder = asyncio.run(config.resolver().get_builder(args.spec))
    name = getattr(builder, "__name__", type(builder).__name__)
    origin = "built-in" if args.spec in BUILTIN_BUILDERS else getattr(builder, "__file__", None)
    version = getattr(builder, "version", None)
    print(f"{args.spec}: {name} ({origin})" + (f" version {version}" if version is not None else ""))
    return 0


def path_cmd(args: argparse.Namespace) -> int:
    config = _load(args)
    root = asyncio.run(config.location().get())
    print(root.path)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="builder-cache", description="Manage the local cache of builder packages")
    p.add_argument("--config", default=None, help=f"Config file (default: {DEFAULT_CONFIG_NAME} if present)")
    p.add_argument("--cache-dir", default=None, help=f"Cache base directory (or set env {CACHE_DIR_ENV})")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    i = sub.add_parser("install", help="Install configured builders plus any given specifiers")
    i.add_argument("specs", nargs="*", help="Builder specifiers, e.g. @builders/node@1.2.0")
    i.set_defaults(func=install_cmd)

    r = sub.add_parser("resolve", help="Resolve a builder specifier to a loaded module")
    r.add_argument("spec", help="Builder specifier")
    r.set_defaults(func=resolve_cmd)

    c = sub.add_parser("path", help="Print the builder cache directory")
    c.set_defaults(func=path_cmd)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return int(args.func(args))
    except BuilderCacheError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
