"""
resolver.py

Responsibility: turn a builder specifier into a loaded builder.

Lookup order:
1) The built-in registry, keyed by the verbatim specifier. This path never
   touches the cache directory.
2) `<cacheRoot>/node_modules/<name>`, loaded through a `BuilderLoader`.

The default `PackageLoader` imports the package with `importlib` and keeps it
in `sys.modules`, so resolving the same builder again is a dictionary lookup.
"""

from __future__ import annotations

import hashlib
import importlib.util
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType, ModuleType
from typing import Any, Mapping, Protocol

from builder_cache import static_builder
from builder_cache.cache_dir import CacheLocation, default_location
from builder_cache.errors import BuilderCacheError
from builder_cache.specifier import parse_specifier

logger = logging.getLogger(__name__)

ENTRY_FILE = "__init__.py"


class ModuleNotFound(BuilderCacheError):
    code = "BUILDER_NOT_FOUND"


class Builder(Protocol):
    def build(self, **kwargs: Any) -> Any: ...


class BuilderLoader(Protocol):
    def load_from_path(self, path: Path) -> Builder: ...


BUILTIN_BUILDERS: Mapping[str, Any] = MappingProxyType(
    {
        "@builders/static": static_builder,
    }
)


def _module_name(path: Path) -> str:
    digest = hashlib.sha256(str(path).encode("utf-8")).hexdigest()[:12]
    return f"builder_cache_loaded_{digest}"


class PackageLoader:
    """Import the Python package rooted at a cache path."""

    def load_from_path(self, path: Path) -> ModuleType:
        path = Path(path).resolve()
        name = _module_name(path)
        cached = sys.modules.get(name)
        if cached is not None:
            return cached

        entry = path / ENTRY_FILE
        if not entry.is_file():
            raise ModuleNotFound(
                f"No builder is installed at {path}. Install it with install_builders() first.",
                meta={"path": str(path)},
            )

        spec = importlib.util.spec_from_file_location(name, entry, submodule_search_locations=[str(path)])
        if spec is None or spec.loader is None:
            raise ModuleNotFound(f"Could not load builder at {path}", meta={"path": str(path)})

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            del sys.modules[name]
            raise
        logger.debug("Loaded builder module %s from %s", name, path)
        return module


@dataclass
class BuilderResolver:
    location: CacheLocation = field(default_factory=default_location)
    loader: BuilderLoader = field(default_factory=PackageLoader)
    builtins: Mapping[str, Any] = field(default_factory=lambda: BUILTIN_BUILDERS)

    async def get_builder(self, specifier: str) -> Any:
        """
        Get a builder, either built in or from the cache directory.
        """
        builder = self.builtins.get(specifier)
        if builder is not None:
            return builder

        root = await self.location.get()
        parsed = parse_specifier(specifier)
        builder = self.loader.load_from_path(root.module_path(parsed.name))
        if not hasattr(builder, "build"):
            raise ModuleNotFound(
                f"Module installed for {specifier!r} does not provide a build() entry point.",
                meta={"specifier": specifier},
            )
        return builder


async def get_builder(specifier: str, *, resolver: BuilderResolver | None = None) -> Any:
    return await (resolver or BuilderResolver()).get_builder(specifier)
