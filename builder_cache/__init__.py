"""
builder_cache package

Keeps a private, isolated cache of builder packages for a development tool and
resolves builder specifiers to loaded modules.

Key responsibilities are split across modules:
- `cache_dir.py`: locate and bootstrap the cache root (memoized, once per process)
- `manifest.py`: read/write the manifest recording installed builder versions
- `specifier.py`: syntactic `name@spec` parsing
- `reconciler.py`: minimal-diff reconciliation of desired builders, then install
- `installer.py`: the external package manager subprocess
- `resolver.py`: built-in registry first, then builders loaded from the cache
- `config.py` / `cli.py`: YAML configuration and the command line surface
"""

from __future__ import annotations

from builder_cache.cache_dir import BuilderCacheCreationFailure, CacheLocation, CacheRoot, NoCacheDirectory, prepare
from builder_cache.errors import BuilderCacheError
from builder_cache.installer import InstallFailure, Installer
from builder_cache.manifest import ManifestError, read_manifest, write_manifest
from builder_cache.reconciler import Reconciler, install_builders
from builder_cache.resolver import BUILTIN_BUILDERS, BuilderResolver, ModuleNotFound, PackageLoader, get_builder
from builder_cache.specifier import PackageSpecifier, SpecifierError, parse_specifier

__all__ = [
    "__version__",
    "BUILTIN_BUILDERS",
    "BuilderCacheCreationFailure",
    "BuilderCacheError",
    "BuilderResolver",
    "CacheLocation",
    "CacheRoot",
    "InstallFailure",
    "Installer",
    "ManifestError",
    "ModuleNotFound",
    "NoCacheDirectory",
    "PackageLoader",
    "PackageSpecifier",
    "Reconciler",
    "SpecifierError",
    "get_builder",
    "install_builders",
    "parse_specifier",
    "prepare",
    "read_manifest",
    "write_manifest",
]

__version__ = "0.1.0"
