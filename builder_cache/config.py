"""
config.py

Responsibility: load the builder-cache YAML configuration into a typed model.

Recognised keys (all optional):
- namespace: str             cache base subdirectory
- cache_dir: str             explicit cache base (bypasses platform lookup)
- builders: list[str]        desired builder specifiers
- installer.command: list    package manager invocation
- shared_utility.name: str   package pinned to the host's declared version (null disables)
- host_manifest: str         JSON package manifest holding the host's declarations
- host_dependencies: dict    inline declarations, used when host_manifest is absent

Relative paths are resolved against the configuration file's directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from builder_cache.cache_dir import DEFAULT_NAMESPACE, CacheLocation
from builder_cache.errors import BuilderCacheError
from builder_cache.host import DECLARED_DEPENDENCIES, HostDependencies, ManifestHostDependencies, StaticHostDependencies
from builder_cache.installer import DEFAULT_INSTALL_COMMAND, Installer
from builder_cache.reconciler import DEFAULT_SHARED_UTILITY, Reconciler
from builder_cache.resolver import BuilderResolver

DEFAULT_CONFIG_NAME = "builders.yml"


class ConfigError(BuilderCacheError):
    code = "INVALID_BUILDER_CONFIG"


@dataclass(frozen=True)
class BuilderCacheConfig:
    namespace: str = DEFAULT_NAMESPACE
    cache_dir: Path | None = None
    builders: tuple[str, ...] = ()
    install_command: tuple[str, ...] = DEFAULT_INSTALL_COMMAND
    shared_utility: str | None = DEFAULT_SHARED_UTILITY
    host_manifest: Path | None = None
    host_dependencies: dict[str, str] = field(default_factory=lambda: dict(DECLARED_DEPENDENCIES))

    def location(self) -> CacheLocation:
        return CacheLocation(namespace=self.namespace, override=self.cache_dir)

    def host(self) -> HostDependencies:
        if self.host_manifest is not None:
            return ManifestHostDependencies(self.host_manifest)
        return StaticHostDependencies(self.host_dependencies)

    def reconciler(self, location: CacheLocation | None = None) -> Reconciler:
        return Reconciler(
            location=location or self.location(),
            installer=Installer(command=self.install_command),
            host_dependencies=self.host(),
            shared_utility=self.shared_utility,
        )

    def resolver(self, location: CacheLocation | None = None) -> BuilderResolver:
        return BuilderResolver(location=location or self.location())


def _mapping(data: dict[str, Any], key: str) -> dict[str, Any]:
    raw = data.get(key) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"`{key}` must be an object/mapping when provided.")
    return raw


def _str_list(raw: Any, key: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str) or not isinstance(raw, list):
        raise ConfigError(f"`{key}` must be a list of strings.")
    out = tuple(str(item).strip() for item in raw)
    if any(not item for item in out):
        raise ConfigError(f"`{key}` must not contain empty entries.")
    return out


def _path(raw: Any, base: Path) -> Path | None:
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    p = Path(text).expanduser()
    return p if p.is_absolute() else (base / p)


def parse_config(data: dict[str, Any], *, base_dir: str | Path = ".") -> BuilderCacheConfig:
    """
    Build a `BuilderCacheConfig` from an already-loaded mapping.
    """
    base = Path(base_dir)

    namespace = str(data.get("namespace") or DEFAULT_NAMESPACE).strip()
    if not namespace or "/" in namespace or "\\" in namespace:
        raise ConfigError(f"`namespace` must be a single directory name, got {namespace!r}.")

    installer = _mapping(data, "installer")
    command = _str_list(installer.get("command"), "installer.command") or DEFAULT_INSTALL_COMMAND

    shared = _mapping(data, "shared_utility")
    shared_name = shared.get("name", DEFAULT_SHARED_UTILITY)
    if shared_name is not None:
        shared_name = str(shared_name).strip() or None

    host_deps_raw = data.get("host_dependencies")
    if host_deps_raw is None:
        host_deps = dict(DECLARED_DEPENDENCIES)
    elif isinstance(host_deps_raw, dict):
        host_deps = {str(k): str(v) for k, v in host_deps_raw.items()}
    else:
        raise ConfigError("`host_dependencies` must be an object/mapping when provided.")

    return BuilderCacheConfig(
        namespace=namespace,
        cache_dir=_path(data.get("cache_dir"), base),
        builders=_str_list(data.get("builders"), "builders"),
        install_command=command,
        shared_utility=shared_name,
        host_manifest=_path(data.get("host_manifest"), base),
        host_dependencies=host_deps,
    )


def load_config(path: str | Path | None = None, *, required: bool = True) -> BuilderCacheConfig:
    """
    Load configuration from YAML.

    With `required=False` a missing file yields the defaults.
    """
    p = Path(path or DEFAULT_CONFIG_NAME)
    if not p.exists():
        if required:
            raise ConfigError(f"Config file does not exist: {p}", meta={"path": str(p)})
        return BuilderCacheConfig()

    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {p} is not valid YAML: {e}", meta={"path": str(p)}) from e
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping/object at the top level.", meta={"path": str(p)})
    return parse_config(data, base_dir=p.resolve().parent)
