"""
host.py

Responsibility: expose the hosting tool's own dependency declarations.

The reconciler pins the shared utility package to whatever version the hosting
tool declares, so upgrading the tool upgrades the utility in every cache.
Declarations are read on every call; nothing here is cached.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Mapping

from builder_cache.errors import BuilderCacheError

HostDependencies = Callable[[], Mapping[str, str]]

# Build-time dependencies this tool ships with.
DECLARED_DEPENDENCIES: Mapping[str, str] = MappingProxyType(
    {
        "@builders/build-utils": "0.4.0",
    }
)


class HostDependencyError(BuilderCacheError):
    code = "NO_SHARED_UTILITY_VERSION"


@dataclass(frozen=True)
class ManifestHostDependencies:
    """Read `dependencies` and `devDependencies` from a host package manifest (JSON)."""

    path: Path

    def __call__(self) -> Mapping[str, str]:
        try:
            data = json.loads(Path(self.path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise HostDependencyError(
                f"Could not read host dependency declarations from {self.path}: {e}",
                meta={"path": str(self.path)},
            ) from e
        if not isinstance(data, dict):
            raise HostDependencyError(f"Host manifest {self.path} must be a JSON object.")

        out: dict[str, str] = {}
        for key in ("dependencies", "devDependencies"):
            section = data.get(key) or {}
            if not isinstance(section, dict):
                raise HostDependencyError(f"`{key}` in host manifest {self.path} must be an object.")
            out.update({str(k): str(v) for k, v in section.items()})
        return out


@dataclass(frozen=True)
class StaticHostDependencies:
    versions: Mapping[str, str] = field(default_factory=lambda: DECLARED_DEPENDENCIES)

    def __call__(self) -> Mapping[str, str]:
        return dict(self.versions)


def required_version(host: HostDependencies, name: str) -> str:
    version = host().get(name)
    if not version:
        raise HostDependencyError(
            f"The hosting tool does not declare a version of {name!r}.",
            meta={"package": name},
        )
    return version
