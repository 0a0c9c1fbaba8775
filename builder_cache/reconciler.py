"""
reconciler.py

Responsibility: bring the builder manifest in line with a desired list of
builder specifiers and install only what changed.

Flow of `Reconciler.install_builders()`:
1) Await the memoized cache root
2) Read the manifest (`devDependencies` is created if missing)
3) Record every specifier whose version spec differs from the manifest
4) Pin the shared utility package to the hosting tool's declared version
5) If anything changed: persist the manifest, then run the installer

Properties callers should know about:
- Calling twice with the same input installs once; the second call is a no-op.
- The manifest is written *before* the install runs. If the install fails the
  manifest already describes the desired state, so retrying with the same input
  sees no difference and does not install again.
- Two overlapping calls in one process each read-modify-write the manifest;
  the last writer wins.
- Entries are never removed from the manifest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from builder_cache.cache_dir import CacheLocation, default_location
from builder_cache.host import HostDependencies, StaticHostDependencies, required_version
from builder_cache.installer import Installer
from builder_cache.manifest import dependencies, read_manifest, write_manifest
from builder_cache.specifier import parse_specifier
from builder_cache.status import StatusIndicator, log_status

logger = logging.getLogger(__name__)

DEFAULT_SHARED_UTILITY = "@builders/build-utils"


def diff_specifiers(deps: dict[str, str], specifiers: Iterable[str]) -> list[str]:
    """
    Record each specifier in `deps` and return the input strings that changed it.

    `deps` is updated in place.
    """
    changed: list[str] = []
    for raw in specifiers:
        parsed = parse_specifier(raw)
        if deps.get(parsed.name) != parsed.version_spec:
            deps[parsed.name] = parsed.version_spec
            changed.append(raw)
    return changed


@dataclass
class Reconciler:
    location: CacheLocation = field(default_factory=default_location)
    installer: Installer = field(default_factory=Installer)
    host_dependencies: HostDependencies = field(default_factory=StaticHostDependencies)
    shared_utility: str | None = DEFAULT_SHARED_UTILITY
    status: StatusIndicator = log_status

    async def install_builders(self, specifiers: Iterable[str]) -> list[str]:
        """
        Install the given builder specifiers into the cache directory.

        Returns the specifiers that triggered the install (empty when nothing
        changed and nothing was installed).
        """
        root = await self.location.get()
        pkg = await read_manifest(root)
        deps = dependencies(pkg)

        updated = diff_specifiers(deps, specifiers)

        # Pull the same shared utility version the hosting tool is using.
        if self.shared_utility:
            version = required_version(self.host_dependencies, self.shared_utility)
            if deps.get(self.shared_utility) != version:
                updated.append(f"{self.shared_utility}@{version}")
                deps[self.shared_utility] = version

        if not updated:
            logger.debug("Builders up to date in %s", root.path)
            return updated

        stop = self.status(f"Installing builders: {', '.join(updated)}")
        try:
            await write_manifest(root, pkg)
            await self.installer.install(root)
        finally:
            stop()
        return updated


async def install_builders(specifiers: Iterable[str], *, reconciler: Reconciler | None = None) -> list[str]:
    return await (reconciler or Reconciler()).install_builders(specifiers)
