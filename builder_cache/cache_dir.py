"""
cache_dir.py

Responsibility: locate and bootstrap the on-disk root that holds builder state.

Layout under the resolved root:
- `package.json`   the manifest (see `manifest.py`)
- `node_modules/`  installed builder packages (populated by `installer.py`)

`CacheLocation.get()` performs its side effects at most once. The first
outcome (a `CacheRoot` or an error) is memoized and handed to every later
caller; a failed bootstrap is not retried. A bootstrap that was cancelled
(its event loop shut down before it settled) is started again on the next call.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import traceback
from dataclasses import dataclass
from pathlib import Path

from builder_cache.errors import BuilderCacheError

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "builder-cache"
BUILDERS_SUBDIR = Path("dev") / "builders"
MANIFEST_NAME = "package.json"
MODULES_DIR_NAME = "node_modules"


class NoCacheDirectory(BuilderCacheError):
    code = "NO_BUILDER_CACHE_DIR"


class BuilderCacheCreationFailure(BuilderCacheError):
    code = "BUILDER_CACHE_CREATION_FAILURE"


@dataclass(frozen=True)
class CacheRoot:
    path: Path

    @property
    def manifest_path(self) -> Path:
        return self.path / MANIFEST_NAME

    @property
    def modules_dir(self) -> Path:
        return self.path / MODULES_DIR_NAME

    def module_path(self, name: str) -> Path:
        return self.modules_dir / name


def _usable(path: Path) -> bool:
    """
    A base is usable if it is a writable directory, or if it does not exist yet
    and its nearest existing ancestor is writable.
    """
    probe = path
    while not probe.exists():
        if probe.parent == probe:
            return False
        probe = probe.parent
    return probe.is_dir() and os.access(probe, os.W_OK | os.X_OK)


def _candidate_bases(override: str | Path | None) -> list[Path]:
    if override:
        return [Path(override).expanduser()]

    out: list[Path] = []
    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        out.append(Path(xdg))
    try:
        out.append(Path.home() / ".cache")
    except RuntimeError:
        # No resolvable home directory.
        pass
    out.append(Path(tempfile.gettempdir()))
    return out


def find_cache_base(namespace: str = DEFAULT_NAMESPACE, override: str | Path | None = None) -> Path | None:
    """
    Return `<base>/<namespace>` for the first usable base, or None.
    """
    for base in _candidate_bases(override):
        if _usable(base):
            return (base / namespace).resolve()
    return None


def _bootstrap(cache_dir: Path) -> None:
    cache_dir.mkdir(parents=True, exist_ok=True)

    # Create an empty private manifest, but only if one does not already exist.
    manifest = cache_dir / MANIFEST_NAME
    try:
        with open(manifest, "x", encoding="utf-8") as f:
            json.dump({"private": True}, f)
            f.write("\n")
        logger.info("Created builder manifest at %s", manifest)
    except FileExistsError:
        logger.debug("Builder manifest already present at %s", manifest)


async def prepare_cache(namespace: str = DEFAULT_NAMESPACE, override: str | Path | None = None) -> CacheRoot:
    """
    Resolve and bootstrap the builder cache directory (not memoized).
    """
    designated = find_cache_base(namespace, override)
    if designated is None:
        raise NoCacheDirectory(
            "Could not find cache directory for builders.",
            meta={"namespace": namespace, "override": str(override) if override else None},
        )

    cache_dir = designated / BUILDERS_SUBDIR
    try:
        await asyncio.to_thread(_bootstrap, cache_dir)
    except OSError as e:
        raise BuilderCacheCreationFailure(
            f"Could not create cache directory for builders: {e}",
            meta={"path": str(cache_dir), "traceback": traceback.format_exc()},
        ) from e
    return CacheRoot(path=cache_dir)


class CacheLocation:
    """
    Exactly-once holder for a `CacheRoot`.

    Concurrent first callers share one in-flight task, so only one of them
    creates directories.
    """

    def __init__(self, namespace: str = DEFAULT_NAMESPACE, override: str | Path | None = None) -> None:
        self.namespace = namespace
        self.override = override
        self._task: asyncio.Future[CacheRoot] | None = None

    @property
    def started(self) -> bool:
        return self._task is not None

    async def get(self) -> CacheRoot:
        if self._task is not None and self._task.cancelled():
            # The bootstrap was abandoned along with its event loop; start it again.
            self._task = None
        if self._task is None:
            self._task = asyncio.ensure_future(prepare_cache(self.namespace, self.override))
        if self._task.done():
            # Settled outcomes are replayed without touching the event loop that produced them.
            return self._task.result()
        return await asyncio.shield(self._task)


_default_location: CacheLocation | None = None


def default_location() -> CacheLocation:
    """
    Return the process-wide `CacheLocation`, created on first use.
    """
    global _default_location
    if _default_location is None:
        _default_location = CacheLocation()
    return _default_location


def configure_default_location(location: CacheLocation) -> None:
    """
    Replace the process-wide location. Meant for the hosting tool's startup.
    """
    global _default_location
    _default_location = location


async def prepare() -> CacheRoot:
    """
    Memoized builder cache bootstrap for this process.
    """
    return await default_location().get()
