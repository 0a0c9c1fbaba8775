"""
manifest.py

Responsibility: read and write the builder manifest (`<cacheRoot>/package.json`).

Document shape:

    {"private": true, "devDependencies": {"<name>": "<version spec>", ...}}

Reads never recreate a missing file; bootstrapping is `cache_dir.py`'s job.
Writes go through a temp file and `os.replace`, so a reader never sees a
half-written document.
"""

from __future__ import annotations

import asyncio
import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

from builder_cache.cache_dir import CacheRoot
from builder_cache.errors import BuilderCacheError

DEPENDENCIES_KEY = "devDependencies"


class ManifestError(BuilderCacheError):
    code = "BUILDER_MANIFEST_INVALID"


def _read(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Could not read builder manifest {path}: {e}", meta={"path": str(path)}) from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Builder manifest {path} is not valid JSON: {e}", meta={"path": str(path)}) from e
    if not isinstance(data, dict):
        raise ManifestError(f"Builder manifest {path} must be a JSON object.", meta={"path": str(path)})
    return data


def _write(path: Path, doc: dict[str, Any]) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".package.", suffix=".json.tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(doc, f, indent=2)
            f.write("\n")
        if path.exists():
            # mkstemp creates 0600; keep the mode the manifest already has.
            os.chmod(tmp_path, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


async def read_manifest(root: CacheRoot) -> dict[str, Any]:
    return await asyncio.to_thread(_read, root.manifest_path)


async def write_manifest(root: CacheRoot, doc: dict[str, Any]) -> None:
    try:
        await asyncio.to_thread(_write, root.manifest_path, doc)
    except OSError as e:
        raise ManifestError(
            f"Could not write builder manifest {root.manifest_path}: {e}",
            meta={"path": str(root.manifest_path)},
        ) from e


def dependencies(doc: dict[str, Any]) -> dict[str, str]:
    """
    Return the manifest's dependency mapping, creating it in place if absent.
    """
    deps = doc.get(DEPENDENCIES_KEY)
    if deps is None:
        deps = {}
        doc[DEPENDENCIES_KEY] = deps
    elif not isinstance(deps, dict):
        raise ManifestError(f"`{DEPENDENCIES_KEY}` in the builder manifest must be an object.")
    return deps
