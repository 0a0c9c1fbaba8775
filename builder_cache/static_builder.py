"""
static_builder.py

Built-in builder that serves its entrypoint as-is. It is registered under
`@builders/static` and never needs to be installed into the cache.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Mapping

version = 2

FileRef = bytes | str | Path


def _read(ref: FileRef) -> bytes:
    if isinstance(ref, bytes):
        return ref
    return Path(ref).read_bytes()


def _entry(files: Mapping[str, FileRef], entrypoint: str) -> FileRef:
    try:
        return files[entrypoint]
    except KeyError:
        raise ValueError(f"Entrypoint {entrypoint!r} is not among the provided files.") from None


def build(
    *,
    files: Mapping[str, FileRef],
    entrypoint: str,
    work_path: str | Path | None = None,
    config: Mapping[str, Any] | None = None,
) -> dict[str, FileRef]:
    """
    Output the entrypoint file unchanged under its own path.

    `work_path` and `config` are part of the builder entry-point signature; a
    static file needs neither.
    """
    return {entrypoint: _entry(files, entrypoint)}


def analyze(*, files: Mapping[str, FileRef], entrypoint: str, **_: Any) -> str:
    """Fingerprint of the entrypoint's contents; identical input means identical output."""
    return hashlib.sha256(_read(_entry(files, entrypoint))).hexdigest()
