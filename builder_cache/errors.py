"""
errors.py

Responsibility: the base error type shared by every builder-cache module.

Each module defines its own concrete error next to the code that raises it
(`cache_dir.py`, `manifest.py`, `installer.py`, ...). They all derive from
`BuilderCacheError`, which carries a stable `code` and a `meta` payload so the
hosting tool can present an actionable message without parsing text.
"""

from __future__ import annotations

from typing import Any


class BuilderCacheError(RuntimeError):
    code = "BUILDER_CACHE_ERROR"

    def __init__(self, message: str, *, meta: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.meta = meta if meta is not None else {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"
