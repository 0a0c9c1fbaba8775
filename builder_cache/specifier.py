"""
specifier.py

Responsibility: split a builder package specifier into `{name, version_spec}`.

Parsing is purely syntactic; nothing here talks to a registry.

Accepted forms:
- `name`                      -> version_spec "latest"
- `name@1.2.3`, `name@^1.2`   -> explicit version / range
- `name@canary`               -> dist-tag
- `@scope/name[@spec]`        -> scoped package
- URLs, paths, `git+...`, `owner/repo[#ref]`
                              -> no package name; the raw string is used as the name
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from builder_cache.errors import BuilderCacheError

DEFAULT_VERSION_SPEC = "latest"

_NAME_RE = re.compile(r"^(?:@[a-z0-9][a-z0-9._~-]*/)?[a-z0-9][a-z0-9._~-]*$", re.IGNORECASE)
_NON_REGISTRY_PREFIXES = ("file:", "git+", "git:", "github:", "http:", "https:", ".", "/", "~")
_HOSTED_SHORTHAND_RE = re.compile(r"^[^@/\s]+/[^/\s]+(#.*)?$")


class SpecifierError(BuilderCacheError):
    code = "INVALID_BUILDER_SPECIFIER"


@dataclass(frozen=True)
class PackageSpecifier:
    raw: str
    name: str
    version_spec: str
    registry: bool = True

    def __str__(self) -> str:
        return self.raw


def _is_non_registry(raw: str) -> bool:
    if raw.startswith(_NON_REGISTRY_PREFIXES) or "://" in raw or raw.endswith((".tgz", ".tar.gz")):
        return True
    # `owner/repo[#ref]` is hosted git shorthand.
    return _HOSTED_SHORTHAND_RE.match(raw) is not None


def parse_specifier(raw: str) -> PackageSpecifier:
    """
    Parse `raw` into a `PackageSpecifier`.

    The version spec falls back to "latest" whenever the specifier carries no
    explicit version, range or tag (including a trailing bare `@`).
    """
    text = (raw or "").strip()
    if not text:
        raise SpecifierError("Builder specifier must be a non-empty string.", meta={"specifier": raw})

    if _is_non_registry(text):
        return PackageSpecifier(raw=raw, name=text, version_spec=text, registry=False)

    # The separating '@' is the first one after a possible scope prefix.
    at = text.find("@", 1 if text.startswith("@") else 0)
    if at == -1:
        name, spec = text, ""
    else:
        name, spec = text[:at], text[at + 1 :].strip()

    if not _NAME_RE.match(name):
        raise SpecifierError(f"Invalid builder package name: {name!r}", meta={"specifier": raw})

    return PackageSpecifier(raw=raw, name=name, version_spec=spec or DEFAULT_VERSION_SPEC)
