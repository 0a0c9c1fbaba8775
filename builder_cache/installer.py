"""
installer.py

Responsibility: run the external package manager inside the cache root.

This is a pass-through boundary: no output filtering and no retries. A
non-zero exit becomes an `InstallFailure` carrying the exit code and the
combined stdout/stderr of the subprocess.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from builder_cache.cache_dir import CacheRoot
from builder_cache.errors import BuilderCacheError

logger = logging.getLogger(__name__)

DEFAULT_INSTALL_COMMAND = ("npm", "install", "--prefer-offline")


class InstallFailure(BuilderCacheError):
    code = "BUILDER_INSTALL_FAILURE"

    @property
    def exit_code(self) -> int | None:
        return self.meta.get("exit_code")


@dataclass(frozen=True)
class Installer:
    command: tuple[str, ...] = DEFAULT_INSTALL_COMMAND
    env: dict[str, str] | None = field(default=None, compare=False)

    async def install(self, root: CacheRoot) -> None:
        cmd = list(self.command)
        logger.info("Running %s in %s", " ".join(cmd), root.path)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(root.path),
                env=self.env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise InstallFailure(
                f"Could not start installer: {' '.join(cmd)}: {e}",
                meta={"command": cmd, "exit_code": None, "output": ""},
            ) from e

        out, _ = await proc.communicate()
        output = out.decode("utf-8", errors="replace") if out else ""
        if proc.returncode != 0:
            raise InstallFailure(
                f"Command failed ({proc.returncode}): {' '.join(cmd)}\n\n{output}",
                meta={"command": cmd, "exit_code": proc.returncode, "output": output},
            )
