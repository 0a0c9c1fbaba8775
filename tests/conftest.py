from __future__ import annotations

from pathlib import Path

import pytest

from builder_cache.cache_dir import CacheLocation, CacheRoot
from builder_cache.host import StaticHostDependencies
from builder_cache.installer import InstallFailure
from builder_cache.reconciler import Reconciler

UTILS = "@builders/build-utils"


class RecordingInstaller:
    def __init__(self, fail: bool = False) -> None:
        self.calls: list[Path] = []
        self.fail = fail

    async def install(self, root: CacheRoot) -> None:
        self.calls.append(root.path)
        if self.fail:
            raise InstallFailure("npm exited with 1", meta={"exit_code": 1, "output": ""})


class RecordingStatus:
    def __init__(self) -> None:
        self.started: list[str] = []
        self.stopped = 0

    def __call__(self, message: str):
        self.started.append(message)

        def stop() -> None:
            self.stopped += 1

        return stop


@pytest.fixture
def location(tmp_path: Path) -> CacheLocation:
    return CacheLocation(override=tmp_path / "cache")


@pytest.fixture
def installer() -> RecordingInstaller:
    return RecordingInstaller()


@pytest.fixture
def status() -> RecordingStatus:
    return RecordingStatus()


@pytest.fixture
def reconciler(location: CacheLocation, installer: RecordingInstaller, status: RecordingStatus) -> Reconciler:
    return Reconciler(
        location=location,
        installer=installer,
        host_dependencies=StaticHostDependencies({UTILS: "0.4.0"}),
        shared_utility=UTILS,
        status=status,
    )
