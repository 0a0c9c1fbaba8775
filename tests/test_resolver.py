import asyncio
from pathlib import Path

import pytest

from builder_cache import static_builder
from builder_cache.cache_dir import CacheLocation
from builder_cache.resolver import BUILTIN_BUILDERS, BuilderResolver, ModuleNotFound


def _install_fake(location: CacheLocation, name: str, body: str) -> Path:
    root = asyncio.run(location.get())
    pkg = root.module_path(name)
    pkg.mkdir(parents=True)
    (pkg / "__init__.py").write_text(body)
    return pkg


def test_builtin_does_not_touch_cache(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    location = CacheLocation(override=blocker / "sub")
    resolver = BuilderResolver(location=location)

    assert asyncio.run(resolver.get_builder("@builders/static")) is static_builder
    assert not location.started


def test_builtin_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        BUILTIN_BUILDERS["@builders/other"] = object()  # type: ignore[index]


def test_never_installed_builder(location: CacheLocation) -> None:
    resolver = BuilderResolver(location=location)
    with pytest.raises(ModuleNotFound) as exc:
        asyncio.run(resolver.get_builder("never-installed"))
    assert exc.value.code == "BUILDER_NOT_FOUND"
    assert "install_builders" in exc.value.message


def test_loads_installed_builder_once(location: CacheLocation) -> None:
    _install_fake(
        location,
        "@scope/node",
        "version = 3\nLOADED = []\nLOADED.append(1)\n\ndef build(**kwargs):\n    return {'ok': True}\n",
    )
    resolver = BuilderResolver(location=location)

    first = asyncio.run(resolver.get_builder("@scope/node@1.0.0"))
    second = asyncio.run(BuilderResolver(location=location).get_builder("@scope/node"))

    assert first is second
    assert first.version == 3
    assert first.LOADED == [1]
    assert first.build() == {"ok": True}


def test_module_without_build_entry_point(location: CacheLocation) -> None:
    _install_fake(location, "not-a-builder", "VALUE = 1\n")
    with pytest.raises(ModuleNotFound):
        asyncio.run(BuilderResolver(location=location).get_builder("not-a-builder"))


def test_custom_loader_receives_cache_path(location: CacheLocation) -> None:
    class Loader:
        def __init__(self) -> None:
            self.paths: list[Path] = []

        def load_from_path(self, path: Path):
            self.paths.append(path)
            return static_builder

    loader = Loader()
    resolver = BuilderResolver(location=location, loader=loader)
    asyncio.run(resolver.get_builder("my-builder@2.0.0"))

    root = asyncio.run(location.get())
    assert loader.paths == [root.path / "node_modules" / "my-builder"]
