import asyncio
import stat
from pathlib import Path

import pytest

from builder_cache.cache_dir import CacheLocation, CacheRoot
from builder_cache.manifest import ManifestError, dependencies, read_manifest, write_manifest


def test_round_trip(location: CacheLocation) -> None:
    root = asyncio.run(location.get())
    doc = {"private": True, "devDependencies": {"b": "2.0.0", "@scope/a": "latest"}}

    asyncio.run(write_manifest(root, doc))
    assert asyncio.run(read_manifest(root)) == doc
    assert [p.name for p in root.path.iterdir()] == ["package.json"]


def test_missing_manifest_is_not_recreated(tmp_path: Path) -> None:
    root = CacheRoot(path=tmp_path)
    with pytest.raises(ManifestError):
        asyncio.run(read_manifest(root))
    assert not root.manifest_path.exists()


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_corrupt_manifest_fails(tmp_path: Path, content: str) -> None:
    root = CacheRoot(path=tmp_path)
    root.manifest_path.write_text(content)
    with pytest.raises(ManifestError) as exc:
        asyncio.run(read_manifest(root))
    assert exc.value.code == "BUILDER_MANIFEST_INVALID"


def test_dependencies_initialized_in_place() -> None:
    doc = {"private": True}
    deps = dependencies(doc)
    deps["a"] = "latest"
    assert doc == {"private": True, "devDependencies": {"a": "latest"}}


def test_dependencies_must_be_an_object() -> None:
    with pytest.raises(ManifestError):
        dependencies({"devDependencies": ["a"]})


def test_write_keeps_existing_file_mode(location: CacheLocation) -> None:
    root = asyncio.run(location.get())
    root.manifest_path.chmod(0o644)

    asyncio.run(write_manifest(root, {"private": True, "devDependencies": {"a": "latest"}}))
    assert stat.S_IMODE(root.manifest_path.stat().st_mode) == 0o644
