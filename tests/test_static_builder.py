import hashlib
from pathlib import Path

import pytest

from builder_cache import static_builder


def test_build_outputs_entrypoint_unchanged(tmp_path: Path) -> None:
    page = tmp_path / "index.html"
    page.write_text("<h1>hi</h1>")
    files = {"index.html": page, "other.css": b"body{}"}

    assert static_builder.build(files=files, entrypoint="index.html") == {"index.html": page}


def test_analyze_fingerprints_contents() -> None:
    files = {"a.txt": b"hello"}
    assert static_builder.analyze(files=files, entrypoint="a.txt") == hashlib.sha256(b"hello").hexdigest()


def test_missing_entrypoint() -> None:
    with pytest.raises(ValueError):
        static_builder.build(files={}, entrypoint="index.html")


def test_build_ignores_work_path_and_config(tmp_path: Path) -> None:
    files = {"index.html": b"<p>x</p>"}
    out = static_builder.build(files=files, entrypoint="index.html", work_path=tmp_path, config={"zeroConfig": True})
    assert out == {"index.html": b"<p>x</p>"}
