"""Tests for the local filesystem copy primitive."""

from __future__ import annotations

import typing as typ

import pytest

from skinsite.errors import BuildStage, ResourceCopyError
from skinsite.filesystem import LocalFileSystem

if typ.TYPE_CHECKING:
    from pathlib import Path


def _resources(tmp_path: Path) -> Path:
    source = tmp_path / "assets"
    (source / "css").mkdir(parents=True)
    (source / "logo.svg").write_text("<svg/>", encoding="utf-8")
    (source / "css" / "site.css").write_text("body{}", encoding="utf-8")
    return source


def test_recursive_copy_merges_full_subtree(tmp_path: Path) -> None:
    """Contents land directly in the destination, nested folders included."""
    source = _resources(tmp_path)
    output = tmp_path / "public"
    (output / "css").mkdir(parents=True)
    (output / "css" / "site.css").write_text("old", encoding="utf-8")
    (output / "keep.txt").write_text("keep", encoding="utf-8")

    LocalFileSystem().copy_directory(source, output)

    assert (output / "logo.svg").read_text(encoding="utf-8") == "<svg/>"
    assert (output / "css" / "site.css").read_text(encoding="utf-8") == "body{}"
    assert (output / "keep.txt").exists(), "existing output files must survive"
    assert not (output / "assets").exists(), "the source folder itself is not nested"


def test_non_recursive_copy_skips_directories(tmp_path: Path) -> None:
    """Only top-level files are copied when recursion is disabled."""
    source = _resources(tmp_path)
    output = tmp_path / "public"
    LocalFileSystem().copy_directory(source, output, recursive=False)
    assert (output / "logo.svg").exists()
    assert not (output / "css").exists()


def test_missing_source_raises_stage_tagged_error(tmp_path: Path) -> None:
    """A missing resource directory aborts with a ResourceCopyError."""
    missing = tmp_path / "nope"
    with pytest.raises(ResourceCopyError) as excinfo:
        LocalFileSystem().copy_directory(missing, tmp_path / "public")
    error = excinfo.value
    assert isinstance(error, OSError)
    assert error.stage is BuildStage.COPY_RESOURCES
    assert error.path == missing
    assert str(error).startswith("[copy-resources]")
