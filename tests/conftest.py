"""Shared test doubles for the skinsite pipeline.

The fakes here stand in for the loader, skin, and filesystem collaborators so
pipeline tests can observe stage ordering without touching templates or the
network. ``events`` is a shared list each fake appends to, which lets tests
assert on the exact sequence of stage calls.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import pytest

from skinsite.errors import LoadError, RenderError, ResourceCopyError, SkinLoadError
from skinsite.model import Page, Sitemap

if typ.TYPE_CHECKING:
    from pathlib import Path


@dc.dataclass
class StaticLoader:
    """Loader returning a prebuilt sitemap, or raising a configured error."""

    sitemap: Sitemap | None
    events: list[tuple[str, ...]]
    error: LoadError | None = None

    def load_from(self, source: Path) -> Sitemap:
        self.events.append(("load", str(source)))
        if self.error is not None:
            raise self.error
        assert self.sitemap is not None
        return self.sitemap


@dc.dataclass
class RecordingFileSystem:
    """Filesystem that records copy requests instead of copying."""

    events: list[tuple[str, ...]]
    fail_on: str | None = None

    def copy_directory(self, source: Path, destination: Path, recursive: bool = True) -> None:
        self.events.append(("copy", str(source), str(destination), str(recursive)))
        if self.fail_on is not None and source.name == self.fail_on:
            msg = "Resource directory not found"
            raise ResourceCopyError(msg, path=source)


@dc.dataclass
class RecordingSkin:
    """Skin that records load/render calls and writes nothing."""

    events: list[tuple[str, ...]]
    fail_load: bool = False
    fail_on_page: str | None = None

    def load(self, source: Path) -> None:
        self.events.append(("load-skin", str(source)))
        if self.fail_load:
            msg = "Skin template not found"
            raise SkinLoadError(msg, path=source)

    def render(self, page: Page, sitemap: Sitemap, output_dir: Path) -> Path:
        self.events.append(("render", page.filename))
        if page.filename == self.fail_on_page:
            msg = "Cannot render page"
            raise RenderError(msg, page=page.filename)
        page.html = f"<html>{page.title}</html>"
        return output_dir / page.filename


@pytest.fixture
def events() -> list[tuple[str, ...]]:
    """Return the shared call log used by the fakes."""
    return []


def make_site(*, index_links: tuple[str, ...] = ("about.html",)) -> Sitemap:
    """Build the two-page site used across scenarios."""
    about = Page(filename="about.html", title="About")
    index = Page(filename="index.html", title="Home", links=index_links, children=(about,))
    return Sitemap(index)


@pytest.fixture
def site_factory() -> typ.Callable[..., Sitemap]:
    """Return the builder for the two-page scenario site."""
    return make_site


@pytest.fixture
def filesystem(events: list[tuple[str, ...]]) -> RecordingFileSystem:
    """Return a filesystem double sharing the call log."""
    return RecordingFileSystem(events)


@pytest.fixture
def skin(events: list[tuple[str, ...]]) -> RecordingSkin:
    """Return a skin double sharing the call log."""
    return RecordingSkin(events)


@pytest.fixture
def loader_factory(
    events: list[tuple[str, ...]],
) -> typ.Callable[..., StaticLoader]:
    """Return a factory for loaders bound to the shared call log."""

    def _make(sitemap: Sitemap | None, error: LoadError | None = None) -> StaticLoader:
        return StaticLoader(sitemap, events, error)

    return _make
