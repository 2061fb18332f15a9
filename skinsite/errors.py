"""Exception hierarchy shared by the skinsite build pipeline.

Every fatal failure raised by a build stage derives from :class:`BuildError`
and records the :class:`BuildStage` it came from together with the path of the
offending resource, so callers can print a stage-tagged message without
inspecting the exception type.

Examples
--------
>>> from pathlib import Path
>>> from skinsite.errors import SkinLoadError
>>> str(SkinLoadError("template not found", path=Path("skin.jinja")))
'[load-skin] template not found (skin.jinja)'
"""

from __future__ import annotations

import enum
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .link_checker import BadLink


class BuildStage(enum.StrEnum):
    """Ordered stages of a site build."""

    LOAD = "load"
    COPY_RESOURCES = "copy-resources"
    LOAD_SKIN = "load-skin"
    SKIN_PAGES = "skin-pages"
    VALIDATE_LINKS = "validate-links"


class BuildError(Exception):
    """Base class for failures that abort or fail a site build."""

    stage: BuildStage = BuildStage.LOAD

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        text = f"[{self.stage}] {self.message}"
        if self.path is not None:
            text = f"{text} ({self.path})"
        return text


class LoadError(BuildError):
    """Raised when a sitemap description is malformed or unreadable."""

    stage = BuildStage.LOAD


class DuplicatePageError(LoadError):
    """Raised when two pages share an output filename."""


class ResourceCopyError(BuildError, OSError):
    """Raised when a resource directory cannot be copied to the output."""

    stage = BuildStage.COPY_RESOURCES


class SkinLoadError(BuildError):
    """Raised when the skin template cannot be loaded."""

    stage = BuildStage.LOAD_SKIN


class RenderError(BuildError):
    """Raised when a page cannot be rendered through the skin."""

    stage = BuildStage.SKIN_PAGES

    def __init__(
        self,
        message: str,
        *,
        page: str | None = None,
        path: Path | str | None = None,
    ) -> None:
        super().__init__(message, path=path)
        self.page = page


class InvalidLinksError(BuildError):
    """Raised on demand when a completed build is not link-clean."""

    stage = BuildStage.VALIDATE_LINKS

    def __init__(self, bad_links: typ.Sequence[BadLink]) -> None:
        self.bad_links = tuple(bad_links)
        count = len(self.bad_links)
        noun = "link" if count == 1 else "links"
        super().__init__(f"{count} invalid {noun} found")


class ConfigError(ValueError):
    """Raised when the build configuration file is invalid or incomplete."""


__all__ = [
    "BuildError",
    "BuildStage",
    "ConfigError",
    "DuplicatePageError",
    "InvalidLinksError",
    "LoadError",
    "RenderError",
    "ResourceCopyError",
    "SkinLoadError",
]
