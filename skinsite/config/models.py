"""Typed dataclasses describing a skinsite build configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from skinsite.skin import DEFAULT_SKIN
from skinsite.validators import DEFAULT_USER_AGENT

DEFAULT_SITEMAP = Path("content/sitemap.yaml")
DEFAULT_OUTPUT_DIR = Path("public")
DEFAULT_VALIDATORS = ("sitemap",)


@dc.dataclass(slots=True)
class ExternalCheckConfig:
    """Settings for probing external links."""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT


@dc.dataclass(slots=True)
class BuildConfig:
    """A fully resolved build configuration.

    Attributes
    ----------
    sitemap : Path
        Sitemap description consumed by the loader.
    skin : Path
        Jinja template used to skin every page.
    resources : list[Path]
        Directories copied verbatim into ``output_dir``, in order.
    output_dir : Path
        Destination for rendered pages and resources.
    validators : list[str]
        Names of the link validators to run; empty disables link checking.
    site_name : str | None
        Site name exposed to the skin; defaults to the root page title.
    pygments_style : str
        Pygments style used for code highlighting CSS.
    external : ExternalCheckConfig
        Settings for the ``reachable`` validator.
    """

    sitemap: Path = DEFAULT_SITEMAP
    skin: Path = DEFAULT_SKIN
    resources: list[Path] = dc.field(default_factory=list)
    output_dir: Path = DEFAULT_OUTPUT_DIR
    validators: list[str] = dc.field(default_factory=lambda: list(DEFAULT_VALIDATORS))
    site_name: str | None = None
    pygments_style: str = "monokai"
    external: ExternalCheckConfig = dc.field(default_factory=ExternalCheckConfig)


__all__ = [
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_SITEMAP",
    "DEFAULT_VALIDATORS",
    "BuildConfig",
    "ExternalCheckConfig",
]
