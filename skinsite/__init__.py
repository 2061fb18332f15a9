"""Build static websites from a sitemap, a skin, and resource directories.

This package loads a ``sitemap.yaml`` page tree, copies resource directories
into the output folder, renders every page through a Jinja skin, and checks
that links between pages resolve.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``build``: Run the build pipeline with the default collaborators.
- ``SiteBuilder``: Build pipeline with substitutable collaborators.
- ``BuildResult`` / ``BuildStatus``: Typed build outcome.
- ``Page`` / ``Sitemap``: The page tree data model.

Examples
--------
>>> from skinsite import Page, Sitemap
>>> sitemap = Sitemap(Page("index.html", "Home"))
>>> len(sitemap)
1
"""

from __future__ import annotations

from .cli import app, main
from .model import Page, Sitemap
from .pipeline import BuildResult, BuildStatus, SiteBuilder, build

__all__ = [
    "BuildResult",
    "BuildStatus",
    "Page",
    "SiteBuilder",
    "Sitemap",
    "app",
    "build",
    "main",
]
