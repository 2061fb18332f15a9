"""Load sitemap descriptions and extract page content.

This subpackage turns a ``sitemap.yaml`` description into a
:class:`~skinsite.model.Sitemap`. Each entry names a Markdown or HTML content
file; :class:`PageExtractor` renders Markdown (rewriting ``.md`` links to
``.html``), parses HTML, and records every outbound link for the link checker.

Examples
--------
>>> from pathlib import Path
>>> from skinsite.loader import YamlSitemapLoader
>>> sitemap = YamlSitemapLoader().load_from(Path("content/sitemap.yaml"))  # doctest: +SKIP
>>> [page.filename for page in sitemap.all_pages()]  # doctest: +SKIP
['index.html', 'about.html']
"""

from .extractor import ExtractedPage, PageExtractor
from .links import LinkCollectorExtension, rewrite_source_link
from .renderer import MarkdownRenderer
from .sitemap_loader import SitemapLoader, YamlSitemapLoader

__all__ = [
    "ExtractedPage",
    "LinkCollectorExtension",
    "MarkdownRenderer",
    "PageExtractor",
    "SitemapLoader",
    "YamlSitemapLoader",
    "rewrite_source_link",
]
