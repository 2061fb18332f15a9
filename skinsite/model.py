r"""In-memory representation of a site's page tree.

A :class:`Sitemap` owns a root :class:`Page` and a flattened, pre-order view
of every page reachable from it. The flattened view is computed once when the
sitemap is built, so skinning and link checking iterate the same pages in the
same order.

Example
-------
>>> from skinsite.model import Page, Sitemap
>>> about = Page(filename="about.html", title="About")
>>> home = Page(filename="index.html", title="Home", links=("about.html",),
...             children=(about,))
>>> [page.filename for page in Sitemap(home).all_pages()]
['index.html', 'about.html']
"""

from __future__ import annotations

import dataclasses as dc
import posixpath
import typing as typ
from urllib.parse import urlsplit

from .errors import DuplicatePageError

PAGE_SUFFIXES = (".html", ".htm")


@dc.dataclass(slots=True, eq=False)
class Page:
    """One output document in the sitemap.

    Attributes
    ----------
    filename : str
        Output path relative to the output directory, using ``/`` separators.
        Unique within a sitemap.
    title : str
        Human-readable page title.
    body : str
        Extracted or rendered HTML body supplied by the loader.
    head : str
        Extra markup destined for the document ``<head>``.
    properties : dict[str, str]
        Free-form metadata such as front matter or ``<meta>`` values.
    links : tuple[str, ...]
        Outgoing link targets in document order.
    children : tuple[Page, ...]
        Child pages in declaration order.
    html : str | None
        Skinned output, set by the skin stage.
    """

    filename: str
    title: str
    body: str = ""
    head: str = ""
    properties: dict[str, str] = dc.field(default_factory=dict)
    links: tuple[str, ...] = ()
    children: tuple[Page, ...] = ()
    html: str | None = None

    def __post_init__(self) -> None:
        self.links = tuple(self.links)
        self.children = tuple(self.children)

    @property
    def directory(self) -> str:
        """Return the directory portion of ``filename`` (empty for top level)."""
        return posixpath.dirname(self.filename)

    def __repr__(self) -> str:
        return f"Page({self.filename!r}, title={self.title!r})"


def is_page_link(link: str) -> bool:
    """Return True when ``link`` is a relative link to another page of the site."""
    target = link.strip()
    if not target or target.startswith(("#", "/")):
        return False
    parsed = urlsplit(target)
    if parsed.scheme or parsed.netloc:
        return False
    return parsed.path.lower().endswith(PAGE_SUFFIXES)


class Sitemap:
    """The full page tree for one site build."""

    def __init__(self, root: Page) -> None:
        self.root = root
        self._parents: dict[str, Page | None] = {}
        self._pages = self._flatten(root)
        self._by_filename = {page.filename: page for page in self._pages}
        self._positions = {page.filename: idx for idx, page in enumerate(self._pages)}

    def _flatten(self, root: Page) -> tuple[Page, ...]:
        """Walk the tree pre-order, rejecting repeated filenames."""
        ordered: list[Page] = []
        seen: set[str] = set()
        stack: list[tuple[Page, Page | None]] = [(root, None)]
        while stack:
            page, parent = stack.pop()
            if page.filename in seen:
                msg = f"Duplicate page filename '{page.filename}'"
                raise DuplicatePageError(msg, path=page.filename)
            seen.add(page.filename)
            self._parents[page.filename] = parent
            ordered.append(page)
            stack.extend((child, page) for child in reversed(page.children))
        return tuple(ordered)

    def all_pages(self) -> tuple[Page, ...]:
        """Return every reachable page once, parents before children."""
        return self._pages

    def get_page(self, filename: str) -> Page:
        """Return the page registered under ``filename``."""
        try:
            return self._by_filename[filename]
        except KeyError as exc:
            msg = f"Unknown page '{filename}'"
            raise KeyError(msg) from exc

    def __contains__(self, filename: object) -> bool:
        return filename in self._by_filename

    def __iter__(self) -> typ.Iterator[Page]:
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def parent_of(self, page: Page) -> Page | None:
        """Return the parent of ``page``, or None for the root."""
        return self._parents[page.filename]

    def breadcrumbs(self, page: Page) -> list[Page]:
        """Return the chain of pages from the root down to ``page``."""
        trail: list[Page] = []
        current: Page | None = page
        while current is not None:
            trail.append(current)
            current = self._parents[current.filename]
        trail.reverse()
        return trail

    def previous_page(self, page: Page) -> Page | None:
        """Return the page preceding ``page`` in flattened order."""
        idx = self._positions[page.filename]
        return self._pages[idx - 1] if idx > 0 else None

    def next_page(self, page: Page) -> Page | None:
        """Return the page following ``page`` in flattened order."""
        idx = self._positions[page.filename] + 1
        return self._pages[idx] if idx < len(self._pages) else None

    def resolve_link(self, page: Page, link: str) -> str | None:
        """Return the filename targeted by an internal page link.

        Parameters
        ----------
        page : Page
            Page on which the link appears; relative targets resolve against
            its directory.
        link : str
            Raw link target.

        Returns
        -------
        str | None
            Normalized target filename, or ``None`` when ``link`` is not a
            link to another page of the site (external URIs, fragments,
            absolute paths, and asset links).
        """
        if not is_page_link(link):
            return None
        path = urlsplit(link.strip()).path
        return posixpath.normpath(posixpath.join(page.directory, path))

    def __repr__(self) -> str:
        return f"Sitemap(root={self.root.filename!r}, pages={len(self._pages)})"


__all__ = ["PAGE_SUFFIXES", "Page", "Sitemap", "is_page_link"]
