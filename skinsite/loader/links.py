"""Markdown extension that normalizes and records outbound links."""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

MARKDOWN_SUFFIXES = (".md", ".markdown")


def rewrite_source_link(target: str) -> str:
    """Point relative links at Markdown sources to their rendered pages.

    Examples
    --------
    >>> rewrite_source_link("guide/intro.md#setup")
    'guide/intro.html#setup'
    >>> rewrite_source_link("https://example.com/readme.md")
    'https://example.com/readme.md'
    """
    if target.startswith(("#", "/")):
        return target
    parsed = urlsplit(target)
    if parsed.scheme or parsed.netloc:
        return target
    root, ext = posixpath.splitext(parsed.path)
    if ext.lower() not in MARKDOWN_SUFFIXES:
        return target
    return parsed._replace(path=f"{root}.html").geturl()


class LinkCollectorExtension(Extension):
    """Rewrite ``.md`` targets to ``.html`` and collect every anchor ``href``.

    One instance collects links for one document; the links are available in
    document order on :attr:`links` after ``Markdown.convert`` returns.
    """

    def __init__(self) -> None:
        super().__init__()
        self.links: list[str] = []

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the link treeprocessor on the Markdown instance."""
        processor = LinkCollectorTreeprocessor(md, self.links)
        md.treeprocessors.register(processor, "skinsite_links", 15)


class LinkCollectorTreeprocessor(Treeprocessor):
    """Walk the parsed tree, rewriting and recording anchor targets."""

    def __init__(self, md: Markdown, sink: list[str]) -> None:
        super().__init__(md)
        self.sink = sink

    def run(self, root: Element) -> Element:
        for element in root.iter("a"):
            href = element.get("href")
            if not href:
                continue
            rewritten = rewrite_source_link(href)
            if rewritten != href:
                element.set("href", rewritten)
            self.sink.append(rewritten)
        return root


__all__ = [
    "LinkCollectorExtension",
    "LinkCollectorTreeprocessor",
    "rewrite_source_link",
]
