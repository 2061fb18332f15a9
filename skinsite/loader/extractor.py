"""Extract titles, bodies, metadata, and links from content files.

Markdown sources may start with a YAML front-matter block delimited by
``---`` lines; its ``title`` key names the page and the remaining scalar keys
become page properties. HTML sources are parsed with BeautifulSoup.

Example
-------
>>> from pathlib import Path
>>> from skinsite.loader.extractor import PageExtractor
>>> extracted = PageExtractor().extract(Path("content/index.md"))  # doctest: +SKIP
>>> extracted.title  # doctest: +SKIP
'Welcome'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from bs4 import BeautifulSoup
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from skinsite.errors import LoadError
from skinsite.loader.links import MARKDOWN_SUFFIXES, LinkCollectorExtension
from skinsite.loader.renderer import MarkdownRenderer

if typ.TYPE_CHECKING:
    from pathlib import Path

HTML_SUFFIXES = (".html", ".htm")
FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
H1_PATTERN = re.compile(r"^#\s+(.+?)\s*#*\s*$", re.MULTILINE)


@dc.dataclass(slots=True)
class ExtractedPage:
    """Content pulled out of one source file."""

    title: str | None
    body: str
    head: str = ""
    properties: dict[str, str] = dc.field(default_factory=dict)
    links: list[str] = dc.field(default_factory=list)


class PageExtractor:
    """Turn Markdown or HTML content files into :class:`ExtractedPage` data."""

    def __init__(self, renderer: MarkdownRenderer | None = None) -> None:
        self.renderer = renderer or MarkdownRenderer()

    def extract(self, path: Path) -> ExtractedPage:
        """Read ``path`` and extract its page data.

        Raises
        ------
        LoadError
            If the file cannot be read, its front matter is invalid, or its
            suffix is not a supported content type.
        """
        suffix = path.suffix.lower()
        if suffix not in MARKDOWN_SUFFIXES and suffix not in HTML_SUFFIXES:
            msg = f"Unsupported content type '{suffix or path.name}'"
            raise LoadError(msg, path=path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read content file: {exc}"
            raise LoadError(msg, path=path) from exc
        if suffix in HTML_SUFFIXES:
            return self.extract_html(text)
        return self.extract_markdown(text, path=path)

    def extract_markdown(self, text: str, *, path: Path | None = None) -> ExtractedPage:
        """Render Markdown and collect its title, properties, and links."""
        properties, body_source = _split_front_matter(text, path)
        title = properties.pop("title", None)
        if not title:
            heading = H1_PATTERN.search(body_source)
            title = heading.group(1).strip() if heading else None
        collector = LinkCollectorExtension()
        body = self.renderer.render(body_source, extensions=[collector])
        return ExtractedPage(
            title=title,
            body=body,
            properties=properties,
            links=list(collector.links),
        )

    @staticmethod
    def extract_html(text: str) -> ExtractedPage:
        """Split an HTML document into title, head, body, metadata, and links."""
        soup = BeautifulSoup(text, "html.parser")
        title: str | None = None
        if soup.title and soup.title.string:
            title = soup.title.string.strip()
        elif (heading := soup.find("h1")) is not None:
            title = heading.get_text(strip=True)

        properties: dict[str, str] = {}
        for meta in soup.find_all("meta"):
            name = meta.get("name")
            content = meta.get("content")
            if name and content is not None:
                properties[str(name)] = str(content)

        head = ""
        if soup.head is not None:
            head = "".join(
                str(child) for child in soup.head.children if child.name != "title"
            ).strip()

        container = soup.body or soup
        body = "".join(str(child) for child in container.children).strip()
        links = [str(anchor["href"]) for anchor in container.find_all("a", href=True)]
        return ExtractedPage(
            title=title or None,
            body=body,
            head=head,
            properties=properties,
            links=links,
        )


def _split_front_matter(text: str, path: Path | None) -> tuple[dict[str, str], str]:
    """Return front-matter properties and the remaining Markdown body."""
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return {}, text
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(match.group(1)) or {}
    except YAMLError as exc:
        msg = f"Invalid front matter: {exc}"
        raise LoadError(msg, path=path) from exc
    if not isinstance(loaded, dict):
        msg = "Front matter must be a mapping."
        raise LoadError(msg, path=path)
    properties = {
        str(key): str(value)
        for key, value in loaded.items()
        if value is not None and not isinstance(value, dict | list)
    }
    return properties, text[match.end() :]


__all__ = ["ExtractedPage", "HTML_SUFFIXES", "PageExtractor"]
