"""Load a YAML sitemap description into a :class:`~skinsite.model.Sitemap`."""

from __future__ import annotations

import dataclasses as dc
import posixpath
import typing as typ
from pathlib import Path, PureWindowsPath

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from skinsite.errors import LoadError
from skinsite.loader.extractor import PageExtractor
from skinsite.model import Page, Sitemap


class SitemapLoader(typ.Protocol):
    """Produce a sitemap from a sitemap description."""

    def load_from(self, source: Path) -> Sitemap:
        """Load ``source``, raising :class:`LoadError` on bad input."""
        ...


@dc.dataclass(slots=True)
class _PageEntry:
    """Normalized sitemap entry before its content is extracted."""

    source: str
    title: str | None
    filename: str
    children: list[_PageEntry]


class YamlSitemapLoader:
    """Read ``sitemap.yaml`` and extract every page it references."""

    def __init__(self, extractor: PageExtractor | None = None) -> None:
        self.extractor = extractor or PageExtractor()

    def load_from(self, source: Path) -> Sitemap:
        """Load the sitemap described by ``source``.

        Parameters
        ----------
        source : Path
            YAML file with a ``root`` entry (and optional ``pages`` list and
            ``content_dir``). Entry ``source`` paths resolve against
            ``content_dir``, which defaults to the sitemap's directory.

        Returns
        -------
        Sitemap
            The page tree with every filename unique.

        Raises
        ------
        LoadError
            If the file is missing or malformed, an entry lacks a ``source``,
            a content file cannot be read, or two pages share a filename.
        """
        raw = _read_yaml(source)
        content_dir = source.parent / str(raw.get("content_dir", "."))
        root_raw = raw.get("root")
        pages_raw = raw.get("pages") or []
        if not isinstance(pages_raw, list):
            msg = "'pages' must be a list of page entries."
            raise LoadError(msg, path=source)

        if root_raw is None:
            if not pages_raw:
                msg = "Sitemap defines no 'root' page."
                raise LoadError(msg, path=source)
            root_raw, pages_raw = pages_raw[0], pages_raw[1:]

        root_entry = _parse_entry(root_raw, source)
        root_entry.children.extend(_parse_entry(item, source) for item in pages_raw)
        root = self._build_page(root_entry, content_dir)
        return Sitemap(root)

    def _build_page(self, entry: _PageEntry, content_dir: Path) -> Page:
        """Extract content for ``entry`` and its descendants."""
        extracted = self.extractor.extract(content_dir / entry.source)
        filename = entry.filename
        title = entry.title or extracted.title or _fallback_title(filename)
        children = tuple(self._build_page(child, content_dir) for child in entry.children)
        return Page(
            filename=filename,
            title=title,
            body=extracted.body,
            head=extracted.head,
            properties=extracted.properties,
            links=tuple(extracted.links),
            children=children,
        )


def _read_yaml(path: Path) -> dict[str, typ.Any]:
    """Return the top-level mapping of the YAML document at ``path``."""
    if not path.is_file():
        msg = "Sitemap file not found"
        raise LoadError(msg, path=path)
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except (OSError, YAMLError) as exc:
        msg = f"Cannot parse sitemap: {exc}"
        raise LoadError(msg, path=path) from exc
    if not isinstance(loaded, dict):
        msg = "Top-level sitemap structure must be a mapping."
        raise LoadError(msg, path=path)
    return dict(loaded)


def _parse_entry(payload: object, sitemap_path: Path) -> _PageEntry:
    """Normalize a page entry given as a string or a mapping."""
    match payload:
        case str() as source if source.strip():
            return _PageEntry(
                source=source.strip(),
                title=None,
                filename=_checked_filename(_output_filename(source.strip()), sitemap_path),
                children=[],
            )
        case dict():
            source = payload.get("source")
            if not isinstance(source, str) or not source.strip():
                msg = f"Page entry {dict(payload)!r} is missing 'source'."
                raise LoadError(msg, path=sitemap_path)
            children_raw = payload.get("children") or []
            if not isinstance(children_raw, list):
                msg = f"'children' of '{source}' must be a list."
                raise LoadError(msg, path=sitemap_path)
            filename = payload.get("filename")
            output = str(filename) if filename else _output_filename(source.strip())
            title = payload.get("title")
            return _PageEntry(
                source=source.strip(),
                title=str(title) if title else None,
                filename=_checked_filename(output, sitemap_path),
                children=[_parse_entry(child, sitemap_path) for child in children_raw],
            )
        case _:
            msg = f"Invalid page entry {payload!r}."
            raise LoadError(msg, path=sitemap_path)


def _output_filename(source: str) -> str:
    """Map a content path to its output filename (``guide/a.md`` -> ``guide/a.html``)."""
    normalized = posixpath.normpath(source.replace("\\", "/"))
    root, _ext = posixpath.splitext(normalized)
    return f"{root}.html"


def _checked_filename(filename: str, sitemap_path: Path) -> str:
    """Return ``filename`` normalized, rejecting paths outside the output folder."""
    normalized = posixpath.normpath(filename.replace("\\", "/"))
    if (
        normalized.startswith("/")
        or PureWindowsPath(normalized).drive
        or normalized == ".."
        or normalized.startswith("../")
    ):
        msg = f"Output filename '{filename}' must stay inside the output directory."
        raise LoadError(msg, path=sitemap_path)
    return normalized


def _fallback_title(filename: str) -> str:
    stem = posixpath.splitext(posixpath.basename(filename))[0]
    return stem.replace("-", " ").replace("_", " ").title()


__all__ = ["SitemapLoader", "YamlSitemapLoader"]
