"""Jinja2 skins that turn sitemap pages into finished HTML documents.

A skin is a single Jinja template. :class:`JinjaSkin` loads it once, then
renders each page with the sitemap available for navigation. Templates may
``{% extends %}`` or ``{% include %}`` siblings in the skin's directory.

Template context
----------------
``page``, ``sitemap``, ``pages``, ``root``, ``breadcrumbs``,
``previous_page``, ``next_page``, ``site_name``, ``pygments_css``,
``generated_at`` and the ``relative_url(filename)`` helper, which returns the
path to another output file relative to the page being rendered.

Example
-------
>>> from pathlib import Path
>>> from skinsite.skin import JinjaSkin
>>> skin = JinjaSkin(site_name="Example")
>>> skin.load(Path("skin/skin.jinja"))  # doctest: +SKIP
>>> skin.render(page, sitemap, Path("public"))  # doctest: +SKIP
PosixPath('public/index.html')
"""

from __future__ import annotations

import datetime as dt
import posixpath
import typing as typ
from pathlib import Path, PurePosixPath

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, select_autoescape

from .errors import RenderError, SkinLoadError
from .loader.renderer import MarkdownRenderer

if typ.TYPE_CHECKING:
    from .model import Page, Sitemap

DEFAULT_SKIN = Path(__file__).resolve().parent / "templates" / "skin.jinja"


class Skin(typ.Protocol):
    """Template engine applied to every page of the sitemap."""

    def load(self, source: Path) -> None:
        """Load the skin definition, raising :class:`SkinLoadError` on failure."""
        ...

    def render(self, page: Page, sitemap: Sitemap, output_dir: Path) -> Path:
        """Render ``page`` into ``output_dir``, raising :class:`RenderError`."""
        ...


def relative_url(from_filename: str, to_filename: str) -> str:
    """Return the href leading from one output file to another.

    Examples
    --------
    >>> relative_url("guide/intro.html", "index.html")
    '../index.html'
    >>> relative_url("index.html", "guide/intro.html")
    'guide/intro.html'
    """
    start = posixpath.dirname(from_filename) or "."
    return posixpath.relpath(to_filename, start)


class JinjaSkin:
    """Render pages through a Jinja2 template file."""

    def __init__(
        self, *, site_name: str | None = None, pygments_style: str = "monokai"
    ) -> None:
        """Initialize the skin with site-wide presentation settings.

        Parameters
        ----------
        site_name : str, optional
            Name exposed to templates; falls back to the root page title.
        pygments_style : str, optional
            Pygments style whose CSS is exposed as ``pygments_css``.
        """
        self.site_name = site_name
        self.pygments_css = MarkdownRenderer(pygments_style).stylesheet
        self.template: Template | None = None

    def load(self, source: Path) -> None:
        """Load the template at ``source``.

        Raises
        ------
        SkinLoadError
            If the file does not exist or the template cannot be compiled.
        """
        if not source.is_file():
            msg = "Skin template not found"
            raise SkinLoadError(msg, path=source)
        env = Environment(
            loader=FileSystemLoader(str(source.parent)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        try:
            self.template = env.get_template(source.name)
        except TemplateError as exc:
            msg = f"Cannot load skin template: {exc}"
            raise SkinLoadError(msg, path=source) from exc

    def render(self, page: Page, sitemap: Sitemap, output_dir: Path) -> Path:
        """Render ``page`` and write it to ``output_dir / page.filename``.

        Returns
        -------
        Path
            The written file. The rendered markup is also stored on
            ``page.html``.

        Raises
        ------
        RenderError
            If no skin was loaded, the template fails, or the file cannot be
            written.
        """
        if self.template is None:
            msg = "Skin must be loaded before rendering"
            raise RenderError(msg, page=page.filename)
        relative = PurePosixPath(page.filename)
        if relative.is_absolute() or ".." in relative.parts:
            msg = "Page filename must stay inside the output directory"
            raise RenderError(msg, page=page.filename, path=page.filename)
        output_path = output_dir / relative
        context = {
            "page": page,
            "sitemap": sitemap,
            "pages": sitemap.all_pages(),
            "root": sitemap.root,
            "breadcrumbs": sitemap.breadcrumbs(page),
            "previous_page": sitemap.previous_page(page),
            "next_page": sitemap.next_page(page),
            "site_name": self.site_name or sitemap.root.title,
            "pygments_css": self.pygments_css,
            "generated_at": dt.datetime.now(dt.UTC),
            "relative_url": lambda target: relative_url(page.filename, target),
        }
        try:
            html = self.template.render(**context)
        except TemplateError as exc:
            msg = f"Cannot render page: {exc}"
            raise RenderError(msg, page=page.filename, path=output_path) from exc
        if not html.endswith("\n"):
            html += "\n"
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(html, encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot write page: {exc}"
            raise RenderError(msg, page=page.filename, path=output_path) from exc
        page.html = html
        return output_path


__all__ = ["DEFAULT_SKIN", "JinjaSkin", "Skin", "relative_url"]
