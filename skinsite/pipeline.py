"""Sequence a site build and report a single typed outcome.

:class:`SiteBuilder` runs five stages strictly in order: load the sitemap,
copy resource directories, load the skin, skin every page, and validate
links. The first four stages are fatal on failure; the last only decides
whether a completed build is link-clean. The outcome is returned as a
:class:`BuildResult` and never terminates the host process; translating it
into an exit status is left to :mod:`skinsite.cli`.

Example
-------
>>> from pathlib import Path
>>> from skinsite.pipeline import build
>>> result = build(
...     Path("content/sitemap.yaml"),
...     Path("skin/skin.jinja"),
...     [Path("resources")],
...     Path("public"),
... )  # doctest: +SKIP
>>> result.ok  # doctest: +SKIP
True
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import typing as typ

from .errors import BuildError, BuildStage, InvalidLinksError, RenderError
from .filesystem import LocalFileSystem
from .link_checker import CollectingReporter, CompositeReporter, LinkChecker, LoggingReporter
from .loader import YamlSitemapLoader
from .skin import JinjaSkin

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .filesystem import FileSystem
    from .link_checker import BadLink, Reporter
    from .loader import SitemapLoader
    from .model import Sitemap
    from .skin import Skin
    from .validators import LinkValidator

logger = logging.getLogger(__name__)

ValidatorFactory = typ.Callable[["Sitemap"], typ.Sequence["LinkValidator"]]


class BuildStatus(enum.StrEnum):
    """Overall outcome of a build."""

    SUCCESS = "success"
    FAILED = "failed"
    INVALID_LINKS = "invalid-links"


@dc.dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of :meth:`SiteBuilder.build`.

    Attributes
    ----------
    status : BuildStatus
        ``SUCCESS``, ``FAILED`` (a fatal stage error), or ``INVALID_LINKS``
        (every stage ran but some links were rejected).
    error : BuildError | None
        The fatal error, unchanged, when ``status`` is ``FAILED``.
    bad_links : tuple[BadLink, ...]
        Every rejected (page, link) pair, in discovery order.
    written : tuple[Path, ...]
        Pages written by the skin stage, in sitemap order.
    sitemap : Sitemap | None
        The loaded sitemap, when the load stage succeeded.
    """

    status: BuildStatus
    error: BuildError | None = None
    bad_links: tuple[BadLink, ...] = ()
    written: tuple[Path, ...] = ()
    sitemap: Sitemap | None = None

    @property
    def ok(self) -> bool:
        """Return True when the build completed and is link-clean."""
        return self.status is BuildStatus.SUCCESS

    @property
    def failed_stage(self) -> BuildStage | None:
        """Return the stage that failed, if any."""
        if self.error is not None:
            return self.error.stage
        if self.status is BuildStatus.INVALID_LINKS:
            return BuildStage.VALIDATE_LINKS
        return None

    def raise_for_status(self) -> None:
        """Raise the fatal error or an :class:`InvalidLinksError` for failed builds."""
        if self.error is not None:
            raise self.error
        if self.status is BuildStatus.INVALID_LINKS:
            raise InvalidLinksError(self.bad_links)


class SiteBuilder:
    """Facade wiring a loader, skin, validators, and filesystem into a build."""

    def __init__(
        self,
        loader: SitemapLoader | None = None,
        skin: Skin | None = None,
        validators: typ.Sequence[LinkValidator] | ValidatorFactory = (),
        filesystem: FileSystem | None = None,
        *,
        reporter: Reporter | None = None,
    ) -> None:
        """Initialize the builder with its collaborators.

        Parameters
        ----------
        loader : SitemapLoader, optional
            Produces the sitemap; defaults to :class:`YamlSitemapLoader`.
        skin : Skin, optional
            Renders pages; defaults to :class:`JinjaSkin`.
        validators : Sequence[LinkValidator] or callable, optional
            Validators applied to every link. A callable receives the loaded
            sitemap and returns the validators, for validators that need it.
            An empty collection disables link checking.
        filesystem : FileSystem, optional
            Copies resource directories; defaults to :class:`LocalFileSystem`.
        reporter : Reporter, optional
            Operator-facing sink for bad links; defaults to
            :class:`LoggingReporter`.
        """
        self.loader = loader or YamlSitemapLoader()
        self.skin = skin or JinjaSkin()
        self.validators = validators
        self.filesystem = filesystem or LocalFileSystem()
        self.reporter = reporter or LoggingReporter()

    def build(
        self,
        sitemap_source: Path,
        skin_source: Path,
        resource_dirs: typ.Sequence[Path],
        output_dir: Path,
    ) -> BuildResult:
        """Run every build stage in order and return the outcome.

        Only :class:`BuildError` subclasses are turned into a ``FAILED``
        result; any other exception is a bug and propagates.
        """
        sitemap: Sitemap | None = None
        written: list[Path] = []
        try:
            sitemap = self.loader.load_from(sitemap_source)
            self._copy_resources(resource_dirs, output_dir)
            self.skin.load(skin_source)
            self._prepare_output(output_dir)
            for page in sitemap.all_pages():
                logger.info("Skinning %s (%s)", page.filename, page.title)
                written.append(self.skin.render(page, sitemap, output_dir))
        except BuildError as exc:
            logger.error("%s", exc)
            return BuildResult(
                status=BuildStatus.FAILED,
                error=exc,
                written=tuple(written),
                sitemap=sitemap,
            )

        validators = self._resolve_validators(sitemap)
        collector = CollectingReporter()
        checker = LinkChecker(
            sitemap, validators, CompositeReporter(collector, self.reporter)
        )
        try:
            link_clean = checker.verify()
        finally:
            _close_validators(validators)
        if not link_clean:
            logger.error("Invalid links found with validators %r", list(validators))
            return BuildResult(
                status=BuildStatus.INVALID_LINKS,
                bad_links=tuple(collector.bad_links),
                written=tuple(written),
                sitemap=sitemap,
            )
        return BuildResult(
            status=BuildStatus.SUCCESS, written=tuple(written), sitemap=sitemap
        )

    def _prepare_output(self, output_dir: Path) -> None:
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"Cannot create output directory: {exc}"
            raise RenderError(msg, path=output_dir) from exc

    def _copy_resources(self, resource_dirs: typ.Sequence[Path], output_dir: Path) -> None:
        for resource_dir in resource_dirs:
            logger.info("Copying resources from %s", resource_dir)
            self.filesystem.copy_directory(resource_dir, output_dir, True)

    def _resolve_validators(self, sitemap: Sitemap) -> tuple[LinkValidator, ...]:
        if callable(self.validators):
            return tuple(self.validators(sitemap))
        return tuple(self.validators)


def _close_validators(validators: typ.Iterable[LinkValidator]) -> None:
    """Release resources held by validators, such as HTTP sessions."""
    for validator in validators:
        close = getattr(validator, "close", None)
        if callable(close):
            close()


def build(
    sitemap_source: Path,
    skin_source: Path,
    resource_dirs: typ.Sequence[Path],
    output_dir: Path,
    *,
    validators: typ.Sequence[LinkValidator] | ValidatorFactory = (),
) -> BuildResult:
    """Build a site with the default loader, skin, and filesystem."""
    builder = SiteBuilder(validators=validators)
    return builder.build(sitemap_source, skin_source, resource_dirs, output_dir)


__all__ = ["BuildResult", "BuildStatus", "SiteBuilder", "ValidatorFactory", "build"]
