"""Apply link validators to every outbound link of a sitemap.

The checker walks ``sitemap.all_pages()`` and asks each validator about each
link. A link rejected by any validator is reported once to the supplied
:class:`Reporter`, however many validators reject it.

Example
-------
>>> from skinsite.link_checker import CollectingReporter, verify
>>> from skinsite.model import Page, Sitemap
>>> from skinsite.validators import SitemapLinkValidator
>>> site = Sitemap(Page("index.html", "Home", links=("contact.html",)))
>>> reporter = CollectingReporter()
>>> verify(site, [SitemapLinkValidator(site)], reporter)
False
>>> [(bad.page.filename, bad.link) for bad in reporter.bad_links]
[('index.html', 'contact.html')]
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

if typ.TYPE_CHECKING:
    from .model import Page, Sitemap
    from .validators import LinkValidator

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class BadLink:
    """A link that at least one validator rejected."""

    page: Page
    link: str

    def __str__(self) -> str:
        return f"{self.page.filename} : {self.link}"


class Reporter(typ.Protocol):
    """Sink notified once per invalid (page, link) pair."""

    def bad_link(self, page: Page, link: str) -> None:
        """Record that ``link`` on ``page`` failed validation."""
        ...


class CollectingReporter:
    """Reporter that keeps every bad link in discovery order."""

    def __init__(self) -> None:
        self.bad_links: list[BadLink] = []

    def bad_link(self, page: Page, link: str) -> None:
        self.bad_links.append(BadLink(page, link))


class LoggingReporter:
    """Reporter that surfaces bad links to the operator through logging."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def bad_link(self, page: Page, link: str) -> None:
        self.log.warning("Invalid link on page %s : %s", page.filename, link)


class CompositeReporter:
    """Forward each notification to several reporters in order."""

    def __init__(self, *reporters: Reporter) -> None:
        self.reporters = reporters

    def bad_link(self, page: Page, link: str) -> None:
        for reporter in self.reporters:
            reporter.bad_link(page, link)


class LinkChecker:
    """Decide whether a sitemap is link-clean for a set of validators."""

    def __init__(
        self,
        sitemap: Sitemap,
        validators: typ.Sequence[LinkValidator],
        reporter: Reporter,
    ) -> None:
        self.sitemap = sitemap
        self.validators = tuple(validators)
        self.reporter = reporter

    def verify(self) -> bool:
        """Check every link of every page, returning True when none is invalid.

        Returns
        -------
        bool
            ``True`` when no validator rejected any link. An empty validator
            set accepts everything.

        Notes
        -----
        Every validator is asked about each distinct (page, link) pair, and an
        invalid pair is passed to the reporter exactly once, however often the
        link repeats on the page or however many validators reject it. This
        method never raises; a validator that raises is treated as accepting
        the link.
        """
        valid = True
        for page in self.sitemap.all_pages():
            judged: set[str] = set()
            for link in page.links:
                if link in judged:
                    continue
                judged.add(link)
                if not self._accepted(page, link):
                    valid = False
                    self.reporter.bad_link(page, link)
        return valid

    def _accepted(self, page: Page, link: str) -> bool:
        accepted_by_all = True
        for validator in self.validators:
            try:
                accepted = validator.accepts(page, link)
            except Exception:  # noqa: BLE001 - validators must not fail the build
                logger.debug(
                    "Validator %r raised on %s : %s; accepting",
                    validator,
                    page.filename,
                    link,
                    exc_info=True,
                )
                continue
            if not accepted:
                accepted_by_all = False
        return accepted_by_all


def verify(
    sitemap: Sitemap,
    validators: typ.Sequence[LinkValidator],
    reporter: Reporter,
) -> bool:
    """Return True iff no validator rejects any link in ``sitemap``."""
    return LinkChecker(sitemap, validators, reporter).verify()


__all__ = [
    "BadLink",
    "CollectingReporter",
    "CompositeReporter",
    "LinkChecker",
    "LoggingReporter",
    "Reporter",
    "verify",
]
