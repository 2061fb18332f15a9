"""Unit tests for the link checker and reporters.

The checker must report each invalid (page, link) pair exactly once, however
many validators reject it, and must treat an empty validator set as "no
checking enabled".
"""

from __future__ import annotations

import logging
import typing as typ

import pytest

from skinsite.link_checker import (
    BadLink,
    CollectingReporter,
    CompositeReporter,
    LinkChecker,
    LoggingReporter,
    verify,
)
from skinsite.loader import PageExtractor
from skinsite.model import Page, Sitemap
from skinsite.validators import AcceptAllValidator, SitemapLinkValidator


class _RejectAll:
    """Validator rejecting every link, counting how often it is asked."""

    def __init__(self) -> None:
        self.calls = 0

    def accepts(self, page: Page, link: str) -> bool:  # noqa: ARG002
        self.calls += 1
        return False


class _Exploding:
    """Validator that breaks the never-raise contract."""

    def accepts(self, page: Page, link: str) -> bool:
        msg = "boom"
        raise RuntimeError(msg)


def _site(links: tuple[str, ...]) -> Sitemap:
    about = Page("about.html", "About")
    return Sitemap(Page("index.html", "Home", links=links, children=(about,)))


def test_empty_validators_accept_everything() -> None:
    """With no validators every link is vacuously valid."""
    sitemap = _site(("contact.html", "not a url", "https://nowhere.invalid"))
    reporter = CollectingReporter()
    assert verify(sitemap, [], reporter) is True
    assert reporter.bad_links == []


def test_accept_all_validator_ignores_targets() -> None:
    """An always-accepting validator passes links to missing pages."""
    reporter = CollectingReporter()
    assert verify(_site(("contact.html",)), [AcceptAllValidator()], reporter)
    assert reporter.bad_links == []


def test_existing_target_passes(site_factory: typ.Callable[..., Sitemap]) -> None:
    """A link to a page in the sitemap is valid."""
    sitemap = site_factory()
    reporter = CollectingReporter()
    assert verify(sitemap, [SitemapLinkValidator(sitemap)], reporter) is True
    assert reporter.bad_links == []


def test_missing_target_is_reported_once(
    site_factory: typ.Callable[..., Sitemap],
) -> None:
    """A missing target fails verification with a single report."""
    sitemap = site_factory(index_links=("contact.html",))
    reporter = CollectingReporter()
    assert verify(sitemap, [SitemapLinkValidator(sitemap)], reporter) is False
    assert reporter.bad_links == [BadLink(sitemap.root, "contact.html")]


def test_multiple_rejecting_validators_report_once() -> None:
    """A link rejected by several validators is reported exactly once."""
    sitemap = _site(("contact.html",))
    first, second = _RejectAll(), _RejectAll()
    reporter = CollectingReporter()
    assert LinkChecker(sitemap, [first, second], reporter).verify() is False
    assert len(reporter.bad_links) == 1
    assert (first.calls, second.calls) == (1, 1), "every validator is asked"


def test_one_rejection_among_acceptances_condemns_the_link() -> None:
    """Validators combine as a conjunction of constraints."""
    sitemap = _site(("about.html",))
    reporter = CollectingReporter()
    assert not verify(sitemap, [AcceptAllValidator(), _RejectAll()], reporter)
    assert [bad.link for bad in reporter.bad_links] == ["about.html"]


def test_every_bad_link_is_reported_in_page_order() -> None:
    """All invalid links are reported, not just the first."""
    orphan = Page("about.html", "About", links=("gone.html",))
    root = Page(
        "index.html", "Home", links=("missing.html", "about.html"), children=(orphan,)
    )
    sitemap = Sitemap(root)
    reporter = CollectingReporter()
    assert not verify(sitemap, [SitemapLinkValidator(sitemap)], reporter)
    assert [str(bad) for bad in reporter.bad_links] == [
        "index.html : missing.html",
        "about.html : gone.html",
    ]


def test_raising_validator_is_treated_as_accepting() -> None:
    """verify never raises, even when a validator does."""
    reporter = CollectingReporter()
    assert verify(_site(("about.html",)), [_Exploding()], reporter) is True


def test_logging_reporter_warns(caplog: pytest.LogCaptureFixture) -> None:
    """The operator reporter logs one warning per bad link."""
    page = Page("index.html", "Home")
    with caplog.at_level(logging.WARNING, logger="skinsite.link_checker"):
        LoggingReporter().bad_link(page, "contact.html")
    assert "Invalid link on page index.html : contact.html" in caplog.text


def test_composite_reporter_fans_out() -> None:
    """Every wrapped reporter receives the notification."""
    first, second = CollectingReporter(), CollectingReporter()
    page = Page("index.html", "Home")
    CompositeReporter(first, second).bad_link(page, "x.html")
    assert first.bad_links == second.bad_links == [BadLink(page, "x.html")]


def test_repeated_link_on_a_page_is_reported_once() -> None:
    """The same dangling link written twice on a page is one violation."""
    extracted = PageExtractor().extract_markdown(
        "# Home\n\n[a](contact.md) and [b](contact.md)\n"
    )
    assert extracted.links == ["contact.html", "contact.html"]
    sitemap = _site(tuple(extracted.links))
    counting = _RejectAll()
    reporter = CollectingReporter()

    assert not verify(sitemap, [SitemapLinkValidator(sitemap), counting], reporter)

    assert reporter.bad_links == [BadLink(sitemap.root, "contact.html")]
    assert counting.calls == 1, "a repeated link is judged once per page"


def test_same_link_on_different_pages_is_reported_per_page() -> None:
    """Deduplication is per page, so each linking page gets its own report."""
    about = Page("about.html", "About", links=("gone.html",))
    sitemap = Sitemap(Page("index.html", "Home", links=("gone.html",), children=(about,)))
    reporter = CollectingReporter()
    assert not verify(sitemap, [SitemapLinkValidator(sitemap)], reporter)
    assert [str(bad) for bad in reporter.bad_links] == [
        "index.html : gone.html",
        "about.html : gone.html",
    ]
