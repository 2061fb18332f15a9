"""Pluggable link validation strategies.

A validator answers one question: is ``link`` acceptable on ``page``? It must
not raise; when a validator cannot decide (for example because a remote host
is unreachable) it accepts the link so the rest of the pipeline is unaffected.

Validators shipped here:

- :class:`SitemapLinkValidator` checks that internal page links resolve to a
  page of the sitemap.
- :class:`UrlSyntaxValidator` checks that links are well-formed URIs.
- :class:`ReachableLinkValidator` checks that external http(s) links answer
  with a non-error status.
- :class:`AcceptAllValidator` accepts everything.
"""

from __future__ import annotations

import logging
import typing as typ
from urllib.parse import urlsplit

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

if typ.TYPE_CHECKING:
    from .model import Page, Sitemap

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "skinsite-linkcheck/1.0"
ALLOWED_SCHEMES = frozenset({"", "http", "https", "ftp", "mailto", "tel"})
HOST_SCHEMES = frozenset({"http", "https", "ftp"})


class LinkValidator(typ.Protocol):
    """Predicate deciding whether one outbound link is acceptable."""

    def accepts(self, page: Page, link: str) -> bool:
        """Return True when ``link`` on ``page`` passes this check."""
        ...


class AcceptAllValidator:
    """Validator that accepts every link."""

    def accepts(self, page: Page, link: str) -> bool:  # noqa: ARG002
        return True

    def __repr__(self) -> str:
        return "AcceptAllValidator()"


class SitemapLinkValidator:
    """Reject internal page links whose target is missing from the sitemap."""

    def __init__(self, sitemap: Sitemap) -> None:
        self.sitemap = sitemap

    def accepts(self, page: Page, link: str) -> bool:
        target = self.sitemap.resolve_link(page, link)
        if target is None:
            return True
        return target in self.sitemap

    def __repr__(self) -> str:
        return "SitemapLinkValidator()"


class UrlSyntaxValidator:
    """Reject links that are not well-formed URIs."""

    def __init__(self, allowed_schemes: typ.Iterable[str] = ALLOWED_SCHEMES) -> None:
        self.allowed_schemes = frozenset(scheme.lower() for scheme in allowed_schemes)

    def accepts(self, page: Page, link: str) -> bool:  # noqa: ARG002
        if not link or link != link.strip() or any(ch.isspace() for ch in link):
            return False
        try:
            parsed = urlsplit(link)
            # Accessing port validates it.
            _ = parsed.port
        except ValueError:
            return False
        scheme = parsed.scheme.lower()
        if scheme not in self.allowed_schemes:
            return False
        if scheme in HOST_SCHEMES and not parsed.hostname:
            return False
        return not (scheme in {"mailto", "tel"} and not parsed.path)

    def __repr__(self) -> str:
        return "UrlSyntaxValidator()"


class ReachableLinkValidator:
    """Reject external http(s) links that answer with an error status.

    Results are cached per URL for the lifetime of the validator. Transport
    failures (DNS errors, timeouts, refused connections) leave the link
    accepted because no decision can be made.
    """

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the validator with transport settings.

        Parameters
        ----------
        timeout : float, optional
            Per-request timeout in seconds.
        user_agent : str, optional
            ``User-Agent`` header sent with every probe.
        session : requests.Session, optional
            Preconfigured session; a retrying session is built when omitted.
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self._session = session
        self._owns_session = session is None
        self._cache: dict[str, bool] = {}

    def _get_session(self) -> requests.Session:
        if self._session is None:
            session = requests.Session()
            retry = Retry(
                total=3,
                connect=2,
                read=2,
                backoff_factor=0.5,
                status_forcelist=(502, 503, 504),
                allowed_methods=("GET", "HEAD"),
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
            self._session = session
        return self._session

    def accepts(self, page: Page, link: str) -> bool:  # noqa: ARG002
        parsed = urlsplit(link.strip())
        if parsed.scheme.lower() not in {"http", "https"} or not parsed.netloc:
            return True
        url = parsed._replace(fragment="").geturl()
        if url not in self._cache:
            self._cache[url] = self._probe(url)
        return self._cache[url]

    def _probe(self, url: str) -> bool:
        """Return False only when the server answers with an error status."""
        session = self._get_session()
        headers = {"User-Agent": self.user_agent}
        try:
            resp = session.head(
                url, timeout=self.timeout, headers=headers, allow_redirects=True
            )
            if resp.status_code in (405, 501):
                resp = session.get(
                    url,
                    timeout=self.timeout,
                    headers=headers,
                    allow_redirects=True,
                    stream=True,
                )
                resp.close()
        except requests.RequestException as exc:
            logger.debug("Could not probe %s (%s); accepting", url, exc)
            return True
        if resp.status_code >= 400:
            logger.debug("Probe of %s returned HTTP %s", url, resp.status_code)
            return False
        return True

    def close(self) -> None:
        """Close the HTTP session this validator created.

        A session passed in by the caller stays open; its owner closes it. A
        later probe after ``close`` opens a fresh session.
        """
        if self._owns_session and self._session is not None:
            self._session.close()
            self._session = None

    def __repr__(self) -> str:
        return f"ReachableLinkValidator(timeout={self.timeout})"


__all__ = [
    "AcceptAllValidator",
    "LinkValidator",
    "ReachableLinkValidator",
    "SitemapLinkValidator",
    "UrlSyntaxValidator",
]
