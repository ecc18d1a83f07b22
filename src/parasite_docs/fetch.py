"""Genome page fetching with an explicit result type.

``PageFetcher.fetch`` never raises for HTTP or network failures; it returns
one of::

    PageOk(url, body)                 - 2xx, body decoded to text
    PageNotFound(url)                 - 404: genome not yet published
    TransportError(url, detail, status) - anything else

Usage::

    match fetcher.fetch(url):
        case PageOk(body=body): ...
        case PageNotFound(): ...
        case TransportError(detail=detail): ...

No retries: a TransportError is reported once and the caller decides.
"""
from __future__ import annotations

import http.client
import logging
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import TypeAlias

from parasite_docs.html_utils import decode_body

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0
DEFAULT_USER_AGENT = "parasite-docs/0.1"


@dataclass(frozen=True, slots=True)
class PageOk:
    url: str
    body: str


@dataclass(frozen=True, slots=True)
class PageNotFound:
    url: str


@dataclass(frozen=True, slots=True)
class TransportError:
    url: str
    detail: str
    status: int | None = None


PageResult: TypeAlias = PageOk | PageNotFound | TransportError


def _ssl_context(verify: bool) -> ssl.SSLContext:
    if verify:
        return ssl.create_default_context()
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


class PageFetcher:
    """Fetch genome pages over HTTP(S).

    Parameters
    ----------
    timeout:
        Socket timeout in seconds for each request.
    verify_ssl:
        Verify server certificates. Off by default.
    user_agent:
        ``User-Agent`` header value.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = False,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._timeout = timeout
        self._ssl_ctx = _ssl_context(verify_ssl)
        self._user_agent = user_agent

    def fetch(self, url: str) -> PageResult:
        try:
            req = urllib.request.Request(url, headers={"User-Agent": self._user_agent})
            with urllib.request.urlopen(req, timeout=self._timeout, context=self._ssl_ctx) as resp:
                raw = resp.read()
                charset = resp.headers.get_content_charset()
                status = getattr(resp, "status", None)
        except urllib.error.HTTPError as exc:
            if exc.code == 404:
                logger.debug("404 for %s", url)
                return PageNotFound(url=url)
            return TransportError(url=url, detail=f"HTTP {exc.code} {exc.reason}", status=exc.code)
        except (urllib.error.URLError, TimeoutError, OSError) as exc:
            reason = getattr(exc, "reason", exc)
            return TransportError(url=url, detail=str(reason))
        except (http.client.HTTPException, ValueError) as exc:
            # Truncated bodies, dropped connections, unusable URLs.
            return TransportError(url=url, detail=f"{type(exc).__name__}: {exc}")

        if status is not None and not 200 <= status < 300:
            return TransportError(url=url, detail=f"HTTP {status}", status=status)
        logger.debug("fetched %s (%d bytes)", url, len(raw))
        return PageOk(url=url, body=decode_body(raw, declared_encoding=charset))
