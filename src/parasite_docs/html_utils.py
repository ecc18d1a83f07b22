"""Text helpers for fetched genome pages.

Provides:
- ``decode_body`` - bytes to text with charset detection (BeautifulSoup's
  ``UnicodeDammit``), falling back to UTF-8 with replacement.
- ``decode_entities`` - HTML entity decoding for text runs.
- ``collapse_whitespace`` / ``normalize_text`` - the whitespace rules applied
  to section text before it is stored.
"""
from __future__ import annotations

import html
import re

from bs4 import UnicodeDammit

_WHITESPACE_RE = re.compile(r"\s+")


def decode_body(raw: bytes, *, declared_encoding: str | None = None) -> str:
    """Decode a response body to text.

    Args:
        raw: Response body bytes.
        declared_encoding: Charset from the ``Content-Type`` header, tried
            first when present.

    Returns:
        Decoded text. Empty string if *raw* is empty.
    """
    if not raw:
        return ""
    known = [declared_encoding] if declared_encoding else []
    dammit = UnicodeDammit(raw, known_definite_encodings=known, is_html=True)
    if dammit.unicode_markup is not None:
        return dammit.unicode_markup
    return raw.decode("utf-8", errors="replace")


def decode_entities(text: str) -> str:
    """Decode named and numeric HTML entities (``&amp;``, ``&#160;``...)."""
    return html.unescape(text)


def collapse_whitespace(text: str) -> str:
    """Strip leading/trailing whitespace and collapse inner runs to one space."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_text(raw_text: str) -> str:
    """Entity-decode then whitespace-collapse a raw text run.

    >>> normalize_text("  Foo\\n\\nBar &amp;  Baz  ")
    'Foo Bar & Baz'
    """
    return collapse_whitespace(decode_entities(raw_text))
