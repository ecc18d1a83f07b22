"""Section extraction from genome page markup.

Genome pages mark the regions of interest with named anchors::

    <a name="about">...</a> ... </div>
    <a name="assembly">...</a> ... <h3>
    <a name="annotation">...</a> ... <h3>

Two layers:
- ``iter_markup_events`` - tokenizer adapter over ``html.parser.HTMLParser``
  that yields ``StartTag`` / ``EndTag`` / ``Text`` events carrying raw source
  text, in document order.
- ``SectionExtractor`` - a reducer that consumes those events and accumulates
  per-section raw markup and normalized text. It never touches a tokenizer, so
  it can be driven by hand-built event lists.

Section rules:
- ``<a name="X">`` opens section X (X in ``SectionName``) at any depth.
- ``<h3>`` closes ``assembly`` / ``annotation`` before it is stored;
  ``about`` is not affected.
- ``</div>`` closes whichever section is open, after it is stored.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from html.parser import HTMLParser
from types import MappingProxyType
from typing import TypeAlias

from parasite_docs.errors import InvalidArgumentError, ParseFailure
from parasite_docs.html_utils import normalize_text

logger = logging.getLogger(__name__)


class SectionName(StrEnum):
    """Named page regions that are mirrored to markdown files."""

    ABOUT = "about"
    ASSEMBLY = "assembly"
    ANNOTATION = "annotation"


CONTENT_KINDS: tuple[str, ...] = ("html", "text")

SECTION_ANCHOR_TAG = "a"
SUBSECTION_HEADING_TAG = "h3"
CONTAINER_TAG = "div"

# Sections that end at the next sub-heading as well as at the container end.
HEADING_CLOSED_SECTIONS: frozenset[SectionName] = frozenset({
    SectionName.ASSEMBLY,
    SectionName.ANNOTATION,
})


def section_name(value: str | None) -> SectionName | None:
    """Return the SectionName for an anchor ``name`` value, or None."""
    if value is None:
        return None
    try:
        return SectionName(value)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Markup events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StartTag:
    """Opening tag. ``raw`` is the tag exactly as written in the source."""

    tag: str
    attrs: tuple[tuple[str, str | None], ...] = ()
    raw: str = ""

    def attr(self, name: str) -> str | None:
        for key, value in self.attrs:
            if key == name:
                return value
        return None


@dataclass(frozen=True, slots=True)
class EndTag:
    """Closing tag. ``raw`` is the tag exactly as written in the source."""

    tag: str
    raw: str = ""


@dataclass(frozen=True, slots=True)
class Text:
    """A run of character data, entities left undecoded."""

    raw: str


MarkupEvent: TypeAlias = StartTag | EndTag | Text


# ---------------------------------------------------------------------------
# Extraction result
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Section:
    """Accumulated content of one named section."""

    name: SectionName
    html: tuple[str, ...] = ()
    text: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SectionContent:
    """Immutable per-section content handed back once a parse completes."""

    sections: Mapping[SectionName, Section] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sections", MappingProxyType(dict(self.sections)))

    def section_content(self, name: str, kind: str) -> tuple[str, ...]:
        """Return the ``html`` or ``text`` sequence for a section.

        Sections that were never populated (or are not recognised) yield an
        empty tuple.
        """
        if kind not in CONTENT_KINDS:
            raise InvalidArgumentError(
                f"content kind must be one of {CONTENT_KINDS}, got {kind!r}"
            )
        key = section_name(name)
        section = self.sections.get(key) if key is not None else None
        if section is None:
            return ()
        return section.html if kind == "html" else section.text

    def html(self, name: str) -> tuple[str, ...]:
        return self.section_content(name, "html")

    def text(self, name: str) -> tuple[str, ...]:
        return self.section_content(name, "text")

    def as_dict(self) -> dict[str, dict[str, list[str]]]:
        """Plain mapping of every recognised section to its html/text lists."""
        return {
            str(name): {
                "html": list(self.html(name)),
                "text": list(self.text(name)),
            }
            for name in SectionName
        }


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------


class SectionExtractor:
    """Accumulate section content from a stream of markup events.

    Holds only the current section and the per-section buffers. Content is
    appended only while a section is current; everything else is dropped.
    """

    def __init__(self) -> None:
        self._current: SectionName | None = None
        self._html: dict[SectionName, list[str]] = {}
        self._text: dict[SectionName, list[str]] = {}

    @property
    def current(self) -> SectionName | None:
        return self._current

    def feed(self, event: MarkupEvent) -> None:
        match event:
            case StartTag():
                self._on_start(event)
            case EndTag():
                self._on_end(event)
            case Text():
                self._on_text(event)
            case _:
                raise InvalidArgumentError(
                    f"unsupported markup event: {type(event).__name__}"
                )

    def feed_all(self, events: Iterable[MarkupEvent]) -> SectionExtractor:
        for event in events:
            self.feed(event)
        return self

    def result(self) -> SectionContent:
        """Snapshot the accumulated content (open sections included)."""
        names = [n for n in SectionName if n in self._html or n in self._text]
        return SectionContent({
            name: Section(
                name=name,
                html=tuple(self._html.get(name, ())),
                text=tuple(self._text.get(name, ())),
            )
            for name in names
        })

    def _on_start(self, event: StartTag) -> None:
        if event.tag == SECTION_ANCHOR_TAG:
            opened = section_name(event.attr("name"))
            if opened is not None:
                logger.debug("section %s opened", opened)
                self._current = opened

        if event.tag == SUBSECTION_HEADING_TAG and self._current in HEADING_CLOSED_SECTIONS:
            logger.debug("section %s closed by <%s>", self._current, event.tag)
            self._current = None

        if self._current is not None:
            self._html.setdefault(self._current, []).append(event.raw)

    def _on_end(self, event: EndTag) -> None:
        if self._current is None:
            return
        self._html.setdefault(self._current, []).append(event.raw)
        if event.tag == CONTAINER_TAG:
            logger.debug("section %s closed by </%s>", self._current, event.tag)
            self._current = None

    def _on_text(self, event: Text) -> None:
        if self._current is None:
            return
        self._html.setdefault(self._current, []).append(event.raw)
        normalized = normalize_text(event.raw)
        if normalized:
            self._text.setdefault(self._current, []).append(normalized)


# ---------------------------------------------------------------------------
# Tokenizer adapter
# ---------------------------------------------------------------------------


class _EventCollector(HTMLParser):
    """HTMLParser that records raw-text markup events instead of handling them."""

    def __init__(self, markup: str) -> None:
        super().__init__(convert_charrefs=False)
        self._markup = markup
        self._line_starts = _line_starts(markup)
        self._pending_text: list[str] = []
        self.events: list[MarkupEvent] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._flush_text()
        raw = self.get_starttag_text() or f"<{tag}>"
        self.events.append(StartTag(tag=tag, attrs=tuple(attrs), raw=raw))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.handle_starttag(tag, attrs)

    def handle_endtag(self, tag: str) -> None:
        self._flush_text()
        self.events.append(EndTag(tag=tag, raw=self._raw_tag_at_position(tag)))

    def handle_data(self, data: str) -> None:
        self._pending_text.append(data)

    def handle_entityref(self, name: str) -> None:
        self._pending_text.append(self._raw_reference("&", name))

    def handle_charref(self, name: str) -> None:
        self._pending_text.append(self._raw_reference("&#", name))

    def handle_comment(self, data: str) -> None:
        self._flush_text()

    def handle_decl(self, decl: str) -> None:
        self._flush_text()

    def handle_pi(self, data: str) -> None:
        self._flush_text()

    def unknown_decl(self, data: str) -> None:
        self._flush_text()

    def close(self) -> None:
        super().close()
        self._flush_text()

    def _flush_text(self) -> None:
        if self._pending_text:
            self.events.append(Text("".join(self._pending_text)))
            self._pending_text = []

    def _source_offset(self) -> int:
        lineno, offset = self.getpos()
        return self._line_starts[lineno - 1] + offset

    def _raw_reference(self, prefix: str, name: str) -> str:
        # The tokenizer also reports "AT&T" and "&amp b" as references; the
        # terminating ";" is only part of the raw text when the source has it.
        start = self._source_offset()
        end = start + len(prefix) + len(name)
        if self._markup.startswith(";", end):
            end += 1
        return self._markup[start:end]

    def _raw_tag_at_position(self, tag: str) -> str:
        start = self._source_offset()
        if not self._markup.startswith("<", start):
            return f"</{tag}>"
        end = self._markup.find(">", start)
        return self._markup[start:] if end == -1 else self._markup[start:end + 1]


def _line_starts(markup: str) -> list[int]:
    """Absolute offsets of each line start (HTMLParser counts lines on \\n)."""
    starts = [0]
    pos = markup.find("\n")
    while pos != -1:
        starts.append(pos + 1)
        pos = markup.find("\n", pos + 1)
    return starts


def iter_markup_events(markup: str) -> Iterator[MarkupEvent]:
    """Tokenize *markup* into start-tag, end-tag and text events.

    Raises:
        InvalidArgumentError: *markup* is not a string.
        ParseFailure: the tokenizer rejected the document.
    """
    if not isinstance(markup, str):
        raise InvalidArgumentError(
            f"markup must be str, got {type(markup).__name__}"
        )
    collector = _EventCollector(markup)
    try:
        collector.feed(markup)
        collector.close()
    except (AssertionError, ValueError, IndexError) as exc:
        raise ParseFailure(f"HTML parsing error: {exc}") from exc
    return iter(collector.events)


def extract_sections(events: Iterable[MarkupEvent]) -> SectionContent:
    """Reduce a markup event stream to per-section content."""
    return SectionExtractor().feed_all(events).result()


def extract_page_sections(markup: str) -> SectionContent:
    """Tokenize a page and extract its sections."""
    return extract_sections(iter_markup_events(markup))
