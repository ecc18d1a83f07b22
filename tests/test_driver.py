"""Tests for parasite_docs.driver module (end-to-end over a fake fetcher)."""
from __future__ import annotations

from pathlib import Path

import pytest

from parasite_docs import driver
from parasite_docs.driver import Modes, process_entities
from parasite_docs.enumerator import Entity
from parasite_docs.errors import FetchError, ParseFailure
from parasite_docs.fetch import PageNotFound, PageOk, PageResult, TransportError

BASE_URL = "https://parasite.example.org/"

VITEAE = Entity("Acanthocheilonema_viteae", "prjeb1697")
MALAYI_A = Entity("Brugia_malayi", "prjna10729")
MALAYI_B = Entity("Brugia_malayi", "prjeb123")

GENOME_PAGE = """<html><body>
<div class="panel">
  <a name="about"></a><h2>About <i>Acanthocheilonema viteae</i></h2>
  <p>A filarial nematode of rodents &amp; jirds.</p>
  <h3>Classification</h3>
</div>
<div class="panel">
  <a name="assembly"></a><h2>Assembly</h2>
  <p>Sequenced by the Blaxter lab.</p>
  <h3>Statistics</h3>
  <table><tr><td>N50</td></tr></table>
</div>
<div class="panel">
  <a name="annotation"></a><h2>Annotation</h2>
  <p>MAKER2 gene models.</p>
</div>
</body></html>
"""


class FakeFetcher:
    def __init__(self, pages: dict[str, PageResult]) -> None:
        self.pages = pages
        self.requested: list[str] = []

    def fetch(self, url: str) -> PageResult:
        self.requested.append(url)
        return self.pages.get(url, PageNotFound(url=url))


def _url(entity: Entity) -> str:
    return f"{BASE_URL}{entity.species}_{entity.bioproject}"


def _run(root: Path, entities: list[Entity], fetcher: FakeFetcher, modes: Modes, **kw: object) -> driver.RunSummary:
    return process_entities(
        entities,
        root_dir=root,
        fetcher=fetcher,
        base_url=BASE_URL,
        modes=modes,
        **kw,  # type: ignore[arg-type]
    )


class TestDirectoriesOnly:
    def test_no_mode_creates_tree_without_fetching(self, tmp_path: Path) -> None:
        fetcher = FakeFetcher({})
        summary = _run(tmp_path, [VITEAE, MALAYI_A], fetcher, Modes())
        assert fetcher.requested == []
        assert (tmp_path / "Acanthocheilonema_viteae" / "PRJEB1697" / ".created").exists()
        assert (tmp_path / "Brugia_malayi" / "PRJNA10729" / ".created").exists()
        assert summary.entities == 2


class TestPlaceholders:
    def test_unpublished_genome_gets_four_placeholders(self, tmp_path: Path) -> None:
        fetcher = FakeFetcher({})
        reported: list[Path] = []
        summary = _run(tmp_path, [VITEAE], fetcher, Modes(placeholders=True), on_path=reported.append)

        sp = tmp_path / "Acanthocheilonema_viteae"
        bp = sp / "PRJEB1697"
        expected = [
            sp / "Acanthocheilonema_viteae.about.md.placeholder",
            bp / "Acanthocheilonema_viteae_PRJEB1697.assembly.md.placeholder",
            bp / "Acanthocheilonema_viteae_PRJEB1697.annotation.md.placeholder",
            bp / "Acanthocheilonema_viteae_PRJEB1697.referenced.md.placeholder",
        ]
        assert summary.placeholders == expected
        assert reported == expected
        assert sorted(tmp_path.rglob("*.placeholder")) == sorted(expected)
        assert summary.not_published == ["Acanthocheilonema_viteae_prjeb1697"]
        assert fetcher.requested == [_url(VITEAE)]

    def test_species_files_only_on_first_encounter(self, tmp_path: Path) -> None:
        summary = _run(tmp_path, [MALAYI_A, MALAYI_B], FakeFetcher({}), Modes(placeholders=True))
        species_level = [p for p in summary.placeholders if p.name.startswith("Brugia_malayi.about")]
        assert len(species_level) == 1
        assert len(summary.placeholders) == 1 + 3 + 3

    def test_published_genome_gets_no_placeholders(self, tmp_path: Path) -> None:
        fetcher = FakeFetcher({_url(VITEAE): PageOk(_url(VITEAE), GENOME_PAGE)})
        summary = _run(tmp_path, [VITEAE], fetcher, Modes(placeholders=True))
        assert summary.placeholders == []
        assert list(tmp_path.rglob("*.placeholder")) == []

    def test_not_found_without_placeholder_mode(self, tmp_path: Path) -> None:
        summary = _run(tmp_path, [VITEAE], FakeFetcher({}), Modes(find_missing=True))
        assert summary.not_published == ["Acanthocheilonema_viteae_prjeb1697"]
        assert summary.missing == []
        assert list(tmp_path.rglob("*.placeholder")) == []


class TestFindMissing:
    def test_reports_species_then_bioproject_files(self, tmp_path: Path) -> None:
        fetcher = FakeFetcher({_url(VITEAE): PageOk(_url(VITEAE), GENOME_PAGE)})
        bp = tmp_path / "Acanthocheilonema_viteae" / "PRJEB1697"
        bp.mkdir(parents=True)
        (bp / "Acanthocheilonema_viteae_PRJEB1697.annotation.md").write_text("done\n")

        summary = _run(tmp_path, [VITEAE], fetcher, Modes(find_missing=True))
        assert summary.missing == [
            tmp_path / "Acanthocheilonema_viteae" / "Acanthocheilonema_viteae.about.md",
            bp / "Acanthocheilonema_viteae_PRJEB1697.assembly.md",
            bp / "Acanthocheilonema_viteae_PRJEB1697.referenced.md",
        ]
        assert summary.published == ["Acanthocheilonema_viteae_prjeb1697"]

    def test_species_checked_once(self, tmp_path: Path) -> None:
        fetcher = FakeFetcher({
            _url(MALAYI_A): PageOk(_url(MALAYI_A), GENOME_PAGE),
            _url(MALAYI_B): PageOk(_url(MALAYI_B), GENOME_PAGE),
        })
        summary = _run(tmp_path, [MALAYI_A, MALAYI_B], fetcher, Modes(find_missing=True))
        about = [p for p in summary.missing if p.name == "Brugia_malayi.about.md"]
        assert len(about) == 1
        assert len(summary.missing) == 7


class TestCreateMissing:
    def test_writes_section_content(self, tmp_path: Path) -> None:
        fetcher = FakeFetcher({_url(VITEAE): PageOk(_url(VITEAE), GENOME_PAGE)})
        summary = _run(tmp_path, [VITEAE], fetcher, Modes(create_missing=True))

        sp = tmp_path / "Acanthocheilonema_viteae"
        bp = sp / "PRJEB1697"
        about = sp / "Acanthocheilonema_viteae_PRJEB1697_about.md"
        assembly = bp / "Acanthocheilonema_viteae_PRJEB1697_assembly.md"
        annotation = bp / "Acanthocheilonema_viteae_PRJEB1697_annotation.md"
        assert summary.written == [about, assembly, annotation]

        about_text = about.read_text(encoding="utf-8")
        assert about_text.startswith('<a name="about">\n')
        assert "rodents &amp; jirds." in about_text
        assert "<h3>" in about_text
        assert about_text.endswith("</div>\n")
        assert "Assembly" not in about_text

        assembly_text = assembly.read_text(encoding="utf-8")
        assert "Blaxter" in assembly_text
        assert "<h3>" not in assembly_text
        assert "N50" not in assembly_text

        assert "MAKER2" in annotation.read_text(encoding="utf-8")

    def test_populated_files_untouched(self, tmp_path: Path) -> None:
        fetcher = FakeFetcher({_url(VITEAE): PageOk(_url(VITEAE), GENOME_PAGE)})
        bp = tmp_path / "Acanthocheilonema_viteae" / "PRJEB1697"
        bp.mkdir(parents=True)
        curated = bp / "Acanthocheilonema_viteae_PRJEB1697_assembly.md"
        curated.write_text("curated\n")

        summary = _run(tmp_path, [VITEAE], fetcher, Modes(create_missing=True))
        assert curated not in summary.written
        assert curated.read_text() == "curated\n"
        assert len(summary.written) == 2

    def test_skips_parsing_when_nothing_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        fetcher = FakeFetcher({_url(VITEAE): PageOk(_url(VITEAE), GENOME_PAGE)})
        _run(tmp_path, [VITEAE], fetcher, Modes(create_missing=True))

        def fail(markup: str) -> None:
            raise AssertionError("page should not be parsed")

        monkeypatch.setattr(driver, "extract_page_sections", fail)
        summary = _run(tmp_path, [VITEAE], fetcher, Modes(create_missing=True))
        assert summary.written == []


class TestFailures:
    def test_parse_failure_skips_entity(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        fetcher = FakeFetcher({
            _url(VITEAE): PageOk(_url(VITEAE), "<broken"),
            _url(MALAYI_A): PageOk(_url(MALAYI_A), GENOME_PAGE),
        })
        real = driver.extract_page_sections

        def flaky(markup: str):  # type: ignore[no-untyped-def]
            if markup == "<broken":
                raise ParseFailure("bad markup")
            return real(markup)

        monkeypatch.setattr(driver, "extract_page_sections", flaky)
        summary = _run(tmp_path, [VITEAE, MALAYI_A], fetcher, Modes(create_missing=True))

        assert summary.skipped == [{
            "entity": "Acanthocheilonema_viteae_prjeb1697",
            "reason": f"Failed to parse {_url(VITEAE)}: bad markup",
        }]
        assert len(summary.written) == 3
        assert all("Brugia_malayi" in p.name for p in summary.written)

    def test_transport_error_aborts(self, tmp_path: Path) -> None:
        fetcher = FakeFetcher({_url(VITEAE): TransportError(_url(VITEAE), "HTTP 503", 503)})
        with pytest.raises(FetchError, match="HTTP 503"):
            _run(tmp_path, [VITEAE, MALAYI_A], fetcher, Modes(placeholders=True))
        assert fetcher.requested == [_url(VITEAE)]


def test_summary_to_dict(tmp_path: Path) -> None:
    summary = _run(tmp_path, [VITEAE], FakeFetcher({}), Modes(placeholders=True))
    data = summary.to_dict()
    assert data["entities"] == 1
    assert data["not_published"] == ["Acanthocheilonema_viteae_prjeb1697"]
    assert all(isinstance(p, str) for p in data["placeholders"])
    assert len(data["placeholders"]) == 4
