"""Sequential per-genome reconciliation loop.

For each entity, in order:
    1. bootstrap ``root/Species/BIOPROJECT`` (always);
    2. fetch the genome page if any mode needs it;
    3. on a published page: report missing files and/or write content;
       on 404: create placeholders when asked.

Species-level files are handled only the first time a species is seen.
A page that cannot be parsed skips that genome; a transport failure or a
filesystem failure stops the run.
"""
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, TypeAlias

from parasite_docs.enumerator import Entity
from parasite_docs.errors import FetchError, ParseFailure
from parasite_docs.fetch import PageNotFound, PageOk, PageResult, TransportError
from parasite_docs.layout import create_subdir, species_dir
from parasite_docs.naming import (
    BIOPROJECT_MD_SUFFIXES,
    SPECIES_MD_SUFFIXES,
    bioproject_base_name,
    content_targets,
    genome_page_url,
    species_base_name,
)
from parasite_docs.reconcile import (
    create_placeholders,
    find_missing,
    materialize,
    needs_content,
)
from parasite_docs.sections import extract_page_sections

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    def fetch(self, url: str) -> PageResult: ...


@dataclass(frozen=True, slots=True)
class Modes:
    """Which reconciliation actions to run; all off means directories only."""

    find_missing: bool = False
    create_missing: bool = False
    placeholders: bool = False

    @property
    def needs_page(self) -> bool:
        return self.find_missing or self.create_missing or self.placeholders


@dataclass(slots=True)
class RunSummary:
    entities: int = 0
    published: list[str] = field(default_factory=list)
    not_published: list[str] = field(default_factory=list)
    missing: list[Path] = field(default_factory=list)
    placeholders: list[Path] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    skipped: list[dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": self.entities,
            "published": list(self.published),
            "not_published": list(self.not_published),
            "missing": [str(p) for p in self.missing],
            "placeholders": [str(p) for p in self.placeholders],
            "written": [str(p) for p in self.written],
            "skipped": list(self.skipped),
        }


PathReporter: TypeAlias = Callable[[Path], None]


def _report_all(paths: list[Path], on_path: PathReporter | None) -> list[Path]:
    if on_path is not None:
        for path in paths:
            on_path(path)
    return paths


def process_entity(
    entity: Entity,
    *,
    root_dir: Path,
    fetcher: Fetcher,
    base_url: str,
    modes: Modes,
    first_for_species: bool,
    summary: RunSummary,
    on_path: PathReporter | None = None,
) -> None:
    """Reconcile one genome, recording results in *summary*.

    Raises:
        ParseFailure: the published page could not be parsed.
        FetchError: the page fetch failed with anything other than 404.
        FileSystemFailure: the tree could not be created or written.
    """
    species = entity.species
    bioproject = entity.bioproject
    sp_dir = species_dir(root_dir, species)
    bp_dir = create_subdir(root_dir, species, bioproject)
    bp_base = bioproject_base_name(species, bioproject)

    if not modes.needs_page:
        return

    url = genome_page_url(base_url, species, bioproject)
    match fetcher.fetch(url):
        case PageOk(body=body):
            summary.published.append(entity.label)
            if modes.find_missing:
                if first_for_species:
                    summary.missing += _report_all(
                        find_missing(sp_dir, species_base_name(species), SPECIES_MD_SUFFIXES),
                        on_path,
                    )
                summary.missing += _report_all(
                    find_missing(bp_dir, bp_base, BIOPROJECT_MD_SUFFIXES), on_path
                )
            if modes.create_missing:
                targets = content_targets(sp_dir, bp_dir, species, bioproject)
                if needs_content(targets.values()):
                    try:
                        sections = extract_page_sections(body)
                    except ParseFailure as exc:
                        raise ParseFailure(f"Failed to parse {url}: {exc}") from exc
                    content = {key: sections.html(key) for key in targets}
                    summary.written += _report_all(materialize(targets, content), on_path)
        case PageNotFound():
            # expected for genomes that are not yet on the web site
            logger.info("Not yet published: %s", entity.label)
            summary.not_published.append(entity.label)
            if modes.placeholders:
                if first_for_species:
                    summary.placeholders += _report_all(
                        create_placeholders(sp_dir, species_base_name(species), SPECIES_MD_SUFFIXES),
                        on_path,
                    )
                summary.placeholders += _report_all(
                    create_placeholders(bp_dir, bp_base, BIOPROJECT_MD_SUFFIXES), on_path
                )
        case TransportError(detail=detail):
            raise FetchError(f"failed to fetch {url}: {detail}")


def process_entities(
    entities: Iterable[Entity],
    *,
    root_dir: Path,
    fetcher: Fetcher,
    base_url: str,
    modes: Modes,
    on_path: PathReporter | None = None,
) -> RunSummary:
    """Reconcile every entity in order and return the run summary."""
    summary = RunSummary()
    species_count: Counter[str] = Counter()
    for entity in entities:
        summary.entities += 1
        try:
            process_entity(
                entity,
                root_dir=root_dir,
                fetcher=fetcher,
                base_url=base_url,
                modes=modes,
                first_for_species=species_count[entity.species] == 0,
                summary=summary,
                on_path=on_path,
            )
        except ParseFailure as exc:
            logger.warning("Skipping %s: %s", entity.label, exc)
            summary.skipped.append({"entity": entity.label, "reason": str(exc)})
        species_count[entity.species] += 1
    return summary
