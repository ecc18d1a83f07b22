"""File naming conventions for the species documentation tree.

Layout::

    <root>/<Species>/
        <Species>.about.md                          (scan convention)
        <Species>_<BIOPROJECT>_about.md             (content convention)
        <BIOPROJECT>/
            <Species>_<BIOPROJECT>.assembly.md      (scan convention)
            <Species>_<BIOPROJECT>_assembly.md      (content convention)

Two conventions coexist. The missing-file scan and placeholders use
``<base><suffix>``; content written from the web site uses
``<Species>_<BIOPROJECT>_<section>.md``. Downstream tooling reads both, so
they are kept separate.
"""
from __future__ import annotations

from pathlib import Path

from parasite_docs.sections import SectionName

SPECIES_MD_SUFFIXES: tuple[str, ...] = (".about.md",)
BIOPROJECT_MD_SUFFIXES: tuple[str, ...] = (
    ".assembly.md",
    ".annotation.md",
    ".referenced.md",
)
PLACEHOLDER_SUFFIX = ".placeholder"
CREATED_SENTINEL = ".created"

DEFAULT_BASE_URL = "https://parasite.wormbase.org/"


def species_base_name(species: str) -> str:
    return species


def bioproject_base_name(species: str, bioproject: str) -> str:
    """``Acanthocheilonema_viteae`` + ``prjeb1697`` -> ``..._PRJEB1697``."""
    return f"{species}_{bioproject.upper()}"


def content_file_name(species: str, bioproject: str, section: SectionName | str) -> str:
    """Content-convention name, e.g. ``Acanthocheilonema_viteae_PRJEB1697_about.md``."""
    return f"{bioproject_base_name(species, bioproject)}_{section}.md"


def content_targets(
    species_dir: Path,
    bioproject_dir: Path,
    species: str,
    bioproject: str,
) -> dict[str, Path]:
    """Destination of each extracted section.

    ``about`` lives in the species directory, the others in the bioproject
    directory. Keys are plain section names, in ``SectionName`` order.
    """
    homes = {
        SectionName.ABOUT: species_dir,
        SectionName.ASSEMBLY: bioproject_dir,
        SectionName.ANNOTATION: bioproject_dir,
    }
    return {
        str(section): homes[section] / content_file_name(species, bioproject, section)
        for section in SectionName
    }


def genome_page_url(base_url: str, species: str, bioproject: str) -> str:
    """Genome page path is like ``Acanthocheilonema_viteae_prjeb1697``."""
    return f"{base_url}{species}_{bioproject}"
