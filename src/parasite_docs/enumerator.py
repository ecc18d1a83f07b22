"""Genome enumeration from core database names.

Core databases are named like::

    acanthocheilonema_viteae_prjeb1697_core_19_108_1
    <genus>_<species>_<bioproject>_core_<parasite>_<ensembl>_<n>

Only names for the configured ParaSite/Ensembl release are kept. Names come
from a listing command (run via ``subprocess``) or a plain text file.
"""
from __future__ import annotations

import logging
import re
import shlex
import subprocess
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from parasite_docs.errors import EnumerationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Entity:
    """One genome: a species and one of its bioprojects."""

    species: str
    bioproject: str

    @property
    def label(self) -> str:
        return f"{self.species}_{self.bioproject}"


def core_db_pattern(parasite_version: str, ensembl_version: str) -> re.Pattern[str]:
    """Compile the core database name pattern for one release."""
    return re.compile(
        r"^([a-z]+_[a-z0-9]+)_([a-z0-9]+)_core_"
        + re.escape(parasite_version)
        + "_"
        + re.escape(ensembl_version)
        + r"_[0-9]+$"
    )


def parse_core_db_name(name: str, pattern: re.Pattern[str]) -> Entity | None:
    """Map a core database name to an Entity, or None if it doesn't match.

    Database names are all lower case, but paths on the web site have a
    capitalised genus.
    """
    m = pattern.match(name)
    if m is None:
        return None
    species = m.group(1)
    return Entity(species=species[:1].upper() + species[1:], bioproject=m.group(2))


def iter_entities(db_names: Iterable[str], pattern: re.Pattern[str]) -> Iterator[Entity]:
    """Yield an Entity for every matching name, in input order."""
    for name in db_names:
        entity = parse_core_db_name(name.strip(), pattern)
        if entity is None:
            logger.debug("Ignoring: %s", name.strip())
            continue
        yield entity


def read_core_database_list(path: Path | str) -> list[str]:
    """Read database names, one per line (``-`` reads stdin). Blank lines skipped."""
    if str(path) == "-":
        lines = sys.stdin.read().splitlines()
    else:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def list_core_databases(command: str | list[str]) -> list[str]:
    """Run a database listing command and return its non-empty output lines.

    Example command: ``mysql-ps-staging -Ne "SHOW DATABASES LIKE '%_core_%'"``.

    Raises:
        EnumerationError: the command could not be run or exited non-zero.
    """
    cmd = shlex.split(command) if isinstance(command, str) else list(command)
    if not cmd:
        raise EnumerationError("database listing command is empty")
    logger.info("Running: %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise EnumerationError(f"failed to run {cmd[0]}: {exc}") from exc
    if proc.returncode != 0:
        raise EnumerationError(
            f"{cmd[0]} exited with status {proc.returncode}: {proc.stderr.strip()}"
        )
    return [line.strip() for line in proc.stdout.splitlines() if line.strip()]
