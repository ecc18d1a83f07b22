"""Reconcile expected markdown files against the filesystem.

The filesystem is the system of record: every call re-checks presence and
size, nothing is cached between calls.

Operations:
    find_missing        - expected files that do not exist (read-only)
    create_placeholders - touch ``<file>.placeholder`` for each absent file
    materialize         - write section content into absent or empty files
    needs_content       - pre-check used before fetching page content
    artifact_state      - classify one expected file
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum
from pathlib import Path

from parasite_docs.errors import FileSystemFailure
from parasite_docs.expected_files import expected_paths
from parasite_docs.naming import PLACEHOLDER_SUFFIX

logger = logging.getLogger(__name__)


class ArtifactState(StrEnum):
    MISSING = "missing"
    PLACEHOLDER = "placeholder"
    POPULATED = "populated"
    POPULATED_EMPTY = "populated_empty"


def placeholder_path(path: Path) -> Path:
    """``foo.about.md`` -> ``foo.about.md.placeholder``."""
    return path.with_name(path.name + PLACEHOLDER_SUFFIX)


def artifact_state(path: Path) -> ArtifactState:
    """Classify an expected file from its current filesystem state."""
    if path.exists():
        return ArtifactState.POPULATED if path.stat().st_size > 0 else ArtifactState.POPULATED_EMPTY
    if placeholder_path(path).exists():
        return ArtifactState.PLACEHOLDER
    return ArtifactState.MISSING


def _is_absent_or_empty(path: Path) -> bool:
    return not path.exists() or path.stat().st_size == 0


def find_missing(
    directory: Path | str,
    base_name: str,
    suffixes: Sequence[str],
) -> list[Path]:
    """Return the expected files that do not exist, in suffix order."""
    missing: list[Path] = []

    def collect(path: Path) -> None:
        if not path.exists():
            missing.append(path)

    expected_paths(directory, base_name, suffixes, callback=collect)
    return missing


def create_placeholders(
    directory: Path | str,
    base_name: str,
    suffixes: Sequence[str],
) -> list[Path]:
    """Create empty placeholder markers for absent expected files.

    Returns every placeholder path that exists for an absent primary file,
    including placeholders that were already there before this call.

    Raises:
        FileSystemFailure: a marker file could not be created.
    """
    placeholders: list[Path] = []
    for path in expected_paths(directory, base_name, suffixes):
        if path.exists():
            continue
        marker = placeholder_path(path)
        if not marker.exists():
            try:
                marker.touch()
            except OSError as exc:
                raise FileSystemFailure(f"failed to create {marker}: {exc}") from exc
            logger.debug("created placeholder %s", marker)
        placeholders.append(marker)
    return placeholders


def needs_content(paths: Iterable[Path]) -> bool:
    """True if any of *paths* is absent or zero-sized."""
    return any(_is_absent_or_empty(p) for p in paths)


def materialize(
    targets: Mapping[str, Path],
    content: Mapping[str, Sequence[str]],
) -> list[Path]:
    """Write content lines into target files that are absent or empty.

    Each file gets its lines joined with ``\\n`` plus a trailing ``\\n``.
    Files that already hold data are never touched, so repeating the call is
    harmless.

    Args:
        targets: Key (section name) to destination path.
        content: Key to ordered content lines; a missing key writes an empty
            line.

    Returns:
        Paths that were written, in *targets* order.

    Raises:
        FileSystemFailure: a file could not be written.
    """
    written: list[Path] = []
    for key, path in targets.items():
        if not _is_absent_or_empty(path):
            continue
        body = "\n".join([*content.get(key, ()), ""])
        try:
            path.write_text(body, encoding="utf-8")
        except OSError as exc:
            raise FileSystemFailure(f"failed to write {path}: {exc}") from exc
        logger.debug("wrote %s (%d bytes)", path, len(body.encode("utf-8")))
        written.append(path)
    return written
