"""Directory bootstrapping for the root -> species -> bioproject tree."""
from __future__ import annotations

import logging
from pathlib import Path

from parasite_docs.errors import FileSystemFailure, InvalidArgumentError
from parasite_docs.naming import CREATED_SENTINEL

logger = logging.getLogger(__name__)


def species_dir(root: Path | str, species: str) -> Path:
    return Path(root) / species


def bioproject_dir(root: Path | str, species: str, bioproject: str) -> Path:
    return Path(root) / species / bioproject.upper()


def create_subdir(root: Path | str, species: str, bioproject: str) -> Path:
    """Ensure ``root/species/BIOPROJECT`` exists and return its path.

    Every directory created here gets an empty ``.created`` sentinel;
    directories that already existed are left alone.

    Raises:
        InvalidArgumentError: any argument is empty.
        FileSystemFailure: a path exists but is not a directory, or a
            directory/sentinel could not be created.
    """
    if not root or not species or not bioproject:
        raise InvalidArgumentError("root directory, species and bioproject are all required")

    leaf = bioproject_dir(root, species, bioproject)
    for directory in (Path(root), species_dir(root, species), leaf):
        if directory.exists():
            if not directory.is_dir():
                raise FileSystemFailure(f"{directory} exists, but isn't a directory")
            continue
        try:
            directory.mkdir()
            (directory / CREATED_SENTINEL).touch()
        except OSError as exc:
            raise FileSystemFailure(f"Couldn't create directory {directory}: {exc}") from exc
        logger.info("created directory %s", directory)
    return leaf
