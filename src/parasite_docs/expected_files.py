"""Expected markdown file paths for a documentation directory."""
from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from parasite_docs.errors import InvalidArgumentError


def expected_paths(
    directory: Path | str,
    base_name: str,
    suffixes: Sequence[str],
    *,
    callback: Callable[[Path], None] | None = None,
) -> list[Path]:
    """List the files expected to exist in *directory*.

    Each path is ``directory / (base_name + suffix)``; output order follows
    *suffixes* exactly.

    Args:
        directory: Existing directory holding the files.
        base_name: File name stem, e.g. ``Acanthocheilonema_viteae``.
        suffixes: Suffixes appended to the stem, e.g. ``(".about.md",)``.
        callback: Optional visitor called with each path, in order.

    Raises:
        InvalidArgumentError: *directory* is not an existing directory,
            *base_name* is empty, or *suffixes* is empty.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise InvalidArgumentError(f"not an existing directory: {directory}")
    if not base_name:
        raise InvalidArgumentError("file name base is required")
    if isinstance(suffixes, str) or not suffixes:
        raise InvalidArgumentError("a non-empty list of expected suffixes is required")
    if not all(isinstance(s, str) for s in suffixes):
        raise InvalidArgumentError("expected suffixes must be strings")
    if callback is not None and not callable(callback):
        raise InvalidArgumentError("callback must be callable")

    paths = [directory / f"{base_name}{suffix}" for suffix in suffixes]
    if callback is not None:
        for path in paths:
            callback(path)
    return paths
