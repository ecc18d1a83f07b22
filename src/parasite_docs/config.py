"""Run configuration from environment variables.

Required (release identifiers, all non-empty):
    PARASITE_VERSION, ENSEMBL_VERSION, WORMBASE_VERSION

Optional:
    PARASITE_DOCS_BASE_URL  - genome page base URL
    PARASITE_DOCS_TIMEOUT   - fetch timeout in seconds
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from parasite_docs.errors import ConfigError
from parasite_docs.fetch import DEFAULT_TIMEOUT
from parasite_docs.naming import DEFAULT_BASE_URL

REQUIRED_ENV: tuple[str, ...] = ("PARASITE_VERSION", "ENSEMBL_VERSION", "WORMBASE_VERSION")
DEFAULT_ROOT_DIR = Path("./species")


@dataclass(frozen=True, slots=True)
class Settings:
    parasite_version: str
    ensembl_version: str
    wormbase_version: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    root_dir: Path = DEFAULT_ROOT_DIR

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        missing = [name for name in REQUIRED_ENV if not env.get(name, "").strip()]
        if missing:
            raise ConfigError(
                f"{', '.join(missing)} environment variable(s) not defined "
                f"({', '.join(REQUIRED_ENV)} all required)"
            )

        raw_timeout = env.get("PARASITE_DOCS_TIMEOUT", "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError as exc:
            raise ConfigError(f"PARASITE_DOCS_TIMEOUT must be a number, got {raw_timeout!r}") from exc
        if timeout <= 0:
            raise ConfigError(f"PARASITE_DOCS_TIMEOUT must be positive, got {timeout}")

        return cls(
            parasite_version=env["PARASITE_VERSION"].strip(),
            ensembl_version=env["ENSEMBL_VERSION"].strip(),
            wormbase_version=env["WORMBASE_VERSION"].strip(),
            base_url=_with_trailing_slash(env.get("PARASITE_DOCS_BASE_URL", "").strip() or DEFAULT_BASE_URL),
            timeout=timeout,
        )

    def with_overrides(
        self,
        *,
        root_dir: Path | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> Settings:
        """Apply command-line overrides; None leaves a field unchanged."""
        changes: dict[str, object] = {}
        if root_dir is not None:
            changes["root_dir"] = root_dir
        if base_url is not None:
            changes["base_url"] = _with_trailing_slash(base_url)
        if timeout is not None:
            if timeout <= 0:
                raise ConfigError(f"timeout must be positive, got {timeout}")
            changes["timeout"] = timeout
        return replace(self, **changes)


def _with_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"
