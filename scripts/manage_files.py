#!/usr/bin/env python3
"""Maintain the species/bioproject markdown tree for WormBase ParaSite genomes.

Provide a directory structure for static files for every genome in the core
databases, creating new directories where they do not yet exist:

    python3 scripts/manage_files.py --core-dbs core_dbs.txt

List expected markdown files that are missing for published genomes (those on
the web site):

    python3 scripts/manage_files.py --core-dbs core_dbs.txt --find-missing

Write missing or empty markdown files from the genome page content:

    python3 scripts/manage_files.py --core-dbs core_dbs.txt --create-missing

Create placeholder markdown files for unpublished genomes (core database but
no page yet), i.e. the files needed for the next release:

    python3 scripts/manage_files.py \\
      --core-db-command "mysql-ps-staging -Ne 'SHOW DATABASES'" \\
      --placeholders --report reports/placeholders.json

PARASITE_VERSION, ENSEMBL_VERSION and WORMBASE_VERSION must be set.

Paths found or created are printed to stdout, one per line; log messages go
to stderr.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from parasite_docs.config import DEFAULT_ROOT_DIR, Settings
from parasite_docs.driver import Modes, process_entities
from parasite_docs.enumerator import (
    core_db_pattern,
    iter_entities,
    list_core_databases,
    read_core_database_list,
)
from parasite_docs.errors import ParasiteDocsError
from parasite_docs.fetch import PageFetcher
from parasite_docs.io_utils import save_json

log = logging.getLogger("manage_files")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Maintain the species/bioproject markdown documentation tree."
    )
    parser.add_argument(
        "--root-dir",
        type=Path,
        default=None,
        help=f'Root of the species/bioproject directory structure (default: "{DEFAULT_ROOT_DIR}")',
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--core-dbs",
        default=None,
        help="File listing core database names, one per line ('-' for stdin)",
    )
    source.add_argument(
        "--core-db-command",
        default=None,
        help="Command whose output lists core database names, one per line",
    )
    parser.add_argument(
        "--find-missing",
        action="store_true",
        help="Find missing markdown files for published genomes",
    )
    parser.add_argument(
        "--create-missing",
        action="store_true",
        help="Create missing markdown files for published genomes from website content",
    )
    parser.add_argument(
        "--placeholders",
        action="store_true",
        help="Create placeholder markdown files for unpublished genomes",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Genome page base URL (default: PARASITE_DOCS_BASE_URL or the ParaSite site)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Fetch timeout in seconds (default: PARASITE_DOCS_TIMEOUT or 60)",
    )
    parser.add_argument(
        "--verify-ssl",
        action="store_true",
        help="Verify server certificates when fetching genome pages",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Optional JSON path for the run summary",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser


def print_path(path: Path) -> None:
    print(path, flush=True)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        settings = Settings.from_env().with_overrides(
            root_dir=args.root_dir,
            base_url=args.base_url,
            timeout=args.timeout,
        )
        if args.core_dbs is not None:
            db_names = read_core_database_list(args.core_dbs)
        else:
            db_names = list_core_databases(args.core_db_command)
        log.info("Read %d core database name(s)", len(db_names))

        pattern = core_db_pattern(settings.parasite_version, settings.ensembl_version)
        modes = Modes(
            find_missing=args.find_missing,
            create_missing=args.create_missing,
            placeholders=args.placeholders,
        )
        fetcher = PageFetcher(timeout=settings.timeout, verify_ssl=args.verify_ssl)
        summary = process_entities(
            iter_entities(db_names, pattern),
            root_dir=settings.root_dir,
            fetcher=fetcher,
            base_url=settings.base_url,
            modes=modes,
            on_path=print_path,
        )
    except (ParasiteDocsError, OSError) as exc:
        log.error("%s", exc)
        return 1

    log.info(
        "Processed %d genome(s): %d published, %d unpublished, %d skipped",
        summary.entities,
        len(summary.published),
        len(summary.not_published),
        len(summary.skipped),
    )
    if args.report is not None:
        report = {
            "root_dir": str(settings.root_dir),
            "parasite_version": settings.parasite_version,
            "ensembl_version": settings.ensembl_version,
            "wormbase_version": settings.wormbase_version,
            "modes": {
                "find_missing": modes.find_missing,
                "create_missing": modes.create_missing,
                "placeholders": modes.placeholders,
            },
            **summary.to_dict(),
        }
        save_json(report, args.report)
        log.info("Wrote run summary to %s", args.report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
