"""Error kinds shared across the documentation file manager.

Kinds:
    InvalidArgumentError - malformed inputs to a call; never retried
    ParseFailure         - a page could not be tokenized; the entity is skipped
    FetchError           - transport failure other than "not found"
    FileSystemFailure    - directory, marker or content write failed; aborts
    ConfigError          - required environment configuration is missing
    EnumerationError     - the core database listing could not be produced

"Not found" has no exception: a missing page is a normal outcome
(see ``fetch.PageNotFound``), not an exception.
"""
from __future__ import annotations


class ParasiteDocsError(Exception):
    """Base class for all errors raised by parasite_docs."""


class InvalidArgumentError(ParasiteDocsError, ValueError):
    """Raised when a call receives malformed arguments."""


class ParseFailure(ParasiteDocsError):
    """Raised when page markup cannot be interpreted."""


class FetchError(ParasiteDocsError):
    """Raised when a page fetch fails for any reason other than 404."""


class FileSystemFailure(ParasiteDocsError, OSError):
    """Raised when the documentation tree cannot be created or written."""


class ConfigError(ParasiteDocsError):
    """Raised when required configuration is missing or malformed."""


class EnumerationError(ParasiteDocsError):
    """Raised when core database names cannot be listed."""
