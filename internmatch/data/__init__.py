"""Loading of the portal's JSON snapshots into typed records."""

from internmatch.data.loader import (
    LoaderError,
    load_postings,
    load_student,
    parse_postings,
)

__all__ = [
    "LoaderError",
    "load_postings",
    "load_student",
    "parse_postings",
]
