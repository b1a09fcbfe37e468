"""Service layer for InternMatch listings."""

from internmatch.services.match_service import recommend, recommend_from_files

__all__ = [
    "recommend",
    "recommend_from_files",
]
