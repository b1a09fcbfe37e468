"""Match service for building a student's internship listing.

This service handles:
- Loading the student profile and stored postings from snapshot files
- Annotating every posting with its match score and tier
- Applying listing filters and ordering by score
"""

import logging
from pathlib import Path
from typing import Any

from internmatch.data.loader import load_postings, load_student
from internmatch.matching.eligibility import can_apply
from internmatch.matching.filter import apply_filters, sort_by_score
from internmatch.matching.scorer import annotate
from internmatch.schemas.internship import AnnotatedPosting, InternshipPosting
from internmatch.schemas.match import MatchTier
from internmatch.schemas.student import StudentProfile

logger = logging.getLogger(__name__)


def recommend(
    student: StudentProfile,
    postings: list[InternshipPosting],
    tier: MatchTier | str | None = None,
    career: str | None = None,
    area: str | None = None,
    remote_only: bool = False,
    language: str | None = None,
    year: int | None = None,
    duration: str | None = None,
    search_term: str | None = None,
    top_n: int | None = None,
    sort: bool = True,
) -> list[AnnotatedPosting]:
    """Annotate, filter and rank postings for a student.

    Args:
        student: Student profile snapshot.
        postings: Postings to consider.
        tier: Exact tier to keep.
        career: Career the posting must accept.
        area: Area identifier.
        remote_only: Keep only remote postings.
        language: Language the posting must require.
        year: Student year the posting must be open to.
        duration: Duration bucket (e.g. "4-6 meses").
        search_term: Keyword matched against title and company.
        top_n: Maximum number of results (None for all).
        sort: Order by match score, best first. Otherwise keep listing order.

    Returns:
        List of annotated postings.

    Raises:
        ValueError: If top_n is negative or the duration bucket is unknown.
    """
    if top_n is not None and top_n < 0:
        raise ValueError(f"top_n must be zero or positive, got {top_n}")

    annotated = annotate(student, postings)
    logger.info(f"Annotated {len(annotated)} postings")

    results = apply_filters(
        annotated,
        tier=tier,
        career=career,
        area=area,
        remote_only=remote_only,
        language=language,
        year=year,
        duration=duration,
        search_term=search_term,
    )
    logger.info(f"{len(results)} postings passed listing filters")

    if sort:
        results = sort_by_score(results)

    if top_n is not None:
        results = results[:top_n]

    return results


def recommend_from_files(
    student_path: Path,
    postings_path: Path,
    **filters: Any,
) -> tuple[dict[str, Any], list[AnnotatedPosting]]:
    """Build a listing from the student and postings snapshot files.

    Malformed postings are skipped and counted rather than failing the listing.

    Args:
        student_path: Path to the student JSON object.
        postings_path: Path to the postings JSON array.
        **filters: Keyword arguments forwarded to recommend().

    Returns:
        Tuple of (stats dict, list of annotated postings).
    """
    student = load_student(student_path)
    postings, skipped = load_postings(postings_path)

    results = recommend(student, postings, **filters)

    stats = {
        "postings_loaded": len(postings),
        "postings_skipped": len(skipped),
        "postings_matched": len(results),
        "eligible": sum(1 for posting in results if can_apply(posting)),
    }
    logger.info(f"Listing complete: {stats}")
    return stats, results
