"""Listing filters for annotated postings."""

import re

from rapidfuzz import fuzz

from internmatch.config import (
    DURATION_BUCKETS,
    OPEN_ENDED_DURATION,
    REMOTE_KEYWORDS,
    SEARCH_MATCH_THRESHOLD,
)
from internmatch.schemas.internship import AnnotatedPosting
from internmatch.schemas.match import MatchTier

_MONTHS_PATTERN = re.compile(r"(\d+)\s*(\+)?\s*mes")


def filter_by_tier(
    postings: list[AnnotatedPosting],
    tier: MatchTier | str | None,
) -> list[AnnotatedPosting]:
    """Keep postings in exactly the given tier.

    Args:
        postings: Annotated postings.
        tier: Tier or tier label (None means no filter).

    Returns:
        List of postings in that tier.
    """
    if tier is None:
        return postings

    wanted = MatchTier(tier)
    return [posting for posting in postings if posting.match_tier == wanted]


def filter_by_career(
    postings: list[AnnotatedPosting],
    career: str | None,
) -> list[AnnotatedPosting]:
    """Keep postings that accept the given career."""
    if not career:
        return postings

    return [posting for posting in postings if career in posting.careers]


def filter_by_area(
    postings: list[AnnotatedPosting],
    area: str | None,
) -> list[AnnotatedPosting]:
    """Keep postings in the given area (case-insensitive)."""
    if not area:
        return postings

    area_lower = area.lower()
    return [posting for posting in postings if (posting.area or "").lower() == area_lower]


def filter_by_remote(
    postings: list[AnnotatedPosting],
    remote_only: bool,
) -> list[AnnotatedPosting]:
    """Keep remote postings when remote_only is set.

    A posting is remote when its location or modality says so.
    """
    if not remote_only:
        return postings

    results = []
    for posting in postings:
        location = (posting.location or "").lower()
        modality = (posting.modality or "").lower()

        if any(keyword in location or keyword in modality for keyword in REMOTE_KEYWORDS):
            results.append(posting)

    return results


def filter_by_language(
    postings: list[AnnotatedPosting],
    language: str | None,
) -> list[AnnotatedPosting]:
    """Keep postings that require the given language."""
    if not language:
        return postings

    return [posting for posting in postings if language in posting.required_languages]


def filter_by_year(
    postings: list[AnnotatedPosting],
    year: int | None,
) -> list[AnnotatedPosting]:
    """Keep postings open to students in the given year or earlier."""
    if year is None:
        return postings

    return [posting for posting in postings if posting.min_year <= year]


def _duration_months(duration: str) -> tuple[int, bool] | None:
    """Month count in a free-text duration and whether it is open-ended ('6+')."""
    found = _MONTHS_PATTERN.search(duration)
    if found is None:
        return None
    return int(found.group(1)), bool(found.group(2))


def filter_by_duration(
    postings: list[AnnotatedPosting],
    duration: str | None,
) -> list[AnnotatedPosting]:
    """Keep postings whose duration falls in the given bucket.

    Buckets are the listing page options ('1-3 meses', '4-6 meses',
    '6+ meses', 'Indefinido'). Durations are free text, so the month count
    is read from it; postings without one ('A convenir') never match a
    month bucket.

    Raises:
        ValueError: If the bucket is not one of the listing options.
    """
    wanted = (duration or "").strip().lower()
    if not wanted or wanted == "any":
        return postings

    if wanted == OPEN_ENDED_DURATION:
        return [
            posting for posting in postings
            if OPEN_ENDED_DURATION in (posting.duration or "").lower()
        ]

    buckets = {name.lower(): bounds for name, bounds in DURATION_BUCKETS.items()}
    if wanted not in buckets:
        raise ValueError(f"Unknown duration: {duration}")
    low, high = buckets[wanted]

    results = []
    for posting in postings:
        parsed = _duration_months((posting.duration or "").lower())
        if parsed is None:
            continue
        months, open_ended = parsed
        if months < low:
            continue
        if high is not None and (open_ended or months > high):
            continue
        results.append(posting)

    return results


def filter_by_search_term(
    postings: list[AnnotatedPosting],
    search_term: str | None,
    threshold: int = SEARCH_MATCH_THRESHOLD,
) -> list[AnnotatedPosting]:
    """Keep postings whose title or company fuzzily contains the term.

    Args:
        postings: Annotated postings.
        search_term: Keyword to look for (None or blank means no filter).
        threshold: Minimum fuzzy match score (0-100).

    Returns:
        List of postings matching the term.
    """
    if not search_term or not search_term.strip():
        return postings

    term = search_term.strip().lower()
    results = []
    for posting in postings:
        text = f"{posting.title or ''} {posting.company or ''}".lower()
        if fuzz.partial_ratio(term, text) >= threshold:
            results.append(posting)

    return results


def sort_by_score(
    postings: list[AnnotatedPosting],
    descending: bool = True,
) -> list[AnnotatedPosting]:
    """Sort postings by match score. Ties keep their listing order."""
    return sorted(postings, key=lambda p: p.match_score, reverse=descending)


def apply_filters(
    postings: list[AnnotatedPosting],
    tier: MatchTier | str | None = None,
    career: str | None = None,
    area: str | None = None,
    remote_only: bool = False,
    language: str | None = None,
    year: int | None = None,
    duration: str | None = None,
    search_term: str | None = None,
    search_threshold: int = SEARCH_MATCH_THRESHOLD,
) -> list[AnnotatedPosting]:
    """Apply all listing filters, preserving order.

    Args:
        postings: Annotated postings.
        tier: Exact tier to keep.
        career: Career the posting must accept.
        area: Area identifier.
        remote_only: Keep only remote postings.
        language: Language the posting must require.
        year: Student year the posting must be open to.
        duration: Duration bucket (e.g. "4-6 meses").
        search_term: Keyword matched against title and company.
        search_threshold: Minimum fuzzy score for the keyword.

    Returns:
        List of postings passing every filter.
    """
    postings = filter_by_tier(postings, tier)
    postings = filter_by_career(postings, career)
    postings = filter_by_area(postings, area)
    postings = filter_by_remote(postings, remote_only)
    postings = filter_by_language(postings, language)
    postings = filter_by_year(postings, year)
    postings = filter_by_duration(postings, duration)
    # Fuzzy search last, it is the only non-trivial filter
    postings = filter_by_search_term(postings, search_term, search_threshold)

    return postings
