"""Opportunity matching between a student profile and internship postings.

A posting is scored as the share of its requirements the student meets:

- career: the posting accepts the student's career (always evaluated)
- year: the student reached the posting's minimum year (always evaluated)
- one point per required soft skill, technical skill and language the
  student holds

Career and year always count towards the total, so the denominator is
never zero. Categories with no requirements add nothing to either side.
"""

from collections.abc import Iterable

from internmatch.config import HIGH_THRESHOLD, MEDIUM_THRESHOLD, PERFECT_THRESHOLD
from internmatch.schemas.internship import AnnotatedPosting, InternshipPosting
from internmatch.schemas.match import MatchResult, MatchTier
from internmatch.schemas.student import StudentProfile

_MATCH_FIELDS = ("match_score", "match_tier", "matchScore", "matchTier")


def _percentage(points: int, total: int) -> int:
    """Round 100 * points / total to the nearest integer, ties upward.

    Integer arithmetic avoids both float error and round()'s ties-to-even.
    """
    return (200 * points + total) // (2 * total)


def _missing(required: frozenset[str], held: Iterable[str]) -> list[str]:
    return sorted(required.difference(held))


def classify(score: int) -> MatchTier:
    """Map a match percentage to its tier.

    Lower bounds are inclusive: 80 is Perfecta, 60 is Alta, 30 is Media.
    """
    if score >= PERFECT_THRESHOLD:
        return MatchTier.PERFECTA
    if score >= HIGH_THRESHOLD:
        return MatchTier.ALTA
    if score >= MEDIUM_THRESHOLD:
        return MatchTier.MEDIA
    return MatchTier.BAJA


def evaluate(student: StudentProfile, posting: InternshipPosting) -> MatchResult:
    """Score a posting for a student and keep the per-dimension breakdown.

    Args:
        student: Student profile snapshot.
        posting: Posting to evaluate.

    Returns:
        MatchResult with score, tier and the requirements the student misses.
    """
    career_match = student.career in posting.careers
    year_match = student.current_year >= posting.min_year

    # Career and year are unconditional, so total >= 2
    total = 2
    points = int(career_match) + int(year_match)

    dimensions = (
        (posting.required_soft_skills, student.soft_skills),
        (posting.required_technical_skills, student.technical_skills),
        (posting.required_languages, student.languages),
    )
    for required, held in dimensions:
        total += len(required)
        points += len(required.intersection(held))

    percentage = _percentage(points, total)
    return MatchResult(
        score=percentage,
        tier=classify(percentage),
        points=points,
        total=total,
        career_match=career_match,
        year_match=year_match,
        missing_soft_skills=_missing(posting.required_soft_skills, student.soft_skills),
        missing_technical_skills=_missing(
            posting.required_technical_skills, student.technical_skills
        ),
        missing_languages=_missing(posting.required_languages, student.languages),
    )


def score(student: StudentProfile, posting: InternshipPosting) -> int:
    """Match percentage (0-100) of a posting for a student."""
    return evaluate(student, posting).score


def annotate(
    student: StudentProfile,
    postings: Iterable[InternshipPosting],
) -> list[AnnotatedPosting]:
    """Annotate every posting with its match score and tier.

    Order and length are preserved and nothing is filtered. Each result is a
    new record; existing match fields on the input are overwritten.

    Args:
        student: Student profile snapshot.
        postings: Postings to annotate.

    Returns:
        List of AnnotatedPosting, one per input posting.
    """
    annotated = []
    for posting in postings:
        result = evaluate(student, posting)
        data = posting.model_dump()
        for key in _MATCH_FIELDS:
            data.pop(key, None)
        data["match_score"] = result.score
        data["match_tier"] = result.tier
        annotated.append(AnnotatedPosting.model_validate(data))
    return annotated
