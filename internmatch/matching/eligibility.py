"""Application policy for annotated postings.

Reads only the match tier; scoring knows nothing about eligibility.
"""

from internmatch.config import APPLY_MIN_TIER
from internmatch.schemas.internship import AnnotatedPosting
from internmatch.schemas.match import MatchTier


def can_apply(target: AnnotatedPosting | MatchTier | str) -> bool:
    """Check whether a student may apply to a posting.

    Args:
        target: Annotated posting, tier, or tier label.

    Returns:
        True for Alta and Perfecta, False otherwise.
    """
    if isinstance(target, AnnotatedPosting):
        tier = target.match_tier
    else:
        tier = MatchTier(target)
    return tier >= MatchTier(APPLY_MIN_TIER)


def eligible_postings(postings: list[AnnotatedPosting]) -> list[AnnotatedPosting]:
    """Keep the postings the student may apply to, in their original order."""
    return [posting for posting in postings if can_apply(posting)]
