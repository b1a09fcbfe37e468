from enum import IntEnum

from pydantic import BaseModel, Field, field_serializer


class MatchTier(IntEnum):
    """Match tiers in ascending order.

    The integer values give the tier order (Baja < Media < Alta < Perfecta).
    Use _missing_ for case-insensitive label parsing (e.g., from stored listings).
    """

    BAJA = 0
    MEDIA = 1
    ALTA = 2
    PERFECTA = 3

    @property
    def label(self) -> str:
        """Display label as shown on the listing ("Perfecta", "Alta", ...)."""
        return self.name.capitalize()

    @classmethod
    def _missing_(cls, value):
        """Allow case-insensitive label lookup."""
        if isinstance(value, str):
            value_lower = value.strip().lower()
            for member in cls:
                if member.name.lower() == value_lower:
                    return member
        return None


class MatchResult(BaseModel):
    """Score breakdown for one student/posting pair."""

    score: int = Field(ge=0, le=100, description="Match percentage (0-100)")
    tier: MatchTier = Field(description="Tier derived from the score")
    points: int = Field(ge=0, description="Requirements met by the student")
    total: int = Field(ge=2, description="Requirements evaluated (career and year always count)")
    career_match: bool = Field(description="Whether the posting accepts the student's career")
    year_match: bool = Field(description="Whether the student reached the minimum year")
    missing_soft_skills: list[str] = Field(
        default_factory=list,
        description="Required soft skills the student lacks",
    )
    missing_technical_skills: list[str] = Field(
        default_factory=list,
        description="Required technical skills the student lacks",
    )
    missing_languages: list[str] = Field(
        default_factory=list,
        description="Required languages the student lacks",
    )

    @property
    def missing_skills(self) -> list[str]:
        return self.missing_soft_skills + self.missing_technical_skills + self.missing_languages

    @field_serializer("tier")
    def _serialize_tier(self, tier: MatchTier) -> str:
        return tier.label
