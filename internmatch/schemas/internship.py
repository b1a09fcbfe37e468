from collections.abc import Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from internmatch.schemas.match import MatchTier


def _truthy_keys(value) -> set[str]:
    """Collapse a requirement given as flags, levels or a plain list into a set."""
    if value is None:
        return set()
    if isinstance(value, str):
        return {item.strip() for item in value.split(",") if item.strip()}
    if isinstance(value, Mapping):
        return {str(key).strip() for key, flag in value.items() if flag and str(key).strip()}
    return {str(item).strip() for item in value if item and str(item).strip()}


class InternshipPosting(BaseModel):
    """An internship posting published by a company.

    Requirement fields accept the portal's {identifier: flag} mappings and
    keep only the truthy entries, so matching iterates plain sets.
    Unknown fields are preserved as extras.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
        extra="allow",
    )

    id: str | None = Field(default=None, description="Unique identifier for the posting")
    title: str | None = Field(default=None, description="Position title")
    company: str | None = Field(default=None, description="Company name")
    location: str | None = Field(default=None, description="Location (e.g., 'Remoto', 'Resistencia, Chaco')")
    modality: str | None = Field(default=None, description="Work modality (remote, hybrid, on-site)")
    area: str | None = Field(default=None, description="Area identifier (e.g., 'dev-web')")
    duration: str | None = Field(default=None, description="Expected duration (e.g., '6 meses')")
    description: str | None = Field(default=None, description="Free-text description")
    careers: frozenset[str] = Field(
        min_length=1,
        description="Career identifiers accepted by the posting",
    )
    min_year: int = Field(gt=0, description="Minimum year of study required")
    required_soft_skills: frozenset[str] = Field(
        default_factory=frozenset,
        description="Soft skills the posting requires",
    )
    required_technical_skills: frozenset[str] = Field(
        default_factory=frozenset,
        description="Technical skills the posting requires",
    )
    required_languages: frozenset[str] = Field(
        default_factory=frozenset,
        description="Languages the posting requires",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_shadowed_names(cls, data):
        """Keep the alias when a record carries both a field's alias and its name.

        Otherwise the name would survive as an extra and shadow the field on dump.
        """
        if not isinstance(data, Mapping):
            return data
        shadowed = {
            name
            for name, field in cls.model_fields.items()
            if field.alias and field.alias != name and field.alias in data and name in data
        }
        if not shadowed:
            return data
        return {key: value for key, value in data.items() if key not in shadowed}

    @field_validator(
        "careers",
        "required_soft_skills",
        "required_technical_skills",
        "required_languages",
        mode="before",
    )
    @classmethod
    def _collect_required(cls, value):
        if isinstance(value, (str, Mapping, list, tuple, set, frozenset)) or value is None:
            return frozenset(_truthy_keys(value))
        return value

    @field_serializer(
        "careers",
        "required_soft_skills",
        "required_technical_skills",
        "required_languages",
        when_used="json",
    )
    def _serialize_sets(self, value: frozenset[str]) -> list[str]:
        return sorted(value)


class AnnotatedPosting(InternshipPosting):
    """A posting annotated with its match against the current student."""

    match_score: int = Field(ge=0, le=100, description="Match percentage (0-100)")
    match_tier: MatchTier = Field(description="Tier derived from match_score")

    @field_serializer("match_tier")
    def _serialize_tier(self, tier: MatchTier) -> str:
        return tier.label


class SkippedPosting(BaseModel):
    """A stored posting that could not be turned into an InternshipPosting."""

    index: int = Field(description="Position of the record in the source list")
    posting_id: str | None = Field(default=None, description="Record id, when readable")
    reason: str = Field(description="Why the record was skipped")
