from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class StudentProfile(BaseModel):
    """Snapshot of a student's academic profile used for matching.

    Skill and language mappings go from identifier to proficiency level.
    Only the keys matter for matching; entries with an empty level are dropped.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )

    username: str | None = Field(default=None, description="Student registry number (legajo)")
    name: str | None = Field(default=None, description="Full name")
    career: str = Field(min_length=1, description="Career identifier (e.g., 'sistemas')")
    current_year: int = Field(gt=0, description="Year of study currently enrolled")
    soft_skills: dict[str, str] = Field(
        default_factory=dict,
        description="Soft skill identifier -> proficiency level",
    )
    technical_skills: dict[str, str] = Field(
        default_factory=dict,
        description="Technical skill identifier -> proficiency level",
    )
    languages: dict[str, str] = Field(
        default_factory=dict,
        description="Language identifier -> proficiency level",
    )

    @field_validator("career")
    @classmethod
    def _strip_career(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("career must not be blank")
        return value

    @field_validator("soft_skills", "technical_skills", "languages", mode="before")
    @classmethod
    def _drop_unset_levels(cls, value):
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            return value
        # Level labels are free text; anything truthy counts as possessed
        return {
            str(key): level if isinstance(level, str) else str(level)
            for key, level in value.items()
            if level
        }
