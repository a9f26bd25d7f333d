"""
Report models for Orca

Defines the structure of the final interview report card and the
progress comparison between two reports.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


HR_CATEGORY = "HR & Introduction"
TECHNICAL_CATEGORY = "Technical Skills"
BEHAVIORAL_CATEGORY = "Behavioral & Situational"

REPORT_CATEGORIES: tuple[str, ...] = (
    HR_CATEGORY,
    TECHNICAL_CATEGORY,
    BEHAVIORAL_CATEGORY,
)


class ReportSection(BaseModel):
    """Score and feedback for one part of the interview."""

    model_config = ConfigDict(frozen=True)

    category: str
    score: float = Field(..., ge=0, le=10)
    feedback: str = ""


class ReportResource(BaseModel):
    """A learning resource suggested in the report."""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    description: str = ""


class ProgressComparison(BaseModel):
    """Model-written summary of progress since the previous interview."""

    model_config = ConfigDict(frozen=True)

    improvement_summary: str


class InterviewReport(BaseModel):
    """
    Complete interview report card.

    Field aliases match the JSON the interviewer model emits and the
    persisted history layout.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sections: list[ReportSection]
    overall_score: float = Field(..., ge=0, le=10, alias="overallScore")
    final_tip: str = Field(default="", alias="finalTip")
    suggested_resources: list[ReportResource] = Field(
        default_factory=list, alias="suggestedResources"
    )
    progress_comparison: ProgressComparison | None = None
    date: datetime

    @field_validator("sections")
    @classmethod
    def _three_known_sections(cls, sections: list[ReportSection]) -> list[ReportSection]:
        categories = [section.category for section in sections]
        if len(sections) != len(REPORT_CATEGORIES) or set(categories) != set(REPORT_CATEGORIES):
            raise ValueError(
                f"Expected one section for each of {list(REPORT_CATEGORIES)}, got {categories}"
            )
        return sections

    @field_validator("date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are stored as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def get_section(self, category: str) -> ReportSection | None:
        """Find the section for a category."""
        for section in self.sections:
            if section.category == category:
                return section
        return None

    def to_record(self) -> dict:
        """Serialize using the wire/persisted field names."""
        return self.model_dump(mode="json", by_alias=True)


class ReportComparison(BaseModel):
    """Score changes of a report relative to the previous one."""

    previous_date: datetime | None = None
    overall_delta: float = 0.0
    section_deltas: dict[str, float] = Field(default_factory=dict)

    @property
    def has_previous(self) -> bool:
        """Whether there was an earlier report to compare against."""
        return self.previous_date is not None
