from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DayCode = Literal["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


class _WireModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class Project(_WireModel):
    id: str
    label: str
    percentage: float = Field(description="Share within the owning cost center")
    active: bool | None = None


class CostCenter(_WireModel):
    id: str
    label: str
    percentage: float = Field(description="Share of the whole week")
    projects: list[Project] = Field(min_length=1)
    active: bool | None = None


class WeekConfig(_WireModel):
    total_hours: float
    hours_per_day: float | None = None
    working_days: list[DayCode] = Field(min_length=1)
    rounding_step: float = Field(gt=0)
    min_chunk: float = Field(ge=0)
    max_projects_per_day: int = Field(ge=1)
    cooldown: int = Field(ge=0)

    @field_validator("working_days")
    @classmethod
    def _unique_days(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("working days must be unique")
        return value


class DistributionRequest(_WireModel):
    centers: list[CostCenter]
    week: WeekConfig
    random_seed: int | float | None = Field(default=None, description="Truncated to an unsigned 32-bit seed")


class DailyEntry(_WireModel):
    project_id: str
    hours: float


class DailySchedule(_WireModel):
    day: DayCode
    entries: list[DailyEntry] = Field(default_factory=list)
    total: float = 0.0


class Diagnostics(_WireModel):
    normalized_from: float | None = None
    weekly_drift: float | None = None
    daily_drift: float | None = None


class DistributionResult(_WireModel):
    weekly_totals: dict[str, float]
    daily_schedule: list[DailySchedule]
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)


class ProjectRef(_WireModel):
    id: str
    label: str
    center_id: str | None = None
    center_label: str | None = None


def project_refs(centers: list[CostCenter]) -> list[ProjectRef]:
    """Flatten centers into rendering refs, in request order."""

    return [
        ProjectRef(id=project.id, label=project.label, center_id=center.id, center_label=center.label)
        for center in centers
        for project in center.projects
    ]


def center_totals(centers: list[CostCenter], weekly_totals: dict[str, float]) -> dict[str, float]:
    """Roll weekly project hours up to their cost centers, keyed by center id."""

    return {
        center.id: round(sum(weekly_totals.get(project.id, 0.0) for project in center.projects), 6)
        for center in centers
    }


class StoredPreferences(_WireModel):
    """Last-used inputs a caller may keep between sessions."""

    centers: list[CostCenter]
    week: WeekConfig
    random_seed: int | float | None = None
    language: str | None = None
