"""Percentage normalisation across the center/project hierarchy."""

from __future__ import annotations

from typing import Mapping

from timesplit.core.schema import CostCenter
from timesplit.core.validation import DuplicateProjectError, OrphanedShareError, ZeroAllocationError

EPS = 1e-6


def normalize_percentages(values: Mapping[str, float], context: str = "allocation") -> tuple[dict[str, float], float]:
    """Rescale non-negative weights so they sum to 100.

    Negative weights count as zero. Returns the rescaled mapping together with
    the factor that was applied. Raises :class:`ZeroAllocationError` when
    nothing is left to distribute.
    """

    total = sum(max(0.0, value) for value in values.values())
    if total <= 0:
        raise ZeroAllocationError(context)
    factor = 100 / total
    normalized = {key: max(0.0, value) * factor for key, value in values.items()}
    return normalized, factor


def _weight(percentage: float, active: bool | None) -> float:
    return 0.0 if active is False else percentage


def expand_centers_to_projects(centers: list[CostCenter]) -> dict[str, float]:
    """Flatten center and project shares into one project -> percentage map."""

    center_weights = {center.id: _weight(center.percentage, center.active) for center in centers}
    normalized_centers, _ = normalize_percentages(center_weights, context="cost centers")

    percentages: dict[str, float] = {}
    seen: set[str] = set()
    for center in centers:
        center_share = normalized_centers.get(center.id, 0.0)
        project_weights: dict[str, float] = {}
        for project in center.projects:
            if project.id in seen:
                raise DuplicateProjectError(project.id)
            seen.add(project.id)
            project_weights[project.id] = _weight(project.percentage, project.active)

        project_total = sum(max(0.0, value) for value in project_weights.values())
        if center_share > EPS and project_total <= EPS:
            raise OrphanedShareError(center.label, center_share)

        if project_total <= EPS:
            for project_id in project_weights:
                percentages[project_id] = 0.0
            continue

        normalized_projects, _ = normalize_percentages(project_weights, context=f'projects of center "{center.label}"')
        for project_id, pct in normalized_projects.items():
            percentages[project_id] = center_share * pct / 100
    return percentages
