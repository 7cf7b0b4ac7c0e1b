from __future__ import annotations

from collections import defaultdict
from pathlib import Path

import pandas as pd

from timesplit.core.schema import DailySchedule, ProjectRef


def _schedule_frame(schedule: list[DailySchedule], projects: list[ProjectRef]) -> pd.DataFrame:
    header = ["Day", *[project.label or project.id for project in projects], "Total"]
    totals: dict[str, float] = defaultdict(float)
    records: list[list[str]] = []
    for day in schedule:
        hours = {entry.project_id: entry.hours for entry in day.entries}
        for entry in day.entries:
            totals[entry.project_id] += entry.hours
        records.append(
            [day.day.upper(), *[f"{hours.get(project.id, 0.0):.2f}" for project in projects], f"{day.total:.2f}"]
        )
    records.append(
        [
            "Total",
            *[f"{totals.get(project.id, 0.0):.2f}" for project in projects],
            f"{sum(day.total for day in schedule):.2f}",
        ]
    )
    # labels may repeat across centers, so columns are positional
    return pd.DataFrame(records, columns=header)


def to_csv(schedule: list[DailySchedule], projects: list[ProjectRef]) -> str:
    """Render one row per day plus a closing ``Total`` row.

    Columns follow ``projects`` order. Labels with commas, quotes or newlines
    are quoted the usual CSV way.
    """

    frame = _schedule_frame(schedule, projects)
    return frame.to_csv(index=False, lineterminator="\n").rstrip("\n")


def export_schedule_csv(path: Path, schedule: list[DailySchedule], projects: list[ProjectRef]) -> Path:
    df = _schedule_frame(schedule, projects)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, lineterminator="\n")
    return path
