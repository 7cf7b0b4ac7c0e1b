from __future__ import annotations

from timesplit.core.schema import CostCenter, DailySchedule, ProjectRef, center_totals


def to_plaintext(schedule: list[DailySchedule], projects: list[ProjectRef]) -> str:
    labels = {project.id: project.label for project in projects}
    lines: list[str] = []
    for day in schedule:
        lines.append(f"{day.day.upper()} ({day.total:.2f}h):")
        for entry in day.entries:
            lines.append(f"  - {labels.get(entry.project_id, entry.project_id)}: {entry.hours:.2f}h")
    return "\n".join(lines)


def center_summary(centers: list[CostCenter], weekly_totals: dict[str, float]) -> str:
    """One line per center: weekly hours and their share of the week."""

    totals = center_totals(centers, weekly_totals)
    week = sum(totals.values())
    lines: list[str] = []
    for center in centers:
        hours = totals[center.id]
        share = hours / week * 100 if week > 0 else 0.0
        lines.append(f"{center.label or center.id}: {hours:.2f}h ({share:.2f}%)")
    return "\n".join(lines)
