"""Greedy day-by-day packing of weekly project hours.

Each working day picks a handful of projects from the remaining ledger,
splits the day's target between them in proportion to what they are still
owed, and then runs three reconciliation passes so the day closes on its
target whenever the balances allow it:

1. :func:`close_gap_stepwise` nudges allocations by at most one rounding step
   before balances are enforced, then forces any residual onto the first
   chosen project.
2. :func:`close_gap_freely` runs after :func:`clamp_to_balances` and moves
   arbitrary fractional amounts within each project's remaining room.
3. :func:`round_for_display` rounds to cents and pushes the cent residual
   onto the largest entry.

A day that cannot reach its target is not an error: it reports a smaller
total and the shortfall shows up in the daily drift.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Sequence, TypeVar

from timesplit.core.rng import LcgRandom
from timesplit.core.rounding import fix, quantize, round_to_step
from timesplit.core.schema import DailyEntry, DailySchedule, WeekConfig
from timesplit.domain import RemainingLedger

EPS = 1e-6
JITTER = 0.01
DAY_MAX_ITERATIONS = 500

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class DayPlan:
    """Per-day parameters shared by every day of one week."""

    target: float
    rounding_step: float
    min_chunk: float
    max_projects_per_day: int
    cooldown: int

    @classmethod
    def from_week(cls, week: WeekConfig) -> "DayPlan":
        target = week.hours_per_day
        if target is None:
            target = week.total_hours / len(week.working_days)
        return cls(
            target=target,
            rounding_step=week.rounding_step,
            min_chunk=week.min_chunk,
            max_projects_per_day=week.max_projects_per_day,
            cooldown=week.cooldown,
        )


def order_candidates(ledger: RemainingLedger, rng: LcgRandom) -> list[str]:
    """Open projects, largest balance first, with a little jitter to break ties."""

    jittered = [(pid, hours + rng.random() * JITTER) for pid, hours in ledger.open_balances()]
    jittered.sort(key=lambda item: item[1], reverse=True)
    return [pid for pid, _ in jittered]


def rotate(items: Sequence[T], offset: int) -> list[T]:
    if not items:
        return list(items)
    shift = offset % len(items)
    return list(items[shift:]) + list(items[:shift])


def rotation_offset(rng: LcgRandom, index: int, cooldown: int) -> int:
    return math.floor(rng.random() * (cooldown + 1)) + index * cooldown


def select_projects(
    rotated: Sequence[str],
    ordered: Sequence[str],
    ledger: RemainingLedger,
    target: float,
    max_projects: int,
) -> list[str]:
    """Walk the rotated list, then top up from the plain ordering if short.

    The top-up may go one project past ``max_projects``: the cap gives way
    when the chosen projects cannot cover the day otherwise.
    """

    chosen: list[str] = []
    capacity = 0.0
    for pid in rotated:
        if len(chosen) >= max_projects and capacity >= target - EPS:
            break
        chosen.append(pid)
        capacity += ledger.owed(pid)
        if capacity >= target - EPS or len(chosen) >= max_projects:
            break

    if capacity < target - EPS:
        for pid in ordered:
            if pid in chosen:
                continue
            chosen.append(pid)
            capacity += ledger.owed(pid)
            if len(chosen) >= max_projects or capacity >= target - EPS:
                break
    return chosen


def split_proportionally(
    chosen: Sequence[str],
    ledger: RemainingLedger,
    target: float,
    step: float,
    min_chunk: float,
) -> dict[str, float]:
    total_owed = sum(ledger.owed(pid) for pid in chosen)
    entries: dict[str, float] = {}
    for pid in chosen:
        owed = ledger.owed(pid)
        share = owed / total_owed * target if total_owed > 0 else 0.0
        hours = round_to_step(share, step)
        if 0 < hours < min_chunk and owed >= min_chunk:
            hours = min_chunk
        entries[pid] = min(hours, owed)
    return entries


def close_gap_stepwise(
    entries: Mapping[str, float],
    chosen: Sequence[str],
    ledger: RemainingLedger,
    target: float,
    step: float,
) -> dict[str, float]:
    """Close the gap to ``target`` in moves of at most one rounding step.

    Runs at most ``DAY_MAX_ITERATIONS`` moves. Whatever gap is left after that
    is put on the first chosen project, even past its balance;
    :func:`clamp_to_balances` deals with the overshoot.
    """

    result = dict(entries)
    drift = fix(target - sum(result.values()))
    iterations = 0
    while abs(drift) > EPS and iterations < DAY_MAX_ITERATIONS:
        iterations += 1
        if drift > 0:
            candidate = next((pid for pid in chosen if ledger.owed(pid) - result.get(pid, 0.0) > EPS), None)
            if candidate is None:
                break
            amount = min(step, drift, ledger.owed(candidate) - result.get(candidate, 0.0))
            result[candidate] = fix(result.get(candidate, 0.0) + amount)
        else:
            candidate = next((pid for pid in chosen if result.get(pid, 0.0) - step >= -EPS), None)
            if candidate is None:
                break
            amount = min(step, -drift, result.get(candidate, 0.0))
            result[candidate] = fix(result.get(candidate, 0.0) - amount)
        drift = fix(target - sum(result.values()))

    residual = fix(target - sum(result.values()))
    if abs(residual) > EPS and chosen:
        first = chosen[0]
        result[first] = fix(result.get(first, 0.0) + residual)
    return result


def clamp_to_balances(entries: Mapping[str, float], ledger: RemainingLedger) -> dict[str, float]:
    return {pid: min(max(hours, 0.0), ledger.owed(pid)) for pid, hours in entries.items()}


def close_gap_freely(
    entries: Mapping[str, float],
    chosen: Sequence[str],
    ledger: RemainingLedger,
    target: float,
) -> dict[str, float]:
    """Close the gap to ``target`` with any amount that fits each balance."""

    result = dict(entries)
    drift = fix(target - sum(result.values()))
    iterations = 0
    while abs(drift) > EPS and iterations < DAY_MAX_ITERATIONS:
        iterations += 1
        if drift > 0:
            candidate = next((pid for pid in chosen if ledger.owed(pid) - result.get(pid, 0.0) > EPS), None)
            if candidate is None:
                break
            room = ledger.owed(candidate) - result.get(candidate, 0.0)
            result[candidate] = fix(result.get(candidate, 0.0) + min(drift, room))
        else:
            candidate = next((pid for pid in chosen if result.get(pid, 0.0) > EPS), None)
            if candidate is None:
                break
            result[candidate] = fix(result.get(candidate, 0.0) - min(-drift, result.get(candidate, 0.0)))
        drift = fix(target - sum(result.values()))
    return result


def round_for_display(entries: Mapping[str, float], target: float) -> tuple[list[DailyEntry], float]:
    """Round to cents and make the cents add up to what was actually allocated.

    When the entries reach ``target`` the cents add up to the cent-rounded
    target. A short day keeps its shortfall: only rounding noise is moved.
    """

    allocated = fix(sum(entries.values(), 0.0))
    goal = target if abs(allocated - target) <= EPS else allocated
    displayed = {pid: quantize(hours) for pid, hours in entries.items() if hours > EPS}
    total = sum(displayed.values(), 0.0)
    diff = round(quantize(goal) - total, 2)
    if abs(diff) >= 0.01 and displayed:
        by_size = sorted(displayed, key=lambda pid: displayed[pid], reverse=True)
        candidate = next((pid for pid in by_size if displayed[pid] + diff >= -EPS), None)
        if candidate is not None:
            displayed[candidate] = round(displayed[candidate] + diff, 2)
            total = sum(displayed.values(), 0.0)
    rows = [DailyEntry(project_id=pid, hours=hours) for pid, hours in displayed.items()]
    return rows, round(total, 2)


def allocate_day(
    day: str,
    index: int,
    ledger: RemainingLedger,
    plan: DayPlan,
    rng: LcgRandom,
) -> tuple[DailySchedule, RemainingLedger]:
    """Schedule one day and return it with the ledger left for the next day."""

    ordered = order_candidates(ledger, rng)
    rotated = rotate(ordered, rotation_offset(rng, index, plan.cooldown))
    chosen = select_projects(rotated, ordered, ledger, plan.target, plan.max_projects_per_day)

    entries = split_proportionally(chosen, ledger, plan.target, plan.rounding_step, plan.min_chunk)
    entries = close_gap_stepwise(entries, chosen, ledger, plan.target, plan.rounding_step)
    entries = clamp_to_balances(entries, ledger)
    entries = close_gap_freely(entries, chosen, ledger, plan.target)

    consumed = {pid: hours for pid, hours in entries.items() if hours > EPS}
    rows, total = round_for_display(consumed, plan.target)
    return DailySchedule(day=day, entries=rows, total=total), ledger.consume(consumed)


def distribute_daily(
    weekly_hours: Mapping[str, float],
    week: WeekConfig,
    rng: LcgRandom,
) -> tuple[list[DailySchedule], float]:
    """Spread weekly totals over the working days.

    Returns the schedule and the daily drift: expected weekly hours minus the
    sum of the day totals.
    """

    plan = DayPlan.from_week(week)
    ledger = RemainingLedger.from_weekly(weekly_hours)
    schedule: list[DailySchedule] = []
    for index, day in enumerate(week.working_days):
        entry, ledger = allocate_day(day, index, ledger, plan, rng)
        schedule.append(entry)

    expected = fix(plan.target * len(week.working_days))
    drift = fix(expected - sum(entry.total for entry in schedule))
    return schedule, drift
