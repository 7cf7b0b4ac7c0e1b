from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from timesplit.core.validation import RoundingStepError

EPS = 1e-6
WEEKLY_MAX_ITERATIONS = 1000


@dataclass(slots=True)
class WeeklyHours:
    hours: dict[str, float]
    drift: float


def fix(value: float, digits: int = 6) -> float:
    """Trim float noise the way the ledger compares values."""

    return round(value, digits)


def quantize(value: float) -> float:
    """Half-up rounding to cents, used for displayed hours."""

    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round_to_step(value: float, step: float) -> float:
    steps = value / step
    if not math.isfinite(steps):
        raise RoundingStepError(step, value)
    # the epsilon pushes exact halves up
    return fix(math.floor(steps + EPS + 0.5) * step)


def reconcile_weekly_drift(
    rounded: Mapping[str, float],
    raw: Mapping[str, float],
    target_total: float,
    step: float,
) -> dict[str, float]:
    """Move rounded hours one step at a time until they sum to ``target_total``.

    Shortfalls go to the project with the largest unrealised headroom
    (raw minus rounded); surpluses come off the largest rounded value that can
    still give up a full step. Stops within ``EPS``, when no project qualifies,
    or after ``WEEKLY_MAX_ITERATIONS`` moves.
    """

    result = dict(rounded)
    diff = fix(target_total - sum(result.values()))
    iterations = 0
    while abs(diff) > EPS and iterations < WEEKLY_MAX_ITERATIONS:
        iterations += 1
        if diff > 0:
            by_headroom = sorted(raw, key=lambda pid: raw[pid] - result.get(pid, 0.0), reverse=True)
            candidate = next((pid for pid in by_headroom if raw[pid] - result.get(pid, 0.0) > EPS), None)
            if candidate is None:
                break
            result[candidate] = fix(result[candidate] + min(step, diff))
        else:
            by_size = sorted(raw, key=lambda pid: result.get(pid, 0.0), reverse=True)
            candidate = next((pid for pid in by_size if result.get(pid, 0.0) - step >= -EPS), None)
            if candidate is None:
                break
            result[candidate] = fix(result[candidate] - min(step, -diff))
        diff = fix(target_total - sum(result.values()))
    return result


def compute_weekly_hours(percentages: Mapping[str, float], total_hours: float, step: float) -> WeeklyHours:
    raw = {pid: pct / 100 * total_hours for pid, pct in percentages.items()}
    rounded = {pid: round_to_step(value, step) for pid, value in raw.items()}
    adjusted = reconcile_weekly_drift(rounded, raw, total_hours, step)
    drift = fix(total_hours - sum(adjusted.values()))
    return WeeklyHours(hours=adjusted, drift=drift)
