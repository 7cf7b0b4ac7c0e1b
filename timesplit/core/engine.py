from __future__ import annotations

import logging

from timesplit.core.daily import distribute_daily
from timesplit.core.normalize import expand_centers_to_projects, normalize_percentages
from timesplit.core.rng import LcgRandom
from timesplit.core.rounding import compute_weekly_hours, fix
from timesplit.core.schema import Diagnostics, DistributionRequest, DistributionResult, WeekConfig

logger = logging.getLogger(__name__)


def effective_week(week: WeekConfig) -> WeekConfig:
    """Return a copy where ``hours_per_day`` and ``total_hours`` agree.

    ``hours_per_day`` wins when set; otherwise it is derived from
    ``total_hours``. The weekly total is always recomputed from it.
    """

    days = max(1, len(week.working_days))
    hours_per_day = week.hours_per_day if week.hours_per_day is not None else week.total_hours / days
    return week.model_copy(update={"hours_per_day": hours_per_day, "total_hours": fix(hours_per_day * days)})


def distribute_work(request: DistributionRequest) -> DistributionResult:
    """Allocate the week across projects and lay it out day by day.

    Raises :class:`~timesplit.core.validation.AllocationError` for requests that
    cannot be allocated; nothing is computed in that case.
    """

    week = effective_week(request.week)
    rng = LcgRandom(request.random_seed)
    logger.debug(
        "distributing %.2fh over %d days (%.2fh/day)",
        week.total_hours,
        len(week.working_days),
        week.hours_per_day,
    )

    project_percentages = expand_centers_to_projects(request.centers)
    normalized, factor = normalize_percentages(project_percentages, context="projects")
    logger.debug("project shares normalised with factor %.6f", factor)

    weekly = compute_weekly_hours(normalized, week.total_hours, week.rounding_step)
    if weekly.drift:
        logger.warning("weekly totals miss %.2fh by %.6fh", week.total_hours, weekly.drift)

    schedule, daily_drift = distribute_daily(weekly.hours, week, rng)
    if daily_drift:
        logger.warning("daily schedule misses the weekly target by %.6fh", daily_drift)

    return DistributionResult(
        weekly_totals=weekly.hours,
        daily_schedule=schedule,
        diagnostics=Diagnostics(
            normalized_from=factor,
            weekly_drift=weekly.drift,
            daily_drift=daily_drift,
        ),
    )
