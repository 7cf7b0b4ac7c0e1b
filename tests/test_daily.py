from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from timesplit.core.daily import (
    DayPlan,
    allocate_day,
    clamp_to_balances,
    close_gap_freely,
    close_gap_stepwise,
    distribute_daily,
    order_candidates,
    rotate,
    rotation_offset,
    round_for_display,
    select_projects,
    split_proportionally,
)
from timesplit.core.rng import LcgRandom
from timesplit.core.schema import WeekConfig
from timesplit.domain import RemainingLedger


def _week(days: list[str], hours_per_day: float, **overrides) -> WeekConfig:
    values = {
        "total_hours": hours_per_day * len(days),
        "hours_per_day": hours_per_day,
        "working_days": days,
        "rounding_step": 0.25,
        "min_chunk": 0.5,
        "max_projects_per_day": 3,
        "cooldown": 1,
    }
    values.update(overrides)
    return WeekConfig(**values)


def test_rotate():
    assert rotate([1, 2, 3], 1) == [2, 3, 1]
    assert rotate([1, 2, 3], 4) == [2, 3, 1]
    assert rotate([1, 2, 3], -1) == [3, 1, 2]
    assert rotate([], 3) == []


def test_order_candidates_prefers_larger_balances():
    ledger = RemainingLedger.from_weekly({"a": 1.0, "b": 5.0, "c": 0.0, "d": 3.0})
    assert order_candidates(ledger, LcgRandom(7)) == ["b", "d", "a"]


def test_select_stops_once_capacity_covers_target():
    ledger = RemainingLedger.from_weekly({"a": 1.0, "b": 1.0, "c": 10.0})
    chosen = select_projects(["c", "a", "b"], ["c", "a", "b"], ledger, 7, 2)
    assert chosen == ["c"]


def test_select_fallback_may_exceed_cap():
    ledger = RemainingLedger.from_weekly({"a": 1.0, "b": 1.0, "c": 10.0})
    chosen = select_projects(["a", "b", "c"], ["c", "a", "b"], ledger, 7, 2)
    assert chosen == ["a", "b", "c"]


def test_split_is_proportional_to_balances():
    ledger = RemainingLedger.from_weekly({"a": 6.0, "b": 2.0})
    assert split_proportionally(["a", "b"], ledger, 4, 0.25, 0.5) == {"a": 3.0, "b": 1.0}


def test_split_bumps_sliver_to_min_chunk_when_balance_is_exactly_min_chunk():
    ledger = RemainingLedger.from_weekly({"a": 10.0, "b": 0.5})
    assert split_proportionally(["a", "b"], ledger, 4, 0.25, 0.5) == {"a": 3.75, "b": 0.5}


def test_split_does_not_bump_when_balance_is_below_min_chunk():
    ledger = RemainingLedger.from_weekly({"a": 10.0, "b": 0.4})
    entries = split_proportionally(["a", "b"], ledger, 4, 0.25, 0.5)
    assert entries["b"] == 0.25


def test_split_leaves_zero_shares_alone():
    ledger = RemainingLedger.from_weekly({"a": 10.0, "b": 0.1})
    entries = split_proportionally(["a", "b"], ledger, 4, 0.25, 0.5)
    assert entries["b"] == 0.0


def test_stepwise_removes_surplus():
    ledger = RemainingLedger.from_weekly({"a": 10.0, "b": 0.5})
    result = close_gap_stepwise({"a": 3.75, "b": 0.5}, ["a", "b"], ledger, 4, 0.25)
    assert result == {"a": 3.5, "b": 0.5}


def test_stepwise_forces_residual_onto_first_project():
    ledger = RemainingLedger.from_weekly({"a": 1.0, "b": 1.0})
    result = close_gap_stepwise({"a": 0.5, "b": 0.5}, ["a", "b"], ledger, 3, 0.25)
    assert result == {"a": 2.0, "b": 1.0}


def test_clamp_reopens_gap_that_free_pass_cannot_close_without_room():
    ledger = RemainingLedger.from_weekly({"a": 1.0, "b": 1.0})
    clamped = clamp_to_balances({"a": 2.0, "b": 1.0}, ledger)
    assert clamped == {"a": 1.0, "b": 1.0}
    assert close_gap_freely(clamped, ["a", "b"], ledger, 3) == {"a": 1.0, "b": 1.0}


def test_clamp_floors_negative_values():
    ledger = RemainingLedger.from_weekly({"a": 1.0})
    assert clamp_to_balances({"a": -0.25}, ledger) == {"a": 0.0}


def test_free_pass_fills_fractional_room():
    ledger = RemainingLedger.from_weekly({"a": 2.0, "b": 3.0})
    result = close_gap_freely({"a": 1.0, "b": 1.0}, ["a", "b"], ledger, 4.3)
    assert result == pytest.approx({"a": 2.0, "b": 2.3})


def test_free_pass_trims_surplus():
    ledger = RemainingLedger.from_weekly({"a": 2.0, "b": 2.0})
    assert close_gap_freely({"a": 2.0, "b": 2.0}, ["a", "b"], ledger, 3) == {"a": 1.0, "b": 2.0}


def test_display_rounding_pushes_cents_onto_largest_entry():
    rows, total = round_for_display({"a": 2.333333, "b": 2.333333, "c": 2.333334}, 7)
    assert [(row.project_id, row.hours) for row in rows] == [("a", 2.34), ("b", 2.33), ("c", 2.33)]
    assert total == 7.0


def test_display_rounding_keeps_a_short_day_short():
    rows, total = round_for_display({"a": 1.0}, 2)
    assert [(row.project_id, row.hours) for row in rows] == [("a", 1.0)]
    assert total == 1.0


def test_display_rounding_moves_only_cent_noise_on_a_short_day():
    rows, total = round_for_display({"a": 0.333333, "b": 0.333333, "c": 0.333334}, 2)
    assert sum(row.hours for row in rows) == pytest.approx(1.0)
    assert total == 1.0


def test_display_rounding_drops_zero_entries():
    rows, total = round_for_display({"a": 0.0, "b": 3.0}, 3)
    assert [row.project_id for row in rows] == ["b"]
    assert total == 3.0


def test_allocate_day_returns_new_ledger():
    ledger = RemainingLedger.from_weekly({"a": 10.0, "b": 10.0})
    plan = DayPlan.from_week(_week(["mon"], 7, cooldown=0))
    day, next_ledger = allocate_day("mon", 0, ledger, plan, LcgRandom(1))
    assert day.total == 7.0
    assert sum(entry.hours for entry in day.entries) == pytest.approx(7.0)
    assert sum(next_ledger.balances.values()) == pytest.approx(13.0)
    assert ledger.balances == {"a": 10.0, "b": 10.0}


def test_day_plan_derives_target_from_total():
    week = WeekConfig(
        total_hours=9,
        working_days=["mon", "tue"],
        rounding_step=0.25,
        min_chunk=0.5,
        max_projects_per_day=3,
        cooldown=1,
    )
    assert DayPlan.from_week(week).target == 4.5


def test_infeasible_days_report_drift_instead_of_failing():
    schedule, drift = distribute_daily({"a": 3.0}, _week(["mon", "tue", "wed"], 2), LcgRandom(1))
    assert [day.total for day in schedule] == [2.0, 1.0, 0.0]
    assert schedule[2].entries == []
    assert drift == 3.0


def test_short_days_show_only_what_the_ledger_gave():
    schedule, drift = distribute_daily({"a": 3.0}, _week(["mon", "tue", "wed"], 2), LcgRandom(1))
    shown = sum(entry.hours for day in schedule for entry in day.entries)
    assert shown == pytest.approx(3.0)
    assert [[entry.hours for entry in day.entries] for day in schedule] == [[2.0], [1.0], []]


def test_rotation_offset_follows_cooldown():
    reference = LcgRandom(11)
    r = reference.random()
    assert rotation_offset(LcgRandom(11), 3, 2) == math.floor(r * 3) + 6
    assert rotation_offset(LcgRandom(11), 0, 0) == 0


def _lead_project(cooldown: int) -> str:
    ledger = RemainingLedger.from_weekly({"a": 10.0, "b": 8.0, "c": 6.0, "d": 4.0, "e": 2.0})
    plan = DayPlan.from_week(_week(["mon", "tue"], 1, max_projects_per_day=1, cooldown=cooldown))
    day, _ = allocate_day("tue", 1, ledger, plan, LcgRandom(5))
    return day.entries[0].project_id


def test_cooldown_rotates_the_leading_project():
    assert _lead_project(0) == "a"
    assert _lead_project(2) in {"c", "d", "e"}
