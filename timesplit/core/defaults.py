from __future__ import annotations

import copy
import os
from pathlib import Path

import yaml

from timesplit.core.schema import CostCenter, DistributionRequest, WeekConfig

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

_FALLBACK = {
    "centers": [
        {
            "id": f"cc{index}",
            "label": f"Center {index}",
            "percentage": share,
            "projects": [
                {"id": f"cc{index}_p1", "label": "Project 1", "percentage": first},
                {"id": f"cc{index}_p2", "label": "Project 2", "percentage": 100 - first},
            ],
        }
        for index, (share, first) in enumerate([(50, 60), (30, 55), (20, 50)], start=1)
    ],
    "week": {
        "totalHours": 35,
        "hoursPerDay": 7,
        "workingDays": ["mon", "tue", "wed", "thu", "fri"],
        "roundingStep": 0.25,
        "minChunk": 0.5,
        "maxProjectsPerDay": 3,
        "cooldown": 1,
    },
}


def _defaults_path() -> Path:
    env_path = os.getenv("TIMESPLIT_DEFAULTS_PATH")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return CONFIG_DIR / "defaults.yaml"


def load_defaults() -> dict:
    path = _defaults_path()
    if not path.exists():
        return copy.deepcopy(_FALLBACK)
    with path.open("r", encoding="utf-8") as fp:
        return yaml.safe_load(fp) or copy.deepcopy(_FALLBACK)


def default_centers() -> list[CostCenter]:
    return [CostCenter.model_validate(item) for item in load_defaults()["centers"]]


def default_week() -> WeekConfig:
    return WeekConfig.model_validate(load_defaults()["week"])


def default_request(random_seed: int | None = None) -> DistributionRequest:
    """A fresh request built from the configured defaults."""

    return DistributionRequest(centers=default_centers(), week=default_week(), random_seed=random_seed)
