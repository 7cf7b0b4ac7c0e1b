"""Application service layer in front of the allocation engine."""
from __future__ import annotations

import logging
import secrets
from typing import Any, Literal

from timesplit.core.engine import distribute_work
from timesplit.core.schema import DistributionRequest, DistributionResult, StoredPreferences
from timesplit.infrastructure import PreferencesRepository

logger = logging.getLogger(__name__)

SeedPolicy = Literal["fixed", "entropy"]


def entropy_seed() -> int:
    """A fresh 32-bit seed for callers who want a different layout each run."""

    return secrets.randbits(32)


class DistributionService:
    """Coordinates a distribution run and the caller's remembered inputs.

    Seeding is a caller decision. ``"fixed"`` leaves the request untouched, so
    a missing seed falls back to the engine default and output is
    reproducible. ``"entropy"`` fills a missing seed from :func:`entropy_seed`;
    the seed used is kept with the preferences so the layout can be rebuilt.
    """

    def __init__(self, repository: PreferencesRepository) -> None:
        self._repository = repository

    @staticmethod
    def parse_request(payload: DistributionRequest | dict[str, Any]) -> DistributionRequest:
        if isinstance(payload, DistributionRequest):
            return payload
        return DistributionRequest.model_validate(payload)

    def resolve_seed(self, request: DistributionRequest, policy: SeedPolicy = "fixed") -> DistributionRequest:
        if policy == "entropy" and request.random_seed is None:
            return request.model_copy(update={"random_seed": entropy_seed()})
        return request

    def distribute(
        self,
        payload: DistributionRequest | dict[str, Any],
        *,
        seed_policy: SeedPolicy = "fixed",
        language: str | None = None,
    ) -> DistributionResult:
        request = self.resolve_seed(self.parse_request(payload), seed_policy)
        result = distribute_work(request)
        previous = self._repository.load()
        self._repository.save(
            StoredPreferences(
                centers=request.centers,
                week=request.week,
                random_seed=request.random_seed,
                language=language if language is not None else (previous.language if previous else None),
            )
        )
        logger.info(
            "distributed %d projects over %d days (seed=%s)",
            len(result.weekly_totals),
            len(result.daily_schedule),
            request.random_seed,
        )
        return result

    def last_preferences(self) -> StoredPreferences | None:
        return self._repository.load()

    def last_request(self) -> DistributionRequest | None:
        preferences = self._repository.load()
        if preferences is None:
            return None
        return DistributionRequest(
            centers=preferences.centers,
            week=preferences.week,
            random_seed=preferences.random_seed,
        )
