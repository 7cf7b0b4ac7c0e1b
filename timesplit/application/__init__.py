"""Application services."""

from .distribution import DistributionService, SeedPolicy, entropy_seed

__all__ = [
    "DistributionService",
    "SeedPolicy",
    "entropy_seed",
]
