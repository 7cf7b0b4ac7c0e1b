from __future__ import annotations

DEFAULT_SEED = 1

_MULTIPLIER = 1664525
_INCREMENT = 1013904223
_MODULUS = 2**32


class LcgRandom:
    """Seeded linear congruential generator (Numerical Recipes constants).

    Only drives ordering heuristics. The same seed always yields the same
    sequence of floats in ``[0, 1)``.
    """

    def __init__(self, seed: int | float | None = None) -> None:
        if seed is None:
            seed = DEFAULT_SEED
        self._state = int(seed) % _MODULUS

    def random(self) -> float:
        self._state = (_MULTIPLIER * self._state + _INCREMENT) % _MODULUS
        return self._state / _MODULUS

    __call__ = random
