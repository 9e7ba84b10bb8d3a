from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

from division.errors import GenerationRetryExhaustion
from division.tiers import DifficultyTier

logger = logging.getLogger("mathly.division")

MAX_ATTEMPTS = 1000
# redraws of (digit count, divisor) when no multiple fits the digit range
MAX_ROUNDS = 20


@dataclass(frozen=True)
class Problem:
    dividend: int
    divisor: int

    def __post_init__(self) -> None:
        if self.dividend < 1:
            raise ValueError(f"dividend must be >= 1, got {self.dividend}")
        if self.divisor < 2:
            raise ValueError(f"divisor must be >= 2, got {self.divisor}")
        if self.dividend % self.divisor != 0:
            raise ValueError(f"{self.dividend} is not divisible by {self.divisor}")

    @property
    def quotient(self) -> int:
        return self.dividend // self.divisor


def digit_bounds(digits: int) -> tuple[int, int]:
    return 10 ** (digits - 1), 10**digits - 1


class ProblemGenerator:
    """
    Draws exactly divisible problems for a tier.

    The random source is injected so a seeded ``random.Random`` gives a
    reproducible stream of problems.
    """

    def __init__(self, rng: Optional[random.Random] = None, max_attempts: int = MAX_ATTEMPTS):
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts

    def generate(self, tier: DifficultyTier) -> Problem:
        for _ in range(MAX_ROUNDS):
            digits = self.rng.randint(*tier.digit_range)
            divisor = self.rng.randint(*tier.divisor_range)
            lo, hi = digit_bounds(digits)

            try:
                dividend = self._sample(lo, hi, divisor, tier.name)
            except GenerationRetryExhaustion as e:
                logger.info("rejection sampling exhausted (%s); constructing directly", e)
                dividend = self._construct(lo, hi, divisor)

            if dividend is not None:
                return Problem(dividend=dividend, divisor=divisor)

        raise GenerationRetryExhaustion(tier.name, MAX_ROUNDS * self.max_attempts)

    def _sample(self, lo: int, hi: int, divisor: int, tier_name: str) -> int:
        for _ in range(self.max_attempts):
            dividend = self.rng.randint(lo, hi)
            if dividend % divisor == 0:
                return dividend
        raise GenerationRetryExhaustion(tier_name, self.max_attempts)

    def _construct(self, lo: int, hi: int, divisor: int) -> Optional[int]:
        k_min = -(-lo // divisor)
        k_max = hi // divisor
        if k_min > k_max:
            return None
        return self.rng.randint(k_min, k_max) * divisor
