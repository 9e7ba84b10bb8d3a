# Difficulty tiers for the long-division game.
# Ranges are inclusive; a tier is validated when it is built.

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from division.errors import InvalidConfiguration

IntRange = Tuple[int, int]


def _check_range(name: str, field: str, rng: IntRange, lowest: int) -> None:
    if not (isinstance(rng, tuple) and len(rng) == 2):
        raise InvalidConfiguration(f"{name}.{field} must be a (min, max) pair")
    lo, hi = rng
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in rng):
        raise InvalidConfiguration(f"{name}.{field} must hold integers, got {rng!r}")
    if lo < lowest:
        raise InvalidConfiguration(f"{name}.{field} min must be >= {lowest}, got {lo}")
    if lo > hi:
        raise InvalidConfiguration(f"{name}.{field} is empty: {lo} > {hi}")


@dataclass(frozen=True)
class DifficultyTier:
    name: str
    label: str
    digit_range: IntRange
    divisor_range: IntRange
    max_score: int

    def __post_init__(self) -> None:
        _check_range(self.name, "digit_range", self.digit_range, 1)
        # divisor 0 divides nothing and 1 gives a trivial walk
        _check_range(self.name, "divisor_range", self.divisor_range, 2)
        if not isinstance(self.max_score, int) or self.max_score <= 0:
            raise InvalidConfiguration(f"{self.name}.max_score must be a positive int")


TIERS: Dict[str, DifficultyTier] = {
    t.name: t
    for t in (
        DifficultyTier("EASY", "Easy", (1, 2), (2, 9), 100),
        DifficultyTier("MEDIUM", "Medium", (2, 3), (2, 12), 200),
        DifficultyTier("HARD", "Hard", (3, 4), (2, 20), 300),
    )
}

DEFAULT_TIER = "EASY"


def get_tier(name: str) -> DifficultyTier:
    tier = TIERS.get((name or "").strip().upper())
    if tier is None:
        raise InvalidConfiguration(f"unknown difficulty tier: {name!r}")
    return tier


def list_tiers() -> List[DifficultyTier]:
    return list(TIERS.values())
