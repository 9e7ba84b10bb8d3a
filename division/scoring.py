from __future__ import annotations

from sympy import Rational, ceiling, floor

from division.tiers import DifficultyTier

# Points stay exact Rationals until they are shown to a player.
BONUS_FACTOR = Rational(3, 2)


def base_points(tier: DifficultyTier, total_steps: int) -> Rational:
    if total_steps < 1:
        raise ValueError("a problem has at least one step")
    return Rational(tier.max_score, total_steps)


def points_for_step(tier: DifficultyTier, total_steps: int, hint_used: bool) -> Rational:
    base = base_points(tier, total_steps)
    if hint_used:
        return Rational(floor(base / 2))
    return base


def completion_bonus(tier: DifficultyTier, total_steps: int) -> Rational:
    """Flat bonus for finishing a problem, whatever hints the last step used."""
    return Rational(floor(base_points(tier, total_steps) * BONUS_FACTOR))


def display_points(value: Rational) -> int:
    return int(ceiling(value))
