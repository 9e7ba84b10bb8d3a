"""
Long-division play state.

``DivisionSession`` is the walk through one problem's steps.
``GameState`` wraps it with what survives from one problem to the next
(score, streak, problems completed, an optional countdown).

Both are frozen; every transition returns a new value and leaves the old
one untouched, so callers can keep or discard states freely.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from sympy import Rational

from division.generator import Problem, ProblemGenerator
from division.planner import Step, StepKind, plan
from division.scoring import completion_bonus, display_points, points_for_step
from division.tiers import DifficultyTier

HINT_BUDGET = 3

_ANSWER_RE = re.compile(r"^\s*([+-]?[0-9]{1,12})\s*$")


def parse_answer(raw: Optional[str]) -> Optional[int]:
    """Integer value of a typed answer, or None when it is not a plain number."""
    if raw is None:
        return None
    m = _ANSWER_RE.match(raw)
    if m is None:
        return None
    return int(m.group(1))


class AnswerStatus(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    IGNORED = "ignored"
    TIME_UP = "time_up"


@dataclass(frozen=True)
class WorkingLine:
    product: int
    remainder: int
    position_index: int
    digit_index: int
    submitted_value: str


@dataclass(frozen=True)
class StepOutcome:
    status: AnswerStatus
    session: "DivisionSession"
    points: Rational = Rational(0)
    bonus: Rational = Rational(0)


@dataclass(frozen=True)
class DivisionSession:
    tier: DifficultyTier
    problem: Problem
    steps: Tuple[Step, ...]
    current_step_index: int = 0
    working_history: Tuple[WorkingLine, ...] = ()
    hints_remaining: int = HINT_BUDGET
    hint_shown: bool = False
    is_complete: bool = False
    # points earned on this problem, bonus included
    earned: Rational = Rational(0)

    @classmethod
    def start(
        cls,
        tier: DifficultyTier,
        generator: ProblemGenerator,
        include_multiply: bool = True,
    ) -> "DivisionSession":
        problem = generator.generate(tier)
        return cls.for_problem(tier, problem, include_multiply=include_multiply)

    @classmethod
    def for_problem(
        cls, tier: DifficultyTier, problem: Problem, include_multiply: bool = True
    ) -> "DivisionSession":
        return cls(tier=tier, problem=problem, steps=plan(problem, include_multiply))

    @property
    def current_step(self) -> Optional[Step]:
        if self.is_complete or self.current_step_index >= len(self.steps):
            return None
        return self.steps[self.current_step_index]

    @property
    def quotient_so_far(self) -> str:
        if self.is_complete:
            return str(self.problem.quotient)
        step = self.current_step
        return step.quotient_so_far if step else ""

    def submit(self, raw: Optional[str]) -> StepOutcome:
        if self.is_complete or raw is None or not raw.strip():
            return StepOutcome(AnswerStatus.IGNORED, self)

        step = self.steps[self.current_step_index]
        value = parse_answer(raw)
        if value is None or value != step.expected_answer:
            return StepOutcome(AnswerStatus.INCORRECT, self)

        points = points_for_step(self.tier, len(self.steps), self.hint_shown)
        history = self.working_history
        if step.kind is StepKind.SUBTRACT:
            history = history + (
                WorkingLine(
                    product=step.product,
                    remainder=step.remainder,
                    position_index=step.position_index,
                    digit_index=step.digit_index,
                    submitted_value=raw.strip(),
                ),
            )

        if self.current_step_index == len(self.steps) - 1:
            bonus = completion_bonus(self.tier, len(self.steps))
            done = replace(
                self,
                current_step_index=len(self.steps),
                working_history=history,
                hint_shown=False,
                is_complete=True,
                earned=self.earned + points + bonus,
            )
            return StepOutcome(AnswerStatus.CORRECT, done, points=points, bonus=bonus)

        advanced = replace(
            self,
            current_step_index=self.current_step_index + 1,
            working_history=history,
            hint_shown=False,
            earned=self.earned + points,
        )
        return StepOutcome(AnswerStatus.CORRECT, advanced, points=points)

    def request_hint(self) -> Tuple[Optional[str], "DivisionSession"]:
        step = self.current_step
        if step is None or self.hints_remaining <= 0 or self.hint_shown:
            return None, self
        shown = replace(self, hints_remaining=self.hints_remaining - 1, hint_shown=True)
        return step.hint, shown


@dataclass(frozen=True)
class SubmitResult:
    status: AnswerStatus
    state: "GameState"
    points: Rational = Rational(0)
    bonus: Rational = Rational(0)

    @property
    def correct(self) -> bool:
        return self.status is AnswerStatus.CORRECT

    @property
    def accepted(self) -> bool:
        return self.status in (AnswerStatus.CORRECT, AnswerStatus.INCORRECT)

    @property
    def problem_completed(self) -> bool:
        return self.correct and self.state.division.is_complete

    @property
    def feedback(self) -> str:
        if self.status is AnswerStatus.TIME_UP:
            return "Time's up!"
        if self.status is AnswerStatus.IGNORED:
            if self.state.division.is_complete:
                return "Problem already complete."
            return "Answer required."
        if self.status is AnswerStatus.INCORRECT:
            return "Try again!"
        if self.problem_completed:
            return f"Problem Complete! +{display_points(self.bonus)} bonus points!"
        msg = f"Correct! +{display_points(self.points)} points"
        if self.state.streak > 1:
            msg += f" ({self.state.streak}x streak!)"
        return msg


@dataclass(frozen=True)
class GameState:
    division: DivisionSession
    score: Rational = Rational(0)
    streak: int = 0
    problems_completed: int = 0
    include_multiply: bool = True
    deadline: Optional[float] = None
    time_up: bool = False

    @property
    def tier(self) -> DifficultyTier:
        return self.division.tier

    @classmethod
    def new(
        cls,
        tier: DifficultyTier,
        generator: ProblemGenerator,
        deadline: Optional[float] = None,
        include_multiply: bool = True,
    ) -> "GameState":
        return cls(
            division=DivisionSession.start(tier, generator, include_multiply),
            include_multiply=include_multiply,
            deadline=deadline,
        )

    def start_new_problem(
        self, generator: ProblemGenerator, tier: Optional[DifficultyTier] = None
    ) -> "GameState":
        division = DivisionSession.start(tier or self.tier, generator, self.include_multiply)
        return replace(self, division=division)

    def expire(self, now: float) -> "GameState":
        if self.time_up or self.deadline is None or now < self.deadline:
            return self
        return replace(self, time_up=True)

    def submit_answer(self, raw: Optional[str]) -> SubmitResult:
        if self.time_up:
            return SubmitResult(AnswerStatus.TIME_UP, self)

        outcome = self.division.submit(raw)
        if outcome.status is AnswerStatus.IGNORED:
            return SubmitResult(AnswerStatus.IGNORED, self)
        if outcome.status is AnswerStatus.INCORRECT:
            return SubmitResult(AnswerStatus.INCORRECT, replace(self, streak=0))

        state = replace(
            self,
            division=outcome.session,
            score=self.score + outcome.points + outcome.bonus,
            streak=self.streak + 1,
            problems_completed=self.problems_completed + (1 if outcome.session.is_complete else 0),
        )
        return SubmitResult(AnswerStatus.CORRECT, state, points=outcome.points, bonus=outcome.bonus)

    def request_hint(self) -> Tuple[Optional[str], "GameState"]:
        hint, division = self.division.request_hint()
        if division is self.division:
            return hint, self
        return hint, replace(self, division=division)

    def snapshot(self, now: Optional[float] = None) -> Dict[str, Any]:
        d = self.division
        step = d.current_step
        remaining = None
        if self.deadline is not None and now is not None:
            remaining = max(0.0, self.deadline - now)
        return {
            "tier": self.tier.name,
            "dividend": d.problem.dividend,
            "divisor": d.problem.divisor,
            "current_step_kind": step.kind.value if step else None,
            "current_step_instruction": step.instruction if step else None,
            "current_step_hint": step.hint if (step and d.hint_shown) else None,
            "step_index": d.current_step_index,
            "total_steps": len(d.steps),
            "quotient_so_far": d.quotient_so_far,
            "working_history": [
                {
                    "product": w.product,
                    "remainder": w.remainder,
                    "position_index": w.position_index,
                    "digit_index": w.digit_index,
                    "submitted_value": w.submitted_value,
                }
                for w in d.working_history
            ],
            "score": display_points(self.score),
            "streak": self.streak,
            "hints_remaining": d.hints_remaining,
            "problems_completed": self.problems_completed,
            "is_complete": d.is_complete,
            "time_up": self.time_up,
            "time_remaining_s": remaining,
        }
