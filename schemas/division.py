# schemas/division.py
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

TierName = Literal["EASY", "MEDIUM", "HARD"]


def _upper(v):
    return v.strip().upper() if isinstance(v, str) else v


# ---------- Tiers ----------


class TierOut(BaseModel):
    name: str
    label: str
    digit_range: List[int]
    divisor_range: List[int]
    max_score: int


# ---------- Snapshot ----------


class WorkingLineOut(BaseModel):
    product: int
    remainder: int
    position_index: int
    digit_index: int
    submitted_value: str


class SessionSnapshot(BaseModel):
    tier: str
    dividend: int
    divisor: int
    current_step_kind: Optional[str] = None
    current_step_instruction: Optional[str] = None
    current_step_hint: Optional[str] = None
    step_index: int
    total_steps: int
    quotient_so_far: str
    working_history: List[WorkingLineOut]
    score: int
    streak: int
    hints_remaining: int
    problems_completed: int
    is_complete: bool
    time_up: bool = False
    time_remaining_s: Optional[float] = None


# ---------- Session lifecycle ----------


class StartSessionRequest(BaseModel):
    tier: TierName = "EASY"
    user_id: Optional[str] = Field(default=None, min_length=1, max_length=64)
    # Seeds the problem stream; handy for replays and tests.
    seed: Optional[int] = None
    time_limit_s: Optional[float] = Field(default=None, gt=0, le=3600)

    @field_validator("tier", mode="before")
    @classmethod
    def normalize_tier(cls, v):
        return _upper(v)


class StartSessionResponse(BaseModel):
    session_id: str
    snapshot: SessionSnapshot


class NextProblemRequest(BaseModel):
    # Omit to stay on the current tier; a different tier forces a fresh problem.
    tier: Optional[TierName] = None

    @field_validator("tier", mode="before")
    @classmethod
    def normalize_tier(cls, v):
        return _upper(v)


# ---------- Answer / hint ----------


class AnswerRequest(BaseModel):
    answer: str = Field(max_length=100)


class AnswerResponse(BaseModel):
    ok: bool
    correct: bool
    points_awarded: int
    bonus_awarded: int = 0
    feedback: str
    snapshot: SessionSnapshot


class HintResponse(BaseModel):
    hint_text: Optional[str] = None
    snapshot: SessionSnapshot


# ---------- Worked solution ----------


class PlanRequest(BaseModel):
    dividend: int = Field(ge=1, le=10**12)
    divisor: int = Field(ge=2, le=10**6)
    include_multiply: bool = True


class StepOut(BaseModel):
    kind: str
    instruction: str
    hint: str
    current_value: int
    expected_answer: int
    quotient_so_far: str
    position_index: int
    digit_index: int


class PlanResponse(BaseModel):
    ok: bool
    quotient: int
    steps: List[StepOut]
