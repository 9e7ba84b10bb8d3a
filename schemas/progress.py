# schemas/progress.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProgressOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    user_id: str
    level: int = 1
    score: int = 0
    xp: int = 0
    problems_completed: int = 0
    day_streak: int = 0
    last_played_at: Optional[datetime] = None


class ProgressPatch(BaseModel):
    # increments, never absolute values
    points: int = Field(default=0, ge=0)
    problems_completed: int = Field(default=0, ge=0)
    game_type: Optional[str] = Field(default=None, min_length=1, max_length=32)


class GameRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    game_type: str
    score: int
    created_at: Optional[datetime] = None


class HistoryOut(BaseModel):
    ok: bool
    items: List[GameRecordOut]
    count: int
