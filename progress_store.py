# Account/Progress store backed by the progress and game_records tables.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import List, Optional

from db import SessionLocal
from models import GameRecord, Progress
from schemas.progress import GameRecordOut, ProgressOut, ProgressPatch

logger = logging.getLogger("mathly.progress")

XP_PER_POINTS = 10
XP_PER_LEVEL = 1000


def _level_for(xp: int) -> int:
    return xp // XP_PER_LEVEL + 1


def _next_day_streak(current: int, last: Optional[datetime], now: datetime) -> int:
    if last is None:
        return 1
    gap = (now.date() - last.date()).days
    if gap == 1:
        return current + 1
    if gap > 1:
        return 1
    return max(current, 1)


def load_progress(user_id: str) -> ProgressOut:
    with SessionLocal() as db:
        row = db.get(Progress, user_id)
        if row is None:
            return ProgressOut(user_id=user_id)
        return ProgressOut.model_validate(row)


def save_progress(
    user_id: str, patch: ProgressPatch, now: Optional[datetime] = None
) -> ProgressOut:
    now = now or datetime.now(UTC)
    with SessionLocal() as db:
        row = db.get(Progress, user_id)
        if row is None:
            row = Progress(
                user_id=user_id, level=1, score=0, xp=0, problems_completed=0, day_streak=0
            )
            db.add(row)

        row.score += patch.points
        row.xp += patch.points // XP_PER_POINTS
        # a level once reached is kept
        row.level = max(row.level, _level_for(row.xp))
        row.problems_completed += patch.problems_completed

        if patch.game_type:
            db.add(GameRecord(user_id=user_id, game_type=patch.game_type, score=patch.points))
            row.day_streak = _next_day_streak(row.day_streak, row.last_played_at, now)
            row.last_played_at = now

        db.commit()
        db.refresh(row)
        logger.info(
            "progress saved user=%s points=%d level=%d", user_id, patch.points, row.level
        )
        return ProgressOut.model_validate(row)


def recent_games(user_id: str, limit: int = 10) -> List[GameRecordOut]:
    with SessionLocal() as db:
        rows = (
            db.query(GameRecord)
            .filter(GameRecord.user_id == user_id)
            .order_by(GameRecord.created_at.desc(), GameRecord.id.desc())
            .limit(limit)
            .all()
        )
        return [GameRecordOut.model_validate(r) for r in rows]
