# In-memory registry of live play sessions.
# One process, one dict: sessions do not survive a restart.

from __future__ import annotations

import logging
import os
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from division.generator import ProblemGenerator
from division.session import GameState

logger = logging.getLogger("mathly.division")

SESSION_TTL_S = float(os.getenv("DIVISION_SESSION_TTL_S", "3600"))


@dataclass
class _Entry:
    state: GameState
    generator: ProblemGenerator
    user_id: Optional[str]
    touched_at: float


class SessionStore:
    _entries: Dict[str, _Entry] = {}
    # held for every read and write of _entries
    _lock = threading.Lock()
    clock: Callable[[], float] = staticmethod(time.monotonic)
    ttl_s: float = SESSION_TTL_S

    @classmethod
    def now(cls) -> float:
        return cls.clock()

    @classmethod
    def create(
        cls, state: GameState, generator: ProblemGenerator, user_id: Optional[str] = None
    ) -> str:
        token = secrets.token_urlsafe(24)
        with cls._lock:
            purged = cls._purge(cls.ttl_s)
            cls._entries[token] = _Entry(
                state=state, generator=generator, user_id=user_id, touched_at=cls.now()
            )
        if purged:
            logger.info("purged %d idle division sessions", purged)
        return token

    @classmethod
    def get(cls, token: str) -> Optional[GameState]:
        with cls._lock:
            entry = cls._entries.get(token)
            if entry is None:
                return None
            now = cls.now()
            if now - entry.touched_at > cls.ttl_s:
                del cls._entries[token]
                return None
            entry.touched_at = now
            # the countdown is checked on every read so an expired game stays frozen
            entry.state = entry.state.expire(now)
            return entry.state

    @classmethod
    def generator(cls, token: str) -> Optional[ProblemGenerator]:
        with cls._lock:
            entry = cls._entries.get(token)
        return entry.generator if entry else None

    @classmethod
    def user_id(cls, token: str) -> Optional[str]:
        with cls._lock:
            entry = cls._entries.get(token)
        return entry.user_id if entry else None

    @classmethod
    def put(cls, token: str, state: GameState) -> None:
        with cls._lock:
            entry = cls._entries.get(token)
            if entry is None:
                raise KeyError(token)
            entry.state = state
            entry.touched_at = cls.now()

    @classmethod
    def discard(cls, token: str) -> bool:
        with cls._lock:
            return cls._entries.pop(token, None) is not None

    @classmethod
    def purge_idle(cls, max_idle_s: Optional[float] = None) -> int:
        limit = cls.ttl_s if max_idle_s is None else max_idle_s
        with cls._lock:
            purged = cls._purge(limit)
        if purged:
            logger.info("purged %d idle division sessions", purged)
        return purged

    @classmethod
    def _purge(cls, limit: float) -> int:
        # caller holds _lock
        now = cls.now()
        stale = [t for t, e in list(cls._entries.items()) if now - e.touched_at > limit]
        for t in stale:
            del cls._entries[t]
        return len(stale)

    @classmethod
    def count(cls) -> int:
        with cls._lock:
            return len(cls._entries)
