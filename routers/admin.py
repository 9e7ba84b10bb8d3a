from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from deps.auth import require_admin
from division.store import SessionStore

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/sessions/purge")
def purge_sessions(max_idle_s: Optional[float] = None):
    # max_idle_s=0 drops every live session
    n = SessionStore.purge_idle(max_idle_s)
    return {"ok": True, "purged": n, "remaining": SessionStore.count()}


@router.get("/sessions/count")
def session_count():
    return {"ok": True, "count": SessionStore.count()}
