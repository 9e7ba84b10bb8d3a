# routers/progress.py
from fastapi import APIRouter, Depends, HTTPException

from deps.auth import require_client
from progress_store import load_progress, recent_games, save_progress
from schemas.progress import HistoryOut, ProgressOut, ProgressPatch

router = APIRouter(prefix="/progress", tags=["progress"], dependencies=[Depends(require_client)])


def _check_user_id(user_id: str) -> str:
    user_id = user_id.strip()
    if not user_id or len(user_id) > 64:
        raise HTTPException(status_code=400, detail="invalid user id")
    return user_id


@router.get("/{user_id}", response_model=ProgressOut)
def get_progress(user_id: str):
    return load_progress(_check_user_id(user_id))


@router.post("/{user_id}", response_model=ProgressOut)
def update_progress(user_id: str, patch: ProgressPatch):
    return save_progress(_check_user_id(user_id), patch)


@router.get("/{user_id}/history", response_model=HistoryOut)
def progress_history(user_id: str, limit: int = 10):
    limit = max(1, min(limit, 100))
    items = recent_games(_check_user_id(user_id), limit=limit)
    return {"ok": True, "items": items, "count": len(items)}
