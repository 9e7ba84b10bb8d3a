# routers/division.py
from __future__ import annotations

import logging
import random
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException

from division.errors import GenerationRetryExhaustion
from division.generator import Problem, ProblemGenerator
from division.planner import plan
from division.scoring import display_points
from division.session import GameState
from division.store import SessionStore
from division.tiers import get_tier, list_tiers
from progress_store import save_progress
from schemas.division import (
    AnswerRequest,
    AnswerResponse,
    HintResponse,
    NextProblemRequest,
    PlanRequest,
    PlanResponse,
    SessionSnapshot,
    StartSessionRequest,
    StartSessionResponse,
    StepOut,
    TierOut,
)
from schemas.progress import ProgressPatch

logger = logging.getLogger("mathly.division")

GAME_TYPE = "long-division"

router = APIRouter(tags=["division"])


def _snapshot(state: GameState) -> SessionSnapshot:
    return SessionSnapshot.model_validate(state.snapshot(now=SessionStore.now()))


def _load(session_id: str) -> GameState:
    state = SessionStore.get(session_id)
    if state is None:
        raise HTTPException(status_code=404, detail="session not found")
    return state


def _save_progress_quietly(user_id: str, patch: ProgressPatch) -> None:
    # Runs after the response; the game state is already stored either way.
    try:
        save_progress(user_id, patch)
    except Exception:
        logger.warning("progress save failed for user=%s", user_id, exc_info=True)


@router.get("/tiers", response_model=List[TierOut])
def tiers():
    return [
        TierOut(
            name=t.name,
            label=t.label,
            digit_range=list(t.digit_range),
            divisor_range=list(t.divisor_range),
            max_score=t.max_score,
        )
        for t in list_tiers()
    ]


@router.post("/division/sessions", response_model=StartSessionResponse)
def start_session(req: StartSessionRequest):
    generator = ProblemGenerator(random.Random(req.seed))
    deadline: Optional[float] = None
    if req.time_limit_s is not None:
        deadline = SessionStore.now() + req.time_limit_s

    try:
        state = GameState.new(get_tier(req.tier), generator, deadline=deadline)
    except GenerationRetryExhaustion as e:
        raise HTTPException(status_code=503, detail=str(e))

    session_id = SessionStore.create(state, generator, user_id=req.user_id)
    logger.info(
        "division session started tier=%s user=%s problem=%d/%d",
        req.tier,
        req.user_id,
        state.division.problem.dividend,
        state.division.problem.divisor,
    )
    return {"session_id": session_id, "snapshot": _snapshot(state)}


@router.get("/division/sessions/{session_id}", response_model=SessionSnapshot)
def get_session(session_id: str):
    return _snapshot(_load(session_id))


@router.delete("/division/sessions/{session_id}")
def end_session(session_id: str):
    if not SessionStore.discard(session_id):
        raise HTTPException(status_code=404, detail="session not found")
    return {"ok": True}


@router.post("/division/sessions/{session_id}/answer", response_model=AnswerResponse)
def submit_answer(session_id: str, req: AnswerRequest, background: BackgroundTasks):
    state = _load(session_id)
    result = state.submit_answer(req.answer)
    if result.state is not state:
        SessionStore.put(session_id, result.state)

    if result.problem_completed:
        logger.info(
            "division problem completed session=%s score=%s",
            session_id[:8],
            result.state.score,
        )
        user_id = SessionStore.user_id(session_id)
        if user_id:
            earned = display_points(result.state.division.earned)
            background.add_task(
                _save_progress_quietly,
                user_id,
                ProgressPatch(points=earned, problems_completed=1, game_type=GAME_TYPE),
            )

    return {
        "ok": result.accepted,
        "correct": result.correct,
        "points_awarded": display_points(result.points),
        "bonus_awarded": display_points(result.bonus),
        "feedback": result.feedback,
        "snapshot": _snapshot(result.state),
    }


@router.post("/division/sessions/{session_id}/hint", response_model=HintResponse)
def request_hint(session_id: str):
    state = _load(session_id)
    hint, new_state = state.request_hint()
    if new_state is not state:
        SessionStore.put(session_id, new_state)
    return {"hint_text": hint, "snapshot": _snapshot(new_state)}


@router.post("/division/sessions/{session_id}/next", response_model=SessionSnapshot)
def next_problem(session_id: str, req: Optional[NextProblemRequest] = None):
    state = _load(session_id)
    generator = SessionStore.generator(session_id)
    tier = get_tier(req.tier) if (req and req.tier) else state.tier
    try:
        new_state = state.start_new_problem(generator, tier)
    except GenerationRetryExhaustion as e:
        raise HTTPException(status_code=503, detail=str(e))
    SessionStore.put(session_id, new_state)
    return _snapshot(new_state)


@router.post("/division/plan", response_model=PlanResponse)
def plan_problem(req: PlanRequest):
    try:
        problem = Problem(dividend=req.dividend, divisor=req.divisor)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    steps = plan(problem, include_multiply=req.include_multiply)
    return {
        "ok": True,
        "quotient": problem.quotient,
        "steps": [
            StepOut(
                kind=s.kind.value,
                instruction=s.instruction,
                hint=s.hint,
                current_value=s.current_value,
                expected_answer=s.expected_answer,
                quotient_so_far=s.quotient_so_far,
                position_index=s.position_index,
                digit_index=s.digit_index,
            )
            for s in steps
        ],
    }
