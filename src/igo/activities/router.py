"""Activity endpoints: counters, progress and timer sessions."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from igo.activities import service
from igo.activities.schemas import (
    ActivityCreate,
    ActivityProgressResponse,
    ActivityResponse,
    ActivityUpdate,
    RepsAmount,
    SessionResponse,
    SessionStart,
    TimerStatusResponse,
)
from igo.database import get_session
from igo.errors import NotFoundError

router = APIRouter(prefix="/api/activities", tags=["Activities"])


@router.get("", response_model=list[ActivityResponse])
async def list_activities(db: AsyncSession = Depends(get_session)) -> list[ActivityResponse]:
    activities = await service.list_activities(db)
    return [ActivityResponse.model_validate(a) for a in activities]


@router.post("", response_model=ActivityResponse, status_code=201)
async def create_activity(
    command: ActivityCreate,
    db: AsyncSession = Depends(get_session),
) -> ActivityResponse:
    activity = await service.create_activity(db, command)
    await db.commit()
    return ActivityResponse.model_validate(activity)


@router.get("/{activity_id}", response_model=ActivityResponse)
async def get_activity(
    activity_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> ActivityResponse:
    activity = await service.get_activity_or_404(db, str(activity_id))
    return ActivityResponse.model_validate(activity)


@router.put("/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    activity_id: uuid.UUID,
    command: ActivityUpdate,
    db: AsyncSession = Depends(get_session),
) -> ActivityResponse:
    activity = await service.update_activity(db, str(activity_id), command)
    await db.commit()
    return ActivityResponse.model_validate(activity)


@router.delete("/{activity_id}", status_code=204)
async def delete_activity(
    activity_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Delete an activity together with its sessions."""
    await service.delete_activity(db, str(activity_id))
    await db.commit()
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Counters & progress
# ---------------------------------------------------------------------------


@router.post("/{activity_id}/increment", response_model=ActivityResponse)
async def increment_reps(
    activity_id: uuid.UUID,
    command: RepsAmount | None = None,
    db: AsyncSession = Depends(get_session),
) -> ActivityResponse:
    """Add ``amount`` reps (default 1)."""
    amount = command.amount if command else 1
    activity = await service.increment_reps(db, str(activity_id), amount)
    await db.commit()
    return ActivityResponse.model_validate(activity)


@router.post("/{activity_id}/decrement", response_model=ActivityResponse)
async def decrement_reps(
    activity_id: uuid.UUID,
    command: RepsAmount | None = None,
    db: AsyncSession = Depends(get_session),
) -> ActivityResponse:
    """Remove ``amount`` reps (default 1), stopping at zero."""
    amount = command.amount if command else 1
    activity = await service.decrement_reps(db, str(activity_id), amount)
    await db.commit()
    return ActivityResponse.model_validate(activity)


@router.get("/{activity_id}/progress", response_model=ActivityProgressResponse)
async def activity_progress(
    activity_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> ActivityProgressResponse:
    progress = await service.get_progress(db, str(activity_id))
    return ActivityProgressResponse.model_validate(progress)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@router.get("/{activity_id}/timer", response_model=TimerStatusResponse)
async def timer_status(
    activity_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> TimerStatusResponse:
    status = await service.get_timer_status(db, str(activity_id))
    if status is None:
        raise NotFoundError("No active timer found")
    return TimerStatusResponse.model_validate(status)


@router.get("/{activity_id}/sessions", response_model=list[SessionResponse])
async def session_history(
    activity_id: uuid.UUID,
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
) -> list[SessionResponse]:
    """Most recent sessions first."""
    sessions = await service.list_sessions(db, str(activity_id), limit)
    return [SessionResponse.model_validate(s) for s in sessions]


@router.post("/{activity_id}/sessions/start", response_model=SessionResponse, status_code=201)
async def start_session(
    activity_id: uuid.UUID,
    command: SessionStart | None = None,
    db: AsyncSession = Depends(get_session),
) -> SessionResponse:
    session_type = command.session_type if command else "timer"
    session = await service.start_session(db, str(activity_id), session_type)
    await db.commit()
    return SessionResponse.model_validate(session)


@router.post("/{activity_id}/sessions/{session_id}/end", response_model=SessionResponse)
async def end_session(
    activity_id: uuid.UUID,
    session_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> SessionResponse:
    """Stop the session; time-based activities are credited with its minutes."""
    session = await service.end_session(db, str(activity_id), str(session_id))
    return SessionResponse.model_validate(session)
