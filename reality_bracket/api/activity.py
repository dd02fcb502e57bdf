from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from reality_bracket.core.database import get_db
from reality_bracket.models.models import ActivityEvent, User
from reality_bracket.schemas.activity import ActivityEventCreate, ActivityEventResponse
from reality_bracket.api.deps import get_current_user, require_admin
from reality_bracket.api.seasons import get_season_or_404
from reality_bracket.api.contestants import get_contestant_or_404
from reality_bracket.services.events import record_activity
from reality_bracket.services.leagues import current_week

router = APIRouter(prefix="/api/seasons/{season_id}/activity", tags=["Activity"])


def _event_response(event: ActivityEvent, contestant_name: str) -> ActivityEventResponse:
    return ActivityEventResponse(
        id=event.id,
        season_id=event.season_id,
        contestant_id=event.contestant_id,
        contestant_name=contestant_name,
        week_number=event.week_number,
        activity_type=event.activity_type,
        created_at=event.created_at,
    )


@router.post("", response_model=ActivityEventResponse, status_code=201)
async def create_activity_event(
    season_id: int,
    body: ActivityEventCreate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    await get_season_or_404(db, season_id)
    contestant = await get_contestant_or_404(db, season_id, body.contestant_id)
    event = await record_activity(
        db, season_id, contestant, body.week_number, body.activity_type
    )
    return _event_response(event, contestant.name)


@router.get("", response_model=list[ActivityEventResponse])
async def list_activity_events(
    season_id: int,
    week: int | None = None,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    await get_season_or_404(db, season_id)
    query = (
        select(ActivityEvent)
        .options(selectinload(ActivityEvent.contestant))
        .where(ActivityEvent.season_id == season_id)
    )
    if week is not None:
        query = query.where(ActivityEvent.week_number == week)
    result = await db.execute(
        query.order_by(
            ActivityEvent.week_number.desc(), ActivityEvent.created_at.desc(), ActivityEvent.id.desc()
        )
    )
    return [_event_response(e, e.contestant.name) for e in result.scalars().all()]


@router.get("/current-week")
async def get_current_week(
    season_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    await get_season_or_404(db, season_id)
    week = await current_week(db, season_id)
    return {"season_id": season_id, "current_week": week, "next_boot_week": week + 1}
