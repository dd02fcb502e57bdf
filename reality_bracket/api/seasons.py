from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from reality_bracket.core.database import get_db
from reality_bracket.models.models import Season, SeasonStatus, Contestant, League, User
from reality_bracket.schemas.seasons import (
    SeasonCreate, SeasonStatusUpdate, SeasonResponse, SeasonDetailResponse,
)
from reality_bracket.api.deps import get_current_user, require_admin
from reality_bracket.services.leagues import current_week

router = APIRouter(prefix="/api/seasons", tags=["Seasons"])

VALID_TRANSITIONS = {
    SeasonStatus.UPCOMING: [SeasonStatus.ACTIVE],
    SeasonStatus.ACTIVE: [SeasonStatus.COMPLETED],
    SeasonStatus.COMPLETED: [SeasonStatus.ACTIVE],
}


async def get_season_or_404(db: AsyncSession, season_id: int) -> Season:
    result = await db.execute(select(Season).where(Season.id == season_id))
    season = result.scalar_one_or_none()
    if not season:
        raise HTTPException(status_code=404, detail="Season not found")
    return season


@router.post("", response_model=SeasonResponse, status_code=201)
async def create_season(
    body: SeasonCreate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    existing = await db.execute(select(Season).where(Season.number == body.number))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail=f"Season {body.number} already exists")

    season = Season(**body.model_dump())
    db.add(season)
    await db.flush()
    await db.refresh(season)
    return season


@router.get("", response_model=list[SeasonResponse])
async def list_seasons(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    result = await db.execute(select(Season).order_by(Season.number.desc()))
    return result.scalars().all()


@router.get("/{season_id}", response_model=SeasonDetailResponse)
async def get_season(
    season_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    season = await get_season_or_404(db, season_id)

    contestant_count = (await db.execute(
        select(func.count()).select_from(Contestant).where(Contestant.season_id == season_id)
    )).scalar()

    league_count = (await db.execute(
        select(func.count()).select_from(League).where(League.season_id == season_id)
    )).scalar()

    return SeasonDetailResponse(
        **SeasonResponse.model_validate(season).model_dump(),
        contestant_count=contestant_count or 0,
        league_count=league_count or 0,
        current_week=await current_week(db, season_id),
    )


@router.patch("/{season_id}/status", response_model=SeasonResponse)
async def update_season_status(
    season_id: int,
    body: SeasonStatusUpdate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    season = await get_season_or_404(db, season_id)

    try:
        new_status = SeasonStatus(body.status)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status. Must be one of: {[s.value for s in SeasonStatus]}",
        )

    current = season.status if isinstance(season.status, SeasonStatus) else SeasonStatus(season.status)
    if new_status not in VALID_TRANSITIONS.get(current, []):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot transition from {current.value} to {new_status.value}",
        )

    season.status = new_status
    await db.flush()
    await db.refresh(season)
    return season
