from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from reality_bracket.core.database import get_db
from reality_bracket.models.models import Contestant, ContestantStatus, User
from reality_bracket.schemas.contestants import (
    ContestantCreate, ContestantBulkCreate, ContestantStatusUpdate, ContestantResponse,
)
from reality_bracket.api.deps import get_current_user, require_admin
from reality_bracket.api.seasons import get_season_or_404

router = APIRouter(prefix="/api/seasons/{season_id}/contestants", tags=["Contestants"])


async def get_contestant_or_404(db: AsyncSession, season_id: int, contestant_id: int) -> Contestant:
    result = await db.execute(
        select(Contestant).where(
            Contestant.id == contestant_id, Contestant.season_id == season_id
        )
    )
    contestant = result.scalar_one_or_none()
    if not contestant:
        raise HTTPException(status_code=404, detail="Contestant not found")
    return contestant


async def _name_taken(db: AsyncSession, season_id: int, name: str) -> bool:
    result = await db.execute(
        select(Contestant.id).where(Contestant.season_id == season_id, Contestant.name == name)
    )
    return result.scalar_one_or_none() is not None


@router.post("/bulk", response_model=list[ContestantResponse], status_code=201)
async def bulk_add_contestants(
    season_id: int,
    body: ContestantBulkCreate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    await get_season_or_404(db, season_id)
    names = [c.name for c in body.contestants]
    if len(set(names)) != len(names):
        raise HTTPException(status_code=400, detail="Duplicate contestant names in request")

    created = []
    for c in body.contestants:
        if await _name_taken(db, season_id, c.name):
            raise HTTPException(status_code=409, detail=f"Contestant '{c.name}' already exists")
        contestant = Contestant(season_id=season_id, **c.model_dump())
        db.add(contestant)
        created.append(contestant)
    await db.flush()
    for c in created:
        await db.refresh(c)
    return created


@router.post("", response_model=ContestantResponse, status_code=201)
async def add_contestant(
    season_id: int,
    body: ContestantCreate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    await get_season_or_404(db, season_id)
    if await _name_taken(db, season_id, body.name):
        raise HTTPException(status_code=409, detail=f"Contestant '{body.name}' already exists")

    contestant = Contestant(season_id=season_id, **body.model_dump())
    db.add(contestant)
    await db.flush()
    await db.refresh(contestant)
    return contestant


@router.get("", response_model=list[ContestantResponse])
async def list_contestants(
    season_id: int,
    status: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    await get_season_or_404(db, season_id)
    query = select(Contestant).where(Contestant.season_id == season_id)
    if status:
        try:
            query = query.where(Contestant.status == ContestantStatus(status))
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid status filter")
    result = await db.execute(query.order_by(Contestant.name))
    return result.scalars().all()


@router.get("/{contestant_id}", response_model=ContestantResponse)
async def get_contestant(
    season_id: int,
    contestant_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await get_contestant_or_404(db, season_id, contestant_id)


@router.patch("/{contestant_id}/status", response_model=ContestantResponse)
async def update_contestant_status(
    season_id: int,
    contestant_id: int,
    body: ContestantStatusUpdate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    contestant = await get_contestant_or_404(db, season_id, contestant_id)
    contestant.status = body.status
    if body.status == ContestantStatus.ACTIVE:
        contestant.eliminated_week = None
    elif body.eliminated_week is not None:
        contestant.eliminated_week = body.eliminated_week
    await db.flush()
    await db.refresh(contestant)
    return contestant
