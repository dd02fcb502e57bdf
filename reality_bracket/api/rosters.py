import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from reality_bracket.core.database import get_db
from reality_bracket.models.models import (
    Contestant, ContestantStatus, League, LeagueMember, PickType, RosterPick, User,
)
from reality_bracket.schemas.activity import WeeklyActivity
from reality_bracket.schemas.rosters import PickCreate, RosterResponse
from reality_bracket.api.deps import get_current_user, get_league_or_404, require_membership
from reality_bracket.services import leagues as league_service
from reality_bracket.services.points import (
    calculate_pick_points, get_season_events, recalculate_league_points,
)
from reality_bracket.services.roster import FINAL3_SLOTS, project_roster, roster_contestant_ids

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/leagues/{league_id}/rosters", tags=["Rosters"])


async def _get_picks(
    db: AsyncSession, league_id: int, user_id: int, open_only: bool = False
) -> list[RosterPick]:
    query = (
        select(RosterPick)
        .options(selectinload(RosterPick.contestant))
        .where(RosterPick.league_id == league_id, RosterPick.user_id == user_id)
    )
    if open_only:
        query = query.where(RosterPick.active_through_week.is_(None))
    result = await db.execute(
        query.order_by(RosterPick.final3_position, RosterPick.picked_at, RosterPick.id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def _build_roster(db: AsyncSession, league: League, member: LeagueMember) -> RosterResponse:
    all_picks = await _get_picks(db, league.id, member.user_id)
    events = await get_season_events(db, league.season_id)
    points = calculate_pick_points(all_picks, events)
    open_picks = [p for p in all_picks if p.active_through_week is None]
    week = await league_service.current_week(db, league.season_id)

    return RosterResponse(
        league_id=league.id,
        user_id=member.user_id,
        display_name=member.display_name,
        slots=project_roster(open_picks, points),
        total_points=member.total_points or 0,
        current_week=week,
        next_boot_week=week + 1,
    )


async def _close_pick(db: AsyncSession, pick: RosterPick, week: int) -> None:
    """Take a pick off the roster while keeping any points it already earned."""
    if pick.active_from_week is not None and pick.active_from_week > week:
        # never covered a played week
        await db.delete(pick)
    else:
        pick.active_through_week = week


async def _get_member_or_404(db: AsyncSession, league_id: int, user_id: int) -> LeagueMember:
    member = await league_service.get_membership(db, league_id, user_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    return member


@router.get("/me", response_model=RosterResponse)
async def get_my_roster(
    league_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = await get_league_or_404(db, league_id)
    member = await require_membership(db, league_id, current_user.id)
    return await _build_roster(db, league, member)


@router.get("/{user_id}", response_model=RosterResponse)
async def get_member_roster(
    league_id: int,
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = await get_league_or_404(db, league_id)
    await require_membership(db, league_id, current_user.id)
    member = await _get_member_or_404(db, league_id, user_id)
    return await _build_roster(db, league, member)


@router.get("/{user_id}/activity", response_model=list[WeeklyActivity])
async def get_member_roster_activity(
    league_id: int,
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = await get_league_or_404(db, league_id)
    await require_membership(db, league_id, current_user.id)
    await _get_member_or_404(db, league_id, user_id)
    return await league_service.league_activity(db, league, user_id=user_id)


@router.post("/picks", response_model=RosterResponse, status_code=201)
async def add_pick(
    league_id: int,
    body: PickCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = await get_league_or_404(db, league_id)
    member = await require_membership(db, league_id, current_user.id)

    result = await db.execute(
        select(Contestant).where(
            Contestant.id == body.contestant_id, Contestant.season_id == league.season_id
        )
    )
    contestant = result.scalar_one_or_none()
    if not contestant:
        raise HTTPException(status_code=404, detail="Contestant not found in this league's season")
    if contestant.status != ContestantStatus.ACTIVE:
        raise HTTPException(status_code=400, detail=f"{contestant.name} is no longer in the game")

    open_picks = await _get_picks(db, league_id, current_user.id, open_only=True)
    slots = project_roster(open_picks)
    week = await league_service.current_week(db, league.season_id)

    if body.pick_type == PickType.FINAL3:
        final3_picks = [p for p in open_picks if p.pick_type == PickType.FINAL3]
        if body.slot_index is not None:
            target = slots[body.slot_index]
            replaced = next((p for p in final3_picks if p.id == target.pick_id), None)
        else:
            target, replaced = None, None
        if replaced is not None:
            position = replaced.final3_position
        else:
            if len(final3_picks) >= FINAL3_SLOTS:
                raise HTTPException(status_code=400, detail="Final 3 slots are full")
            # Compact positions so the new pick lands in the first empty slot
            for i, p in enumerate(final3_picks, 1):
                p.final3_position = i
            position = len(final3_picks) + 1
        superseded = [replaced] if replaced is not None else []
        excluded_slot = target
        pick = RosterPick(
            user_id=current_user.id,
            league_id=league_id,
            contestant_id=contestant.id,
            pick_type=PickType.FINAL3,
            final3_position=position,
            active_from_week=week + 1,
        )
    else:
        boot_week = week + 1
        superseded = [
            p for p in open_picks
            if p.pick_type == PickType.BOOT and p.week_number == boot_week
        ]
        excluded_slot = slots[FINAL3_SLOTS]
        pick = RosterPick(
            user_id=current_user.id,
            league_id=league_id,
            contestant_id=contestant.id,
            pick_type=PickType.BOOT,
            week_number=boot_week,
            active_from_week=boot_week,
        )

    on_roster = roster_contestant_ids(s for s in slots if s is not excluded_slot)
    if contestant.id in on_roster:
        raise HTTPException(status_code=409, detail=f"{contestant.name} is already on your roster")

    for old in superseded:
        await _close_pick(db, old, week)
    db.add(pick)
    await db.flush()
    logger.info(
        f"User {current_user.id} picked contestant {contestant.id} "
        f"({pick.pick_type.value}) in league {league_id}"
    )

    await recalculate_league_points(db, league)
    await db.refresh(member)
    return await _build_roster(db, league, member)


@router.delete("/picks/{pick_id}", status_code=204)
async def remove_pick(
    league_id: int,
    pick_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = await get_league_or_404(db, league_id)
    await require_membership(db, league_id, current_user.id)

    result = await db.execute(
        select(RosterPick).where(
            RosterPick.id == pick_id,
            RosterPick.league_id == league_id,
            RosterPick.user_id == current_user.id,
            RosterPick.active_through_week.is_(None),
        )
    )
    pick = result.scalar_one_or_none()
    if not pick:
        raise HTTPException(status_code=404, detail="Pick not found")

    week = await league_service.current_week(db, league.season_id)
    await _close_pick(db, pick, week)
    await db.flush()
    logger.info(f"User {current_user.id} removed pick {pick_id} in league {league_id}")
    await recalculate_league_points(db, league)
