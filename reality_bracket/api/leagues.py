import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from reality_bracket.core.database import get_db
from reality_bracket.core.session import AuthSession
from reality_bracket.models.models import League, LeagueMember, Season, User
from reality_bracket.schemas.leagues import (
    LeagueCreate, LeagueJoin, DisplayNameUpdate, DraftOrderUpdate,
    LeagueResponse, LeagueSummary, MemberResponse,
)
from reality_bracket.schemas.activity import LeagueActivityResponse, WeeklyActivity
from reality_bracket.schemas.standings import StandingsResponse
from reality_bracket.api.deps import (
    get_current_user, get_session, get_league_or_404, require_membership,
)
from reality_bracket.api.seasons import get_season_or_404
from reality_bracket.services import leagues as league_service
from reality_bracket.services.activity import latest_week, weekly_points
from reality_bracket.services.standings import league_stats, podium, project_standings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/leagues", tags=["Leagues"])


async def _league_summary(
    db: AsyncSession, league: League, session: AuthSession | None = None
) -> LeagueSummary:
    members = await league_service.get_members(db, league.id)
    standings = project_standings(members, session=session)
    mine = next((s for s in standings if s.is_current_user), None)

    season_result = await db.execute(select(Season).where(Season.id == league.season_id))
    season = season_result.scalar_one()

    return LeagueSummary(
        **LeagueResponse.model_validate(league).model_dump(),
        season_name=season.name,
        member_count=len(members),
        rank=mine.rank if mine else None,
        points=mine.points if mine else 0,
        current_week=await league_service.current_week(db, league.season_id),
    )


@router.post("", response_model=LeagueResponse, status_code=201)
async def create_league(
    body: LeagueCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await get_season_or_404(db, body.season_id)
    try:
        league = await league_service.create_league(
            db,
            current_user,
            name=body.name,
            season_id=body.season_id,
            draft_date=body.draft_date,
            display_name=body.display_name,
        )
    except league_service.InviteCodeExhausted as e:
        logger.error(f"League creation failed: {e}")
        raise HTTPException(status_code=503, detail="Could not allocate an invite code, try again")
    return league


@router.get("", response_model=list[LeagueSummary])
async def list_my_leagues(
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(get_session),
    _: User = Depends(get_current_user),
):
    result = await db.execute(
        select(League)
        .join(LeagueMember, LeagueMember.league_id == League.id)
        .where(LeagueMember.user_id == session.user_id)
        .order_by(League.created_at.desc(), League.id.desc())
    )
    return [await _league_summary(db, league, session) for league in result.scalars().all()]


@router.post("/join", response_model=LeagueResponse)
async def join_league(
    body: LeagueJoin,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = await league_service.get_league_by_invite_code(db, body.invite_code)
    if not league:
        raise HTTPException(status_code=404, detail="No league with that invite code")

    if await league_service.get_membership(db, league.id, current_user.id):
        raise HTTPException(status_code=409, detail="Already a member of this league")

    await league_service.join_league(db, league, current_user, body.display_name)
    return league


@router.get("/{league_id}", response_model=LeagueSummary)
async def get_league(
    league_id: int,
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    league = await get_league_or_404(db, league_id)
    await require_membership(db, league_id, current_user.id)
    return await _league_summary(db, league, session)


@router.get("/{league_id}/members", response_model=list[MemberResponse])
async def list_members(
    league_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await get_league_or_404(db, league_id)
    await require_membership(db, league_id, current_user.id)
    result = await db.execute(
        select(LeagueMember)
        .where(LeagueMember.league_id == league_id)
        .order_by(LeagueMember.draft_order, LeagueMember.id)
    )
    return result.scalars().all()


@router.patch("/{league_id}/members/me", response_model=MemberResponse)
async def update_display_name(
    league_id: int,
    body: DisplayNameUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await get_league_or_404(db, league_id)
    member = await require_membership(db, league_id, current_user.id)
    member.display_name = body.display_name.strip()
    await db.flush()
    await db.refresh(member)
    return member


@router.put("/{league_id}/draft-order", response_model=list[MemberResponse])
async def set_draft_order(
    league_id: int,
    body: DraftOrderUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = await get_league_or_404(db, league_id)
    if league.created_by_id != current_user.id:
        raise HTTPException(status_code=403, detail="Only the league creator can set the draft order")

    members = await league_service.get_members(db, league_id)
    by_user = {m.user_id: m for m in members}
    if len(body.user_ids) != len(set(body.user_ids)) or set(body.user_ids) != set(by_user):
        raise HTTPException(status_code=400, detail="Draft order must list every member exactly once")

    for position, user_id in enumerate(body.user_ids, 1):
        by_user[user_id].draft_order = position
    await db.flush()
    return [by_user[user_id] for user_id in body.user_ids]


@router.get("/{league_id}/standings", response_model=StandingsResponse)
async def league_standings(
    league_id: int,
    db: AsyncSession = Depends(get_db),
    session: AuthSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    league = await get_league_or_404(db, league_id)
    await require_membership(db, league_id, current_user.id)

    members = await league_service.get_members(db, league_id)
    weeks = await league_service.league_activity(db, league)
    newest = latest_week(weeks)
    weekly = weekly_points(weeks, newest.week_number) if newest else {}

    standings = project_standings(members, session=session, weekly=weekly)
    top, rest = podium(standings)
    return StandingsResponse(
        league_id=league_id,
        standings=standings,
        podium=top,
        remaining=rest,
        stats=league_stats(standings, len(members)),
    )


@router.get("/{league_id}/activity", response_model=LeagueActivityResponse)
async def league_activity(
    league_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = await get_league_or_404(db, league_id)
    await require_membership(db, league_id, current_user.id)
    weeks = await league_service.league_activity(db, league)
    return LeagueActivityResponse(league_id=league_id, weeks=weeks)


@router.get("/{league_id}/activity/latest", response_model=WeeklyActivity | None)
async def latest_league_activity(
    league_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    league = await get_league_or_404(db, league_id)
    await require_membership(db, league_id, current_user.id)
    return latest_week(await league_service.league_activity(db, league))
