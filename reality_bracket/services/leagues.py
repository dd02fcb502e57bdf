"""
League membership: invite codes, creating and joining leagues, and the
season's current week.
"""

import logging
import secrets
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from reality_bracket.core.config import get_settings
from reality_bracket.models.models import ActivityEvent, League, LeagueMember, RosterPick, User
from reality_bracket.schemas.activity import WeeklyActivity
from reality_bracket.services.activity import aggregate_activity, holders_from_picks

logger = logging.getLogger(__name__)
settings = get_settings()

INVITE_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


class InviteCodeExhausted(Exception):
    """Every generated invite code collided with an existing league."""


def generate_invite_code(length: int | None = None) -> str:
    length = length or settings.invite_code_length
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


def normalize_invite_code(code: str) -> str:
    return code.strip().upper()


async def invite_code_taken(db: AsyncSession, code: str) -> bool:
    result = await db.execute(select(League.id).where(League.invite_code == code))
    return result.scalar_one_or_none() is not None


async def unique_invite_code(db: AsyncSession) -> str:
    for _ in range(settings.invite_code_attempts):
        code = generate_invite_code()
        if not await invite_code_taken(db, code):
            return code
    raise InviteCodeExhausted(
        f"No free invite code after {settings.invite_code_attempts} attempts"
    )


async def create_league(
    db: AsyncSession,
    user: User,
    name: str,
    season_id: int,
    draft_date: datetime | None = None,
    display_name: str | None = None,
) -> League:
    """Create a league and seat its creator as the first member."""
    league = League(
        name=name,
        season_id=season_id,
        created_by_id=user.id,
        invite_code=await unique_invite_code(db),
        draft_date=draft_date,
    )
    db.add(league)
    await db.flush()
    await db.refresh(league)

    db.add(LeagueMember(
        league_id=league.id,
        user_id=user.id,
        display_name=display_name or user.username,
        total_points=0,
        draft_order=1,
    ))
    await db.flush()
    logger.info(f"League {league.id} '{league.name}' created by user {user.id}")
    return league


async def get_league_by_invite_code(db: AsyncSession, code: str) -> League | None:
    result = await db.execute(
        select(League).where(League.invite_code == normalize_invite_code(code))
    )
    return result.scalar_one_or_none()


async def get_membership(db: AsyncSession, league_id: int, user_id: int) -> LeagueMember | None:
    result = await db.execute(
        select(LeagueMember).where(
            LeagueMember.league_id == league_id,
            LeagueMember.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def join_league(
    db: AsyncSession, league: League, user: User, display_name: str | None = None
) -> LeagueMember:
    count = await member_count(db, league.id)
    member = LeagueMember(
        league_id=league.id,
        user_id=user.id,
        display_name=display_name or user.username,
        total_points=0,
        draft_order=count + 1,
    )
    db.add(member)
    await db.flush()
    await db.refresh(member)
    logger.info(f"User {user.id} joined league {league.id}")
    return member


async def member_count(db: AsyncSession, league_id: int) -> int:
    count = (await db.execute(
        select(func.count()).select_from(LeagueMember).where(LeagueMember.league_id == league_id)
    )).scalar()
    return count or 0


async def get_members(db: AsyncSession, league_id: int) -> list[LeagueMember]:
    """Members in join order, which is the order standings fall back to on ties."""
    result = await db.execute(
        select(LeagueMember)
        .where(LeagueMember.league_id == league_id)
        .order_by(LeagueMember.joined_at, LeagueMember.id)
    )
    return result.scalars().all()


async def league_activity(
    db: AsyncSession, league: League, user_id: int | None = None
) -> list[WeeklyActivity]:
    """Weekly points feed for a league, or for one member of it."""
    display_names = {m.user_id: m.display_name for m in await get_members(db, league.id)}

    picks_query = select(RosterPick).where(RosterPick.league_id == league.id)
    if user_id is not None:
        picks_query = picks_query.where(RosterPick.user_id == user_id)
    picks = (await db.execute(picks_query)).scalars().all()

    events_result = await db.execute(
        select(ActivityEvent)
        .options(selectinload(ActivityEvent.contestant))
        .where(ActivityEvent.season_id == league.season_id)
        .order_by(ActivityEvent.week_number.desc(), ActivityEvent.created_at.desc(), ActivityEvent.id.desc())
    )
    events = events_result.scalars().all()

    return aggregate_activity(events, holders_from_picks(picks, display_names))


async def current_week(db: AsyncSession, season_id: int) -> int:
    """Latest week with a recorded activity event, 0 before the first one."""
    week = (await db.execute(
        select(func.max(ActivityEvent.week_number)).where(ActivityEvent.season_id == season_id)
    )).scalar()
    return week or 0
