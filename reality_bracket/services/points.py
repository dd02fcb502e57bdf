"""
Points maintenance: keeps LeagueMember.total_points in step with roster
picks and activity events.

Totals are recalculated from scratch for a whole league whenever a pick or an
activity event changes, so the cached value never drifts from the rules in
services.scoring.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from reality_bracket.models.models import ActivityEvent, League, LeagueMember, RosterPick
from reality_bracket.services.scoring import pick_points

logger = logging.getLogger(__name__)


async def get_season_events(db: AsyncSession, season_id: int) -> list[ActivityEvent]:
    result = await db.execute(
        select(ActivityEvent)
        .where(ActivityEvent.season_id == season_id)
        .order_by(ActivityEvent.week_number, ActivityEvent.created_at, ActivityEvent.id)
    )
    return result.scalars().all()


def calculate_pick_points(picks: list[RosterPick], events: list[ActivityEvent]) -> dict[int, int]:
    """{pick_id: points} for every pick."""
    return {pick.id: pick_points(pick, events) for pick in picks}


async def recalculate_league_points(db: AsyncSession, league: League) -> dict[int, int]:
    """
    Recompute every member's total for a league.
    Returns {user_id: total_points}.
    """
    events = await get_season_events(db, league.season_id)

    picks_result = await db.execute(
        select(RosterPick).where(RosterPick.league_id == league.id)
    )
    picks = picks_result.scalars().all()

    totals: dict[int, int] = {}
    for pick in picks:
        totals[pick.user_id] = totals.get(pick.user_id, 0) + pick_points(pick, events)

    members_result = await db.execute(
        select(LeagueMember).where(LeagueMember.league_id == league.id)
    )
    for member in members_result.scalars().all():
        member.total_points = totals.get(member.user_id, 0)
        totals[member.user_id] = member.total_points

    await db.flush()
    logger.info(f"Recalculated points for league {league.id} ({len(totals)} members)")
    return totals


async def recalculate_season_points(db: AsyncSession, season_id: int) -> dict:
    """Recompute totals for every league playing a season."""
    leagues_result = await db.execute(select(League).where(League.season_id == season_id))
    leagues = leagues_result.scalars().all()

    for league in leagues:
        await recalculate_league_points(db, league)

    return {"leagues_recalculated": len(leagues)}
