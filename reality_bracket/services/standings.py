"""
League standings: ranks members by the cumulative totals the store keeps.
Totals are read as given, never recomputed here.
"""

import math
from typing import Iterable

from reality_bracket.core.session import AuthSession
from reality_bracket.schemas.standings import LeagueStats, StandingEntry

PODIUM_SIZE = 3


def project_standings(
    members: Iterable,
    session: AuthSession | None = None,
    weekly: dict[int, int] | None = None,
) -> list[StandingEntry]:
    """
    Rank members by total points, highest first.

    The sort is stable: members with equal totals keep the order they were
    passed in. Rank is the 1-based position after sorting.
    """
    weekly = weekly or {}
    ordered = sorted(members, key=lambda m: m.total_points or 0, reverse=True)
    return [
        StandingEntry(
            rank=i,
            user_id=m.user_id,
            display_name=m.display_name,
            points=m.total_points or 0,
            weekly_points=weekly.get(m.user_id, 0),
            is_current_user=session.is_user(m.user_id) if session else False,
        )
        for i, m in enumerate(ordered, 1)
    ]


def podium(standings: list[StandingEntry]) -> tuple[list[StandingEntry], list[StandingEntry]]:
    """Split standings into the top three and everyone else."""
    return standings[:PODIUM_SIZE], standings[PODIUM_SIZE:]


def league_stats(standings: list[StandingEntry], member_count: int | None = None) -> LeagueStats:
    total_members = member_count if member_count is not None else len(standings)
    if not standings:
        return LeagueStats(highest_score=0, average_score=0, total_members=total_members)
    return LeagueStats(
        highest_score=standings[0].points,
        # halves round up
        average_score=math.floor(sum(s.points for s in standings) / len(standings) + 0.5),
        total_members=total_members,
    )
