"""
Recording contestant activity as the show airs.

Each recorded event also moves the contestant's status along and refreshes
the cached totals of every league playing the season.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from reality_bracket.models.models import (
    ActivityEvent, ActivityType, Contestant, ContestantStatus, enum_value,
)
from reality_bracket.services.points import recalculate_season_points

logger = logging.getLogger(__name__)

# activity -> status the contestant moves to
STATUS_AFTER_ACTIVITY = {
    ActivityType.ELIMINATED.value: ContestantStatus.ELIMINATED,
    ActivityType.MEDICAL_EVACUATED.value: ContestantStatus.ELIMINATED,
    ActivityType.MADE_JURY.value: ContestantStatus.JURY,
    ActivityType.MADE_FINAL_THREE.value: ContestantStatus.FINAL3,
}

LEAVES_GAME = {ActivityType.ELIMINATED.value, ActivityType.MEDICAL_EVACUATED.value}


def apply_status_change(contestant: Contestant, activity_type, week_number: int) -> bool:
    """Update the contestant's status for an activity. Returns True if anything changed."""
    value = enum_value(activity_type)
    new_status = STATUS_AFTER_ACTIVITY.get(value)
    if new_status is None:
        return False
    contestant.status = new_status
    if value in LEAVES_GAME:
        contestant.eliminated_week = week_number
    return True


async def record_activity(
    db: AsyncSession,
    season_id: int,
    contestant: Contestant,
    week_number: int,
    activity_type: ActivityType,
) -> ActivityEvent:
    event = ActivityEvent(
        season_id=season_id,
        contestant_id=contestant.id,
        week_number=week_number,
        activity_type=activity_type,
    )
    db.add(event)
    if apply_status_change(contestant, activity_type, week_number):
        logger.info(f"Contestant {contestant.id} is now {enum_value(contestant.status)}")
    await db.flush()
    await db.refresh(event)

    logger.info(
        f"Recorded {enum_value(activity_type)} for contestant {contestant.id} in week {week_number}"
    )
    await recalculate_season_points(db, season_id)
    return event
