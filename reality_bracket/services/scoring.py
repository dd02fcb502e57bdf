"""
Scoring rule table: what a contestant's activity is worth to the user who
drafted them, depending on the slot they were drafted into.

Final 3 picks earn points while the contestant keeps surviving; Next Boot picks
only pay out when the contestant leaves the game. Every function here is pure
and total: unknown pick types or activity types are worth nothing.
"""

from typing import Iterable

from reality_bracket.models.models import ActivityType, PickType, enum_value


POINTS_TABLE: dict[str, dict[str, int]] = {
    PickType.BOOT.value: {
        ActivityType.ELIMINATED.value: 15,
        ActivityType.MEDICAL_EVACUATED.value: 15,
    },
    PickType.FINAL3.value: {
        ActivityType.TRIBAL_IMMUNITY.value: 5,
        ActivityType.INDIVIDUAL_IMMUNITY.value: 10,
        ActivityType.IMMUNITY.value: 10,
        ActivityType.MADE_JURY.value: 5,
        ActivityType.MADE_FINAL_THREE.value: 5,
    },
}

ACTIVITY_LABELS = {
    ActivityType.TRIBAL_IMMUNITY.value: "Tribal Immunity",
    ActivityType.INDIVIDUAL_IMMUNITY.value: "Individual Immunity",
    ActivityType.IMMUNITY.value: "Immunity",
    ActivityType.ELIMINATED.value: "Eliminated",
    ActivityType.MEDICAL_EVACUATED.value: "Medical Evacuation",
    ActivityType.MADE_MERGE.value: "Made Merge",
    ActivityType.MADE_FINAL_THREE.value: "Made Final 3",
    ActivityType.MADE_JURY.value: "Made Jury",
}


def score_activity(pick_type, activity_type) -> int:
    """Points a single activity event is worth to a pick of the given type."""
    return POINTS_TABLE.get(enum_value(pick_type), {}).get(enum_value(activity_type), 0)


def format_activity_type(activity_type) -> str:
    value = enum_value(activity_type)
    return ACTIVITY_LABELS.get(value, value)


def pick_covers_week(
    pick_type,
    event_week: int,
    week_number: int | None = None,
    active_from_week: int | None = None,
    active_through_week: int | None = None,
) -> bool:
    """
    Whether a holding counts for an event in event_week.

    A boot pick made for a specific week only covers that week. A pick only
    covers weeks inside its [active_from_week, active_through_week] window;
    an unset bound is open.
    """
    if active_from_week is not None and event_week < active_from_week:
        return False
    if active_through_week is not None and event_week > active_through_week:
        return False
    if enum_value(pick_type) == PickType.BOOT.value and week_number is not None:
        return event_week == week_number
    return True


def pick_points(pick, events: Iterable) -> int:
    """
    Total points for one roster pick over a collection of activity events.

    Only events for the pick's contestant that the pick covers are counted.
    """
    total = 0
    for event in events:
        if event.contestant_id != pick.contestant_id:
            continue
        if not pick_covers_week(
            pick.pick_type,
            event.week_number,
            pick.week_number,
            pick.active_from_week,
            pick.active_through_week,
        ):
            continue
        total += score_activity(pick.pick_type, event.activity_type)
    return total
