"""
Activity aggregation: joins contestant activity events with the users who
drafted those contestants and groups the points earned by week and by user.
"""

from collections import defaultdict
from typing import Iterable

from reality_bracket.models.models import enum_value
from reality_bracket.schemas.activity import (
    ActivityItem, PickHolder, UserWeekActivity, WeeklyActivity,
)
from reality_bracket.services.scoring import pick_covers_week, score_activity


def _contestant_name(event) -> str:
    contestant = getattr(event, "contestant", None)
    return contestant.name if contestant is not None else ""


def aggregate_activity(events: Iterable, holders: Iterable[PickHolder]) -> list[WeeklyActivity]:
    """
    Points earned per week per user.

    Weeks come newest first. Within a week, users are ordered by points earned
    that week (ties keep the order they first appeared in). Events for
    contestants nobody holds, and holdings that score 0 for an event, produce
    nothing.
    """
    holders_by_contestant: dict[int, list[PickHolder]] = defaultdict(list)
    for holder in holders:
        holders_by_contestant[holder.contestant_id].append(holder)

    # week -> user_id -> items, insertion ordered
    grouped: dict[int, dict[int, list[ActivityItem]]] = defaultdict(dict)
    for event in events:
        for holder in holders_by_contestant.get(event.contestant_id, []):
            if not pick_covers_week(
                holder.pick_type,
                event.week_number,
                holder.week_number,
                holder.active_from_week,
                holder.active_through_week,
            ):
                continue
            points = score_activity(holder.pick_type, event.activity_type)
            if points <= 0:
                continue
            grouped[event.week_number].setdefault(holder.user_id, []).append(ActivityItem(
                user_id=holder.user_id,
                display_name=holder.display_name,
                contestant_id=event.contestant_id,
                contestant_name=_contestant_name(event),
                pick_type=holder.pick_type,
                activity_type=enum_value(event.activity_type),
                points=points,
                week_number=event.week_number,
            ))

    weeks = []
    for week_number in sorted(grouped, reverse=True):
        users = [
            UserWeekActivity(
                user_id=user_id,
                display_name=items[0].display_name,
                points=sum(i.points for i in items),
                items=items,
            )
            for user_id, items in grouped[week_number].items()
        ]
        users.sort(key=lambda u: u.points, reverse=True)
        weeks.append(WeeklyActivity(week_number=week_number, users=users))
    return weeks


def latest_week(weeks: list[WeeklyActivity]) -> WeeklyActivity | None:
    return weeks[0] if weeks else None


def weekly_points(weeks: list[WeeklyActivity], week_number: int) -> dict[int, int]:
    """user_id -> points earned in the given week."""
    for week in weeks:
        if week.week_number == week_number:
            return {u.user_id: u.points for u in week.users}
    return {}


def holders_from_picks(picks: Iterable, display_names: dict[int, str]) -> list[PickHolder]:
    """Pick holders for roster picks, named by league display name."""
    return [
        PickHolder(
            user_id=p.user_id,
            display_name=display_names.get(p.user_id, ""),
            contestant_id=p.contestant_id,
            pick_type=p.pick_type,
            week_number=p.week_number,
            active_from_week=p.active_from_week,
            active_through_week=p.active_through_week,
        )
        for p in picks
    ]
