"""
Roster projection: turns a user's flat list of picks into the fixed
four-slot roster (three Final 3 slots, then one Next Boot slot).

The roster is rebuilt from picks on every read and never stored.
"""

from typing import Iterable

from reality_bracket.models.models import PickType, enum_value
from reality_bracket.schemas.contestants import ContestantResponse
from reality_bracket.schemas.rosters import RosterSlot

FINAL3_SLOTS = 3


def _picked_at_key(pick) -> float:
    return pick.picked_at.timestamp() if pick.picked_at is not None else 0.0


def current_boot_pick(picks: Iterable):
    """
    The boot pick that occupies the boot slot, or None.

    Users keep one boot pick per week, so the current one is the pick for the
    latest week; picks for the same week fall back to picked_at, then id.
    """
    boot_picks = [p for p in picks if enum_value(p.pick_type) == PickType.BOOT.value]
    if not boot_picks:
        return None
    return max(
        boot_picks,
        key=lambda p: (p.week_number or 0, _picked_at_key(p), p.id or 0),
    )


def empty_roster() -> list[RosterSlot]:
    slots = [RosterSlot(type=PickType.FINAL3, position=i) for i in range(1, FINAL3_SLOTS + 1)]
    slots.append(RosterSlot(type=PickType.BOOT, position=1))
    return slots


def project_roster(picks: Iterable, points: dict[int, int] | None = None) -> list[RosterSlot]:
    """
    Build the four roster slots from a user's picks.

    Final 3 picks fill the Final 3 slots in the order they were given; anything
    past the third is ignored. The boot slot holds current_boot_pick(). Slots
    without a pick (or whose pick has no resolved contestant) stay empty with
    0 points.
    """
    picks = list(picks)
    points = points or {}
    slots = empty_roster()

    final3_picks = [p for p in picks if enum_value(p.pick_type) == PickType.FINAL3.value]
    for index, pick in enumerate(final3_picks[:FINAL3_SLOTS]):
        if pick.contestant is None:
            continue
        slot = slots[index]
        slot.contestant = ContestantResponse.model_validate(pick.contestant)
        slot.points = points.get(pick.id, 0)
        slot.pick_id = pick.id

    boot = current_boot_pick(picks)
    if boot is not None and boot.contestant is not None:
        slot = slots[FINAL3_SLOTS]
        slot.contestant = ContestantResponse.model_validate(boot.contestant)
        slot.points = points.get(boot.id, 0)
        slot.pick_id = boot.id
        slot.week_number = boot.week_number

    return slots


def roster_contestant_ids(slots: Iterable[RosterSlot]) -> set[int]:
    return {s.contestant.id for s in slots if s.contestant is not None}
