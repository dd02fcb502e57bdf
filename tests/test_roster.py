from datetime import datetime

from reality_bracket.models.models import Contestant, ContestantStatus, PickType, RosterPick
from reality_bracket.services.roster import (
    current_boot_pick,
    project_roster,
    roster_contestant_ids,
)


def _contestant(cid, name=None):
    return Contestant(id=cid, season_id=1, name=name or f"Contestant {cid}", status=ContestantStatus.ACTIVE)


def _pick(pid, cid, pick_type=PickType.FINAL3, **kwargs):
    return RosterPick(id=pid, contestant_id=cid, pick_type=pick_type, contestant=_contestant(cid), **kwargs)


def test_no_picks_gives_four_empty_slots():
    slots = project_roster([])
    assert len(slots) == 4
    assert [s.type for s in slots] == [PickType.FINAL3] * 3 + [PickType.BOOT]
    assert [s.position for s in slots] == [1, 2, 3, 1]
    for slot in slots:
        assert slot.contestant is None
        assert slot.points == 0
        assert slot.pick_id is None


def test_full_roster_fills_slots_in_input_order():
    picks = [
        _pick(1, 10),
        _pick(2, 11),
        _pick(3, 12),
        _pick(4, 13, PickType.BOOT, week_number=2),
    ]
    slots = project_roster(picks, points={1: 10, 4: 15})

    assert [s.contestant.id for s in slots] == [10, 11, 12, 13]
    assert [s.pick_id for s in slots] == [1, 2, 3, 4]
    assert [s.points for s in slots] == [10, 0, 0, 15]
    assert slots[3].week_number == 2


def test_final3_picks_past_the_third_are_ignored():
    picks = [_pick(i, 100 + i) for i in range(1, 6)]
    slots = project_roster(picks)

    assert [s.contestant.id for s in slots[:3]] == [101, 102, 103]
    assert slots[3].contestant is None


def test_boot_slot_holds_latest_week():
    picks = [
        _pick(1, 10, PickType.BOOT, week_number=3),
        _pick(2, 11, PickType.BOOT, week_number=5),
        _pick(3, 12, PickType.BOOT, week_number=4),
    ]
    assert current_boot_pick(picks).id == 2
    assert project_roster(picks)[3].contestant.id == 11


def test_boot_pick_tie_breaks_on_picked_at_then_id():
    early = _pick(1, 10, PickType.BOOT, week_number=3, picked_at=datetime(2024, 10, 1, 12, 0))
    late = _pick(2, 11, PickType.BOOT, week_number=3, picked_at=datetime(2024, 10, 2, 12, 0))
    assert current_boot_pick([late, early]).id == 2

    a = _pick(5, 10, PickType.BOOT, week_number=3)
    b = _pick(6, 11, PickType.BOOT, week_number=3)
    assert current_boot_pick([b, a]).id == 6


def test_no_boot_pick():
    assert current_boot_pick([_pick(1, 10)]) is None


def test_pick_without_contestant_leaves_slot_empty():
    missing = RosterPick(id=1, contestant_id=99, pick_type=PickType.FINAL3)
    slots = project_roster([missing, _pick(2, 11)], points={1: 5})

    assert slots[0].contestant is None
    assert slots[0].points == 0
    assert slots[1].contestant.id == 11


def test_roster_contestant_ids():
    slots = project_roster([_pick(1, 10), _pick(2, 13, PickType.BOOT, week_number=1)])
    assert roster_contestant_ids(slots) == {10, 13}
