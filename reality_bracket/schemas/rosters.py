from pydantic import BaseModel, Field
from datetime import datetime

from reality_bracket.models.models import PickType
from reality_bracket.schemas.contestants import ContestantResponse


class PickCreate(BaseModel):
    contestant_id: int
    pick_type: PickType
    slot_index: int | None = Field(default=None, ge=0, le=2)  # final3 slots only


class PickResponse(BaseModel):
    id: int
    user_id: int
    league_id: int
    contestant_id: int
    pick_type: PickType
    week_number: int | None = None
    final3_position: int | None = None
    active_from_week: int | None = None
    active_through_week: int | None = None
    picked_at: datetime | None = None

    model_config = {"from_attributes": True}


class RosterSlot(BaseModel):
    type: PickType
    position: int  # 1..3 for final3, 1 for boot
    contestant: ContestantResponse | None = None
    points: int = 0
    pick_id: int | None = None
    week_number: int | None = None


class RosterResponse(BaseModel):
    league_id: int
    user_id: int
    display_name: str
    slots: list[RosterSlot]
    total_points: int
    current_week: int
    next_boot_week: int
