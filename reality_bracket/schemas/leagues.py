from pydantic import BaseModel, Field
from datetime import datetime

from reality_bracket.models.models import LeagueStatus


class LeagueCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    season_id: int
    draft_date: datetime | None = None
    display_name: str | None = Field(default=None, max_length=100)


class LeagueJoin(BaseModel):
    invite_code: str = Field(..., min_length=1, max_length=16)
    display_name: str | None = Field(default=None, max_length=100)


class DisplayNameUpdate(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=100)


class DraftOrderUpdate(BaseModel):
    user_ids: list[int]


class LeagueResponse(BaseModel):
    id: int
    name: str
    season_id: int
    created_by_id: int
    invite_code: str
    draft_date: datetime | None = None
    status: LeagueStatus
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class LeagueSummary(LeagueResponse):
    """A league as seen from one member's home screen."""
    season_name: str = ""
    member_count: int = 0
    rank: int | None = None
    points: int = 0
    current_week: int = 0


class MemberResponse(BaseModel):
    id: int
    league_id: int
    user_id: int
    display_name: str
    total_points: int
    draft_order: int | None = None
    joined_at: datetime | None = None

    model_config = {"from_attributes": True}
