from pydantic import BaseModel, Field
from datetime import datetime

from reality_bracket.models.models import ActivityType, PickType


class ActivityEventCreate(BaseModel):
    contestant_id: int
    week_number: int = Field(..., ge=1)
    activity_type: ActivityType


class ActivityEventResponse(BaseModel):
    id: int
    season_id: int
    contestant_id: int
    contestant_name: str = ""
    week_number: int
    activity_type: ActivityType
    created_at: datetime | None = None


class PickHolder(BaseModel):
    """Who holds a contestant, and in which slot type."""
    user_id: int
    display_name: str
    contestant_id: int
    pick_type: PickType
    week_number: int | None = None
    active_from_week: int | None = None
    active_through_week: int | None = None


class ActivityItem(BaseModel):
    user_id: int
    display_name: str
    contestant_id: int
    contestant_name: str = ""
    pick_type: PickType
    activity_type: str
    points: int
    week_number: int


class UserWeekActivity(BaseModel):
    user_id: int
    display_name: str
    points: int
    items: list[ActivityItem]


class WeeklyActivity(BaseModel):
    week_number: int
    users: list[UserWeekActivity]


class LeagueActivityResponse(BaseModel):
    league_id: int
    weeks: list[WeeklyActivity]
