from pydantic import BaseModel, Field
from datetime import datetime

from reality_bracket.models.models import SeasonStatus


class SeasonCreate(BaseModel):
    number: int = Field(..., gt=0)
    name: str = Field(..., max_length=100)
    start_date: datetime | None = None
    end_date: datetime | None = None
    image_url: str | None = None


class SeasonStatusUpdate(BaseModel):
    status: str


class SeasonResponse(BaseModel):
    id: int
    number: int
    name: str
    status: SeasonStatus
    start_date: datetime | None = None
    end_date: datetime | None = None
    image_url: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class SeasonDetailResponse(SeasonResponse):
    contestant_count: int = 0
    league_count: int = 0
    current_week: int = 0
