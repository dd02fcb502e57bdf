from pydantic import BaseModel, Field

from reality_bracket.models.models import ContestantStatus


class ContestantCreate(BaseModel):
    name: str = Field(..., max_length=100)
    age: int | None = None
    occupation: str | None = None
    hometown: str | None = None
    image_url: str | None = None


class ContestantBulkCreate(BaseModel):
    contestants: list[ContestantCreate]


class ContestantStatusUpdate(BaseModel):
    status: ContestantStatus
    eliminated_week: int | None = Field(default=None, ge=1)


class ContestantResponse(BaseModel):
    id: int
    season_id: int | None = None
    name: str
    age: int | None = None
    occupation: str | None = None
    hometown: str | None = None
    image_url: str | None = None
    status: ContestantStatus = ContestantStatus.ACTIVE
    eliminated_week: int | None = None

    model_config = {"from_attributes": True}
