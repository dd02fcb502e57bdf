from pydantic import BaseModel


class StandingEntry(BaseModel):
    rank: int
    user_id: int
    display_name: str
    points: int
    weekly_points: int = 0
    is_current_user: bool = False


class LeagueStats(BaseModel):
    highest_score: int
    average_score: int
    total_members: int


class StandingsResponse(BaseModel):
    league_id: int
    standings: list[StandingEntry]
    podium: list[StandingEntry]
    remaining: list[StandingEntry]
    stats: LeagueStats
