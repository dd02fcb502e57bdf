from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey, Text,
    UniqueConstraint, Enum as SAEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from reality_bracket.core.database import Base
import enum


# --- Enums ---

class SeasonStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"          # Season airing, events recorded weekly
    COMPLETED = "completed"


class ContestantStatus(str, enum.Enum):
    ACTIVE = "active"
    ELIMINATED = "eliminated"
    JURY = "jury"
    FINAL3 = "final3"


class PickType(str, enum.Enum):
    FINAL3 = "final3"  # Predicts the contestant reaches the final three
    BOOT = "boot"      # Predicts the contestant is the next one voted out


class ActivityType(str, enum.Enum):
    TRIBAL_IMMUNITY = "tribal_immunity"
    INDIVIDUAL_IMMUNITY = "individual_immunity"
    IMMUNITY = "immunity"
    ELIMINATED = "eliminated"
    MEDICAL_EVACUATED = "medical_evacuated"
    MADE_MERGE = "made_merge"
    MADE_JURY = "made_jury"
    MADE_FINAL_THREE = "made_final_three"


class LeagueStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    DRAFT_OPEN = "draft_open"
    DRAFT_CLOSED = "draft_closed"
    COMPLETED = "completed"


def enum_value(value):
    """Plain string for an enum member or a raw string column value."""
    return value.value if isinstance(value, enum.Enum) else value


# --- Models ---

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False)
    username = Column(String(50), unique=True, nullable=False)
    password_hash = Column(String(200), nullable=False)
    is_admin = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Season(Base):
    __tablename__ = "seasons"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, unique=True, nullable=False)
    name = Column(String(100), nullable=False)  # e.g. "Survivor 47"
    status = Column(SAEnum(SeasonStatus), default=SeasonStatus.UPCOMING, nullable=False)
    start_date = Column(DateTime)
    end_date = Column(DateTime)
    image_url = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Contestant(Base):
    __tablename__ = "contestants"

    id = Column(Integer, primary_key=True, index=True)
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=False)
    name = Column(String(100), nullable=False)
    age = Column(Integer)
    occupation = Column(String(200))
    hometown = Column(String(200))
    image_url = Column(Text)
    status = Column(SAEnum(ContestantStatus), default=ContestantStatus.ACTIVE, nullable=False)
    eliminated_week = Column(Integer)

    __table_args__ = (
        UniqueConstraint("season_id", "name", name="uq_contestant_season_name"),
    )


class League(Base):
    __tablename__ = "leagues"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    invite_code = Column(String(16), unique=True, nullable=False, index=True)
    draft_date = Column(DateTime)
    status = Column(SAEnum(LeagueStatus), default=LeagueStatus.NOT_STARTED, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class LeagueMember(Base):
    """
    A user's seat in a league. total_points is maintained by the points
    service whenever picks or activity events change; it is never summed
    on read.
    """
    __tablename__ = "league_members"

    id = Column(Integer, primary_key=True, index=True)
    league_id = Column(Integer, ForeignKey("leagues.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    display_name = Column(String(100), nullable=False)
    total_points = Column(Integer, default=0, nullable=False)
    draft_order = Column(Integer)
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("league_id", "user_id", name="uq_league_member"),
    )


class RosterPick(Base):
    """
    One drafted contestant in one roster slot. The contestant and slot of a
    pick never change: a new pick supersedes the old one, which only has its
    scoring window closed (active_through_week) so points it already earned
    stay earned. Boot picks keep one row per week as history.
    """
    __tablename__ = "roster_picks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    league_id = Column(Integer, ForeignKey("leagues.id"), nullable=False)
    contestant_id = Column(Integer, ForeignKey("contestants.id"), nullable=False)
    pick_type = Column(SAEnum(PickType), nullable=False)
    week_number = Column(Integer)  # Boot picks only
    final3_position = Column(Integer)  # 1..3, final3 picks only
    active_from_week = Column(Integer)  # Events before this week don't score
    active_through_week = Column(Integer)  # Set once superseded; events after it don't score
    picked_at = Column(DateTime(timezone=True), server_default=func.now())

    contestant = relationship("Contestant")


class ActivityEvent(Base):
    """Append-only record of something a contestant did in a given week."""
    __tablename__ = "activity_events"

    id = Column(Integer, primary_key=True, index=True)
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=False)
    contestant_id = Column(Integer, ForeignKey("contestants.id"), nullable=False)
    week_number = Column(Integer, nullable=False)
    activity_type = Column(SAEnum(ActivityType), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    contestant = relationship("Contestant")
