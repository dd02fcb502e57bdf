"""
Seed script: creates an admin user and Season 47 with its cast.
Run with: python -m reality_bracket.scripts.seed
"""
import asyncio
import logging

from sqlalchemy import select
from reality_bracket.core.config import get_settings
from reality_bracket.core.database import AsyncSessionLocal, engine, Base
from reality_bracket.core.security import hash_password
from reality_bracket.models.models import (
    Contestant, ContestantStatus, Season, SeasonStatus, User,
)

logger = logging.getLogger(__name__)

ADMIN = {"email": "admin@realitybracket.app", "username": "admin"}

SEASON_47 = {"number": 47, "name": "Survivor 47", "status": SeasonStatus.ACTIVE}

CONTESTANTS_47 = [
    {"name": "Rachel LaMont", "age": 34, "occupation": "Graphic Designer"},
    {"name": "Sam Phalen", "age": 24, "occupation": "Sports Reporter"},
    {"name": "Genevieve Mushaluk", "age": 33, "occupation": "Corporate Lawyer"},
    {"name": "Kyle Ostwald", "age": 31, "occupation": "Construction Worker",
     "status": ContestantStatus.ELIMINATED, "eliminated_week": 9},
    {"name": "Andy Rueda", "age": 31, "occupation": "AI Researcher",
     "status": ContestantStatus.ELIMINATED, "eliminated_week": 8},
]


async def seed(password: str):
    # Create tables if they don't exist
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        result = await db.execute(select(User).where(User.username == ADMIN["username"]))
        if result.scalar_one_or_none():
            logger.info(f"User '{ADMIN['username']}' already exists, skipping.")
        else:
            db.add(User(**ADMIN, password_hash=hash_password(password), is_admin=True))
            logger.info(f"Created admin user '{ADMIN['username']}'")

        result = await db.execute(select(Season).where(Season.number == SEASON_47["number"]))
        if result.scalar_one_or_none():
            logger.info("Season 47 already exists, skipping.")
        else:
            season = Season(**SEASON_47)
            db.add(season)
            await db.flush()
            await db.refresh(season)

            for data in CONTESTANTS_47:
                db.add(Contestant(season_id=season.id, **data))
            logger.info(f"Created Season 47 with {len(CONTESTANTS_47)} contestants.")

        await db.commit()

    await engine.dispose()
    logger.info("Seed complete!")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed(get_settings().admin_key))
