import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from reality_bracket.core.config import get_settings
from reality_bracket.core.database import engine, Base
from reality_bracket.api import auth, seasons, contestants, activity, leagues, rosters

# Import all models so Base.metadata is populated for create_all
import reality_bracket.models.models  # noqa: F401

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # create_all skips tables that already exist
    logger.info("Starting up, creating database tables...")
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        raise
    logger.info("Database tables ready.")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Survivor fantasy leagues: Final 3 and Next Boot rosters, weekly activity and standings.",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(seasons.router)
app.include_router(contestants.router)
app.include_router(activity.router)
app.include_router(leagues.router)
app.include_router(rosters.router)


@app.get("/health")
async def health():
    return {"status": "healthy", "app": settings.app_name}
