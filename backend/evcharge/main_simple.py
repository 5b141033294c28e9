import sys
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file before settings are read
load_dotenv()

from .core.config import settings  # noqa: E402
from .core.env import get_env_name  # noqa: E402
from .exception_handlers import register_exception_handlers  # noqa: E402
from .middleware.logging import LoggingMiddleware  # noqa: E402
from .routers import charging, stations  # noqa: E402

# Configure logging for production visibility
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

# Use a consistent logger name for all app logs
logger = logging.getLogger("evcharge")


@asynccontextmanager
async def lifespan(app):
    """Manage application lifespan events"""
    logger.info(f"Starting EV charging backend (env={get_env_name()})")
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        from .run_migrations import run_migrations
        run_migrations()
    yield
    logger.info("Shutting down EV charging backend")


app = FastAPI(title="EV Charging API", lifespan=lifespan)

app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(charging.router, prefix="/v1/charging", tags=["charging"])
app.include_router(stations.router, prefix="/v1/stations", tags=["stations"])


@app.get("/health")
async def health():
    return {"status": "ok"}
