from pydantic import BaseModel
import os

from ..services.charging_math import (
    DEFAULT_BATTERY_CAPACITY_KWH,
    DEFAULT_EFFICIENCY,
    DEFAULT_PRICE_PER_KWH,
    POWER_TOLERANCE_RATIO,
)


class Settings(BaseModel):
    # Shared with the auth service that issues access tokens (env var JWT_SECRET)
    SECRET_KEY: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
    ALGORITHM: str = "HS256"
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./evcharge.db")

    # Environment and startup
    ENV: str = os.getenv("ENV", "dev")  # dev, staging, prod
    RUN_MIGRATIONS_ON_STARTUP: bool = os.getenv("RUN_MIGRATIONS_ON_STARTUP", "false").lower() == "true"

    # Charging session accounting; defaults live in services/charging_math.py
    CHARGING_EFFICIENCY: float = float(os.getenv("CHARGING_EFFICIENCY", DEFAULT_EFFICIENCY))
    ASSUMED_BATTERY_CAPACITY_KWH: float = float(os.getenv("ASSUMED_BATTERY_CAPACITY_KWH", DEFAULT_BATTERY_CAPACITY_KWH))
    DEFAULT_PRICE_PER_KWH: float = float(os.getenv("DEFAULT_PRICE_PER_KWH", DEFAULT_PRICE_PER_KWH))  # Naira
    POWER_TOLERANCE_RATIO: float = float(os.getenv("POWER_TOLERANCE_RATIO", POWER_TOLERANCE_RATIO))
    STATS_MONTH_WINDOW: int = int(os.getenv("STATS_MONTH_WINDOW", "12"))

    @property
    def database_url(self) -> str:
        """Alias for DATABASE_URL used by the database layer."""
        return self.DATABASE_URL


settings = Settings()
