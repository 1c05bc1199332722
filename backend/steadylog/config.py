# backend configuration
# loads env vars for mongodb, token verification, and insight windows

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent.parent / ".env")


class Settings(BaseSettings):
    # mongodb
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "steadylog_db")

    # tokens are issued by the identity provider, we only verify them
    JWT_SECRET: str = os.getenv("JWT_SECRET", "steadylog-dev-secret-change-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "authenticated")

    # cors
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # insights are bucketed in this zone (hour of day, day of week, calendar day)
    LOCAL_TIMEZONE: str = os.getenv("LOCAL_TIMEZONE", "UTC")

    # calendar heatmap starts on the first of the month holding today - lookback
    HEATMAP_LOOKBACK_DAYS: int = 60
    HEATMAP_WINDOW_DAYS: int = 90
    TREND_WINDOW_DAYS: int = 30

    # family home screen
    RECENT_EVENTS_LIMIT: int = 3

    # connection codes look like "#A1B2C3"
    CONNECTION_CODE_LENGTH: int = 6

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
