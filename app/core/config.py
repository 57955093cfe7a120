from pydantic_settings import BaseSettings
from typing import List
import os
from dotenv import load_dotenv

load_dotenv()

def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")

class Settings(BaseSettings):
    # App Settings
    APP_NAME: str = os.getenv("APP_NAME", "SalonBook")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # MongoDB Settings
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME: str = os.getenv("DB_NAME", "salonbook_db")

    # JWT Auth (tokens are issued by the identity provider in front of the API)
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your_secret_key_here")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Public booking pages / dashboard
    ]

    # Scheduling
    DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "America/New_York")
    DEFAULT_SERVICE_DURATION: int = int(os.getenv("DEFAULT_SERVICE_DURATION", "30"))
    HIDE_PAST_SLOTS: bool = _env_flag("HIDE_PAST_SLOTS", "true")
    # Blocks are only checked when listing slots unless this is turned on
    RECHECK_BLOCKS_ON_BOOKING: bool = _env_flag("RECHECK_BLOCKS_ON_BOOKING", "false")
    # Claims without a live appointment older than this are left over from an
    # interrupted booking and may be taken over
    STALE_CLAIM_SECONDS: int = int(os.getenv("STALE_CLAIM_SECONDS", "60"))

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
