# /app/core/config.py

"""
Central configuration for the attendance backend.

Values are read once from the environment (a local `.env` file is honoured
for development) and exposed through the `settings` singleton.
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def get_list(key: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(key, default).split(",") if item.strip()]


class Settings:
    # --- Database ---
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./attendance.db")

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # --- CORS ---
    CORS_ALLOW_ORIGINS: List[str] = get_list("CORS_ALLOW_ORIGINS", "*")

    # --- Class conventions ---
    # Not enforced structurally; exceeding it only logs a warning.
    MAX_CRS_PER_CLASS: int = int(os.getenv("MAX_CRS_PER_CLASS", "2"))
    PERIODS_PER_DAY: int = int(os.getenv("PERIODS_PER_DAY", "9"))


settings = Settings()
