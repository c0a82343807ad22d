"""Environment-driven settings for the tennis_players service."""

import os

DATABASE_PATH = os.getenv("TENNIS_PLAYERS_DB_PATH", "tennis_players.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
ENVIRONMENT = os.getenv("APP_ENV", "development")
