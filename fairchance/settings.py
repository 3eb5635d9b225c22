"""
fairchance.settings
===================

Configuration settings for the Fair Chance assessment application.

This module provides centralized configuration options that can be used across
the application. It includes default values that can be overridden via
environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

# Database settings
# ---------------------------------------------------------------------------
DB_FILE = os.environ.get("FAIRCHANCE_DB_FILE", BASE_DIR / "fairchance.db")
DB_URL = f"sqlite:///{DB_FILE}"
DB_ECHO = os.environ.get("FAIRCHANCE_DB_ECHO", "False").lower() == "true"

# API settings
# ---------------------------------------------------------------------------
API_HOST = os.environ.get("FAIRCHANCE_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("FAIRCHANCE_API_PORT", "8000"))
API_DEBUG = os.environ.get("FAIRCHANCE_API_DEBUG", "False").lower() == "true"

# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("FAIRCHANCE_LOG_LEVEL", "INFO").upper()


# ---------------------------------------------------------------------------
# Pydantic settings model for the workflow
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Pydantic model for workflow settings, loaded from environment variables."""

    # Persisted state
    storage_key: str = Field(
        "fair-chance-assessment-data",
        description="Key the case record is stored under when no case id is given",
    )

    # Response window (business days)
    min_response_days: int = Field(5, description="Minimum response period for the candidate")
    max_response_days: int = Field(60, description="Longest response period a notice may grant")
    accuracy_extension_days: int = Field(
        5, description="Extra business days granted when report accuracy is challenged"
    )

    # Simulated events (seconds)
    send_delay: float = Field(1.5, description="Artificial delay of a simulated send")
    response_observation_delay: float = Field(
        5.0, description="Delay before a simulated candidate response becomes visible"
    )
    countdown_tick: float = Field(1.0, description="Countdown recomputation interval")

    class Config:
        """Configuration for the settings model."""
        env_prefix = "FAIRCHANCE_"
        env_file = ".env"  # load from .env file if present
        case_sensitive = False
        extra = "ignore"  # FAIRCHANCE_DB_FILE etc. are read above, not here


# Initialize settings
settings = Settings()
