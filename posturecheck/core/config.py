"""Core configuration and constants.

Uses environment variables for configuration. Follows PEP8 and Google style docstrings.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal
import os

from pydantic import BaseModel


class Settings(BaseModel):
    """Application settings loaded from environment variables.

    Attributes:
        app_name: App display name.
        environment: Runtime environment.
        api_host: Host for FastAPI server.
        api_port: Port for FastAPI server.
        log_level: Logging level string.
        log_file: Optional path for a rotating log file.
        exposed_origins: Origins allowed by CORS.
        squat_min_confidence: Joint score gate for squat frames.
        desk_min_confidence: Joint score gate for desk frames.
        back_angle_min: Hunched-back threshold in degrees.
        neck_angle_min: Neck-bend threshold in degrees.
        spine_angle_min: Slouching threshold in degrees.
        spine_reference_offset: Normalized offset of the vertical point below the hip.
    """

    app_name: str = "Posture Detection Backend"
    environment: Literal["dev", "prod", "test"] = os.getenv("ENVIRONMENT", "dev")  # type: ignore[assignment]

    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("PORT", "5000"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str | None = os.getenv("LOG_FILE") or None

    # CORS
    exposed_origins: list[str] = (
        os.getenv("EXPOSED_ORIGINS", "*").split(",") if os.getenv("EXPOSED_ORIGINS") else ["*"]
    )

    # Posture calibration
    squat_min_confidence: float = float(os.getenv("SQUAT_MIN_CONFIDENCE", "0.2"))
    desk_min_confidence: float = float(os.getenv("DESK_MIN_CONFIDENCE", "0.5"))
    back_angle_min: float = float(os.getenv("BACK_ANGLE_MIN", "150"))
    neck_angle_min: float = float(os.getenv("NECK_ANGLE_MIN", "150"))
    spine_angle_min: float = float(os.getenv("SPINE_ANGLE_MIN", "160"))
    spine_reference_offset: float = float(os.getenv("SPINE_REFERENCE_OFFSET", "0.1"))


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
