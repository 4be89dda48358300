"""Application configuration using pydantic-settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    model_config = SettingsConfigDict(
        env_prefix="HEATMIX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"

    # Building defaults
    story_height: float = 2.8         # meters
    indoor_temperature: float = Field(default=21.0, gt=5.0)  # °C, above every zone average

    # Drawing area size in cells
    max_grid_width: int = 100
    max_grid_depth: int = 67

    # Optional JSON file overriding the built-in device templates
    device_templates_path: Optional[Path] = None

    # Prices (€/kWh) and emission factors (g CO2/kWh)
    electricity_cost_range: tuple[float, float] = (0.05, 0.40)
    district_heating_cost_range: tuple[float, float] = (0.04, 0.15)
    electricity_co2_range: tuple[float, float] = (50.0, 400.0)
    district_heating_co2_range: tuple[float, float] = (50.0, 250.0)

    electricity_cost: float = 0.15
    district_heating_cost: float = 0.09
    electricity_co2: float = 150.0
    district_heating_co2: float = 160.0


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


def configure_logging(level: str = "WARNING") -> None:
    """Attach a single stream handler to the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
