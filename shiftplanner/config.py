"""Configuration module for constants, shift pay figures, and settings."""

from typing import Dict, Optional
from pydantic_settings import BaseSettings


# Schedule constants
MIN_DAY = 1
MAX_DAY = 30
DAYS_IN_MONTH = MAX_DAY - MIN_DAY + 1


# Shift pay figures (gross, net) per shift size.
# Net is what lands in the account and is what the optimizer works with.
DEFAULT_SHIFT_TYPES: Dict[str, Dict[str, float]] = {
    "large": {
        "gross": 94.5,
        "net": 86.5,
    },
    "medium": {
        "gross": 75.5,
        "net": 67.5,
    },
    "small": {
        "gross": 64.0,
        "net": 56.0,
    },
}

SHIFT_NAMES = ["small", "medium", "large"]
SHIFT_SEPARATOR = "+"


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    # Optimizer defaults used when a request omits them
    DEFAULT_POPULATION_SIZE: int = 200
    DEFAULT_GENERATIONS: int = 500
    PROGRESS_INTERVAL: int = 50
    RANDOM_SEED: Optional[int] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None
    PROGRESS_LOG_FILE: Optional[str] = None

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "SHIFTPLANNER_",
    }
