"""
Environment settings and logging setup for entry points.

Library modules only create loggers; configure_logging is called by scripts.
Values come from the process environment, optionally seeded from a project-root .env.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    log_format: str = DEFAULT_LOG_FORMAT


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once. .env values never override variables already set in the environment."""
    load_dotenv(PROJECT_ROOT / ".env")
    return Settings(
        log_level=os.environ.get("VALIDATIONS_LOG_LEVEL", "WARNING").upper(),
        log_format=os.environ.get("VALIDATIONS_LOG_FORMAT", DEFAULT_LOG_FORMAT),
    )


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format=settings.log_format)
