# backend/livercare/config.py
import logging
import os
from pathlib import Path
from typing import NamedTuple, Tuple

from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parent.parent / ".env"

DEFAULT_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")


class Settings(NamedTuple):
    app_name: str
    cors_origins: Tuple[str, ...]
    log_level: int


def load_settings() -> Settings:
    load_dotenv(dotenv_path=ENV_PATH, override=False)

    origins = tuple(o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip())
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").strip().upper())
    if not isinstance(level, int):
        level = logging.INFO

    return Settings(
        app_name=os.getenv("APP_NAME", "LiverCare AI"),
        cors_origins=origins or DEFAULT_ORIGINS,
        log_level=level,
    )
