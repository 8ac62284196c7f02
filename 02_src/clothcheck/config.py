"""Project-level configuration and path helpers."""

import os
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "clothcheck.db"
DEFAULT_LOG_PATH = LOGS_DIR / "clothcheck.log"

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

COUNTRY_CODE = "JP"
WEATHER_BASE_URL = "http://api.openweathermap.org/"
WEATHER_TIMEOUT = 10.0
LINE_API_HOST = "https://api.line.me"
LINE_TIMEOUT = 10.0

# Companion image assets pushed with an already-rated goal response
SAMPLE_IMAGE = "sample.jpg"
SAMPLE_PREVIEW_IMAGE = "sample-preview.jpg"


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def country_code() -> str:
    """Country appended to every postal code sent to the weather API."""
    return os.getenv("COUNTRY_CODE") or COUNTRY_CODE


def image_base_url() -> str:
    """Base URL of the companion image assets, without trailing slash."""
    return os.getenv("IMAGE_BASE_URL", "").rstrip("/")


def debug_user_id() -> str | None:
    """User id forced onto every inbound turn when DEBUG=1."""
    if os.getenv("DEBUG") != "1":
        return None
    return os.getenv("DEBUG_USER_ID") or None
