from __future__ import annotations

import os
from pathlib import Path

BACKEND_ROOT = Path(__file__).resolve().parents[1]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    return Path(raw).expanduser() if raw else default


def _parse_cors_origins() -> str | list[str]:
    raw = os.getenv("SCORECARD_CORS_ORIGINS", "*")
    if raw.strip() == "*":
        return "*"
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or "*"


class BaseConfig:
    BASE_DIR = BACKEND_ROOT
    JSON_SORT_KEYS = False
    MAX_CONTENT_LENGTH = 64 * 1024  # scorecard payloads are tiny
    LOG_LEVEL = os.getenv("SCORECARD_LOG_LEVEL", "INFO")
    REPORT_ENGINE_LOG_LEVEL = os.getenv("SCORECARD_ENGINE_LOG_LEVEL")
    REPORT_LOG_FILE = os.getenv("SCORECARD_REPORT_LOG_FILE")
    TEMPLATE_PATH = _env_path(
        "SCORECARD_TEMPLATE_PATH",
        BACKEND_ROOT / "data" / "templates" / "dominance-playbook.pdf",
    )
    FONTS_DIR = _env_path("SCORECARD_FONTS_DIR", BACKEND_ROOT / "data" / "fonts")
    CTA_URL = os.getenv("SCORECARD_CTA_URL", "https://localmarketingaudit.com")
    CORS_ORIGINS = _parse_cors_origins()
    # Measure text with the loaded font programs instead of the static tables.
    MEASURE_FONT_PROGRAMS = os.getenv("SCORECARD_MEASURE_FONT_PROGRAMS", "false").lower() == "true"
    REPORT_FILENAME = os.getenv("SCORECARD_REPORT_FILENAME", "dominance-scorecard-report.pdf")


class TestConfig(BaseConfig):
    TESTING = True
    LOG_LEVEL = "DEBUG"


class DevConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = "DEBUG"


config_by_name = {
    "development": DevConfig,
    "testing": TestConfig,
    "production": BaseConfig,
}


def get_config(config_name: str | None = None):
    if not config_name:
        config_name = os.getenv("SCORECARD_ENV", "development")
    return config_by_name.get(config_name.lower(), BaseConfig)
