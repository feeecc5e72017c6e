"""
Pulse — Configuration
Scoring engine settings.

All settings load from environment variables with safe defaults for development.
In production, set PULSE_ENV=production to switch logging to JSON.
"""
import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self):
        self.ENVIRONMENT = os.getenv("PULSE_ENV", "development")

        # === Insufficient-data gate ===
        self.MIN_CONFIDENCE = _env_float("PULSE_MIN_CONFIDENCE", "0.35")
        self.MIN_COVERAGE = _env_float("PULSE_MIN_COVERAGE", "0.40")

        for name, value in (("PULSE_MIN_CONFIDENCE", self.MIN_CONFIDENCE),
                            ("PULSE_MIN_COVERAGE", self.MIN_COVERAGE)):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")

        # === Logging ===
        self.LOG_LEVEL = os.getenv("PULSE_LOG_LEVEL", "INFO").upper()
        self.LOG_JSON = _env_bool("PULSE_LOG_JSON", self.is_production)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
