# config.py
# All tuneable settings in one place, read from SUKHA_YATRA_* environment
# variables. A .env file next to this module is loaded first if present.

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"))

ENV_PREFIX = "SUKHA_YATRA_"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    return _env(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    # Storage
    db_path: str = ":memory:"              # DuckDB file, or in-memory

    # Logging
    log_level: str = "INFO"

    # HTTP
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    include_debug_info: bool = False       # expose exception text in 500 bodies

    # Fleet simulation
    fleet_simulation_enabled: bool = True
    fleet_update_interval_seconds: float = 30.0
    fleet_delay_probability: float = 0.2

    # Booking
    payment_delay_seconds: float = 2.0

    # Tracking
    default_tracking_profile: str = "map"  # "map" | "booking"
    max_tracking_sessions: int = 1000


def load_settings() -> Settings:
    """Build Settings from the environment, falling back to the defaults above."""
    defaults = Settings()
    origins = _env("CORS_ORIGINS", ",".join(defaults.cors_origins))
    return Settings(
        db_path=_env("DB_PATH", defaults.db_path),
        log_level=_env("LOG_LEVEL", defaults.log_level).upper(),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        include_debug_info=_env_bool("DEBUG_ERRORS", defaults.include_debug_info),
        fleet_simulation_enabled=_env_bool("FLEET_SIMULATION", defaults.fleet_simulation_enabled),
        fleet_update_interval_seconds=float(
            _env("FLEET_UPDATE_INTERVAL", str(defaults.fleet_update_interval_seconds))
        ),
        fleet_delay_probability=float(
            _env("FLEET_DELAY_PROBABILITY", str(defaults.fleet_delay_probability))
        ),
        payment_delay_seconds=float(_env("PAYMENT_DELAY", str(defaults.payment_delay_seconds))),
        default_tracking_profile=_env("TRACKING_PROFILE", defaults.default_tracking_profile),
        max_tracking_sessions=int(_env("MAX_TRACKING_SESSIONS", str(defaults.max_tracking_sessions))),
    )
