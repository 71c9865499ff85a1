# config.py
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()  # loads .env


@dataclass
class SchedulerSettings:
    """Defaults applied when a caller leaves a parameter unset."""

    work_start_hour: int = 9
    work_end_hour: int = 21
    min_slot_minutes: int = 60
    default_range_days: int = 7
    write_fanout: int = 4
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable '{name}' must be an integer, got {raw!r}") from None


def load_settings() -> SchedulerSettings:
    settings = SchedulerSettings(
        work_start_hour=_int_env("WORK_START_HOUR", 9),
        work_end_hour=_int_env("WORK_END_HOUR", 21),
        min_slot_minutes=_int_env("MIN_SLOT_MINUTES", 60),
        default_range_days=_int_env("DEFAULT_RANGE_DAYS", 7),
        write_fanout=_int_env("WRITE_FANOUT", 4),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
    _validate(settings)
    return settings


def _validate(s: SchedulerSettings) -> None:
    if not (0 <= s.work_start_hour < s.work_end_hour <= 24):
        raise ValueError("WORK_START_HOUR/WORK_END_HOUR must satisfy 0 <= start < end <= 24")
    if s.min_slot_minutes < 1:
        raise ValueError("MIN_SLOT_MINUTES must be at least 1")
    if s.default_range_days < 0:
        raise ValueError("DEFAULT_RANGE_DAYS must not be negative")
    if s.write_fanout < 1:
        raise ValueError("WRITE_FANOUT must be at least 1")


_settings = None


def get_settings() -> SchedulerSettings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
