import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    school_api_url: str
    school_api_timeout: float
    frontend_url: str
    auth_provider: str
    supabase_url: str
    supabase_key: str
    admin_roles: List[str]
    log_level: str
    detention_attendance_sample: int
    trend_days: int
    leaderboard_min_merits: int
    leaderboard_size: int


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


@lru_cache()
def get_settings() -> Settings:
    roles = os.getenv("ADMIN_ROLES", "admin,school_admin,super_admin")
    return Settings(
        school_api_url=os.getenv("SCHOOL_API_URL", "http://localhost:5000").rstrip("/"),
        school_api_timeout=float(os.getenv("SCHOOL_API_TIMEOUT", "30")),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173"),
        auth_provider=os.getenv("AUTH_PROVIDER", "backend").lower(),
        supabase_url=os.getenv("SUPABASE_URL", ""),
        supabase_key=os.getenv("SUPABASE_KEY", ""),
        admin_roles=[r.strip() for r in roles.split(",") if r.strip()],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        detention_attendance_sample=_int_env("DETENTION_ATTENDANCE_SAMPLE", 20),
        trend_days=_int_env("TREND_DAYS", 14),
        leaderboard_min_merits=_int_env("LEADERBOARD_MIN_MERITS", 10),
        leaderboard_size=_int_env("LEADERBOARD_SIZE", 5),
    )
