import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes")


def _env_float(name: str, default: float) -> float:
    try:
        v = os.getenv(name)
        if v is not None and v.strip():
            return max(0.0, float(v.strip()))
    except ValueError:
        pass
    return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


_DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


@dataclass
class Settings:
    """Application settings loaded from environment variables with safe defaults."""

    app_name: str = "Sweepstakes Hub"
    env: str = "dev"
    database_url: str = "sqlite+aiosqlite:///./sweepstakes.db"
    log_level: str = "INFO"
    # Hosted auth provider; blank values fall back to placeholders so the app still boots.
    supabase_url: str = "https://placeholder-url.supabase.co"
    supabase_anon_key: str = "placeholder-key"
    auth_timeout_seconds: float = 10.0
    filter_debounce_ms: float = 300.0
    write_legacy_columns: bool = True
    cors_origins: List[str] = field(default_factory=lambda: list(_DEFAULT_CORS_ORIGINS))

    @property
    def filter_debounce_seconds(self) -> float:
        return self.filter_debounce_ms / 1000.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""
        return cls(
            app_name=os.getenv("APP_NAME", cls.app_name),
            env=os.getenv("ENV", cls.env),
            database_url=os.getenv("DATABASE_URL") or cls.database_url,
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            supabase_url=(os.getenv("SUPABASE_URL") or "").strip() or cls.supabase_url,
            supabase_anon_key=(os.getenv("SUPABASE_ANON_KEY") or "").strip() or cls.supabase_anon_key,
            auth_timeout_seconds=_env_float("AUTH_TIMEOUT_SECONDS", cls.auth_timeout_seconds),
            filter_debounce_ms=_env_float("FILTER_DEBOUNCE_MS", cls.filter_debounce_ms),
            write_legacy_columns=_env_bool("WRITE_LEGACY_COLUMNS", cls.write_legacy_columns),
            cors_origins=_env_list("CORS_ORIGINS", _DEFAULT_CORS_ORIGINS),
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings.from_env()
