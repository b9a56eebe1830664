from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env lives at the project root: giftx/core/config.py -> giftx/core -> giftx -> root
_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _ROOT / ".env"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./giftx.db"
    # Comma separated origin list; "*" allows every origin
    cors_origins: str = "*"
    # Admin API secret (X-Admin-Secret). Empty disables the admin API (503).
    admin_secret: str = ""
    environment: str = "development"
    log_level: str = "INFO"
    # Per-IP limit for the /track endpoints
    rate_limit_track_per_minute: int = 240
    # ip-api.com lookup for visitor country/city
    geo_lookup_enabled: bool = True
    presence_channel: str = "online-users"
    presence_observer_key: str = "admin-listener"
    scroll_debounce_ms: int = 500
    visitor_window_days: int = 30
    heatmap_window_days: int = 7

    model_config = {
        "env_file": _ENV_FILE if _ENV_FILE.is_file() else ".env",
        "extra": "ignore",
    }

    @field_validator("admin_secret", mode="before")
    @classmethod
    def strip_admin_secret(cls, v: str | None) -> str:
        return (v or "").strip()

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: str | None) -> str:
        return (v or "INFO").strip().upper()


settings = Settings()


def cors_origins_list() -> list[str]:
    if not settings.cors_origins or settings.cors_origins.strip() == "*":
        return ["*"]
    return [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
