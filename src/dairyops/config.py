"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DAIRY_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Dairy Delivery API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level.")
    data_root: Path = Field(default=Path("data"), description="Root directory for generated delivery sheets.")
    timezone: str = Field(
        default="Asia/Kolkata",
        description="Business timezone; every calendar-day comparison is made in this zone.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    # Order generation
    scheduler_enabled: bool = Field(default=True, description="Run the daily order jobs in-process.")
    daily_order_time: str = Field(default="03:00", description="HH:MM when today's orders are generated.")
    lookahead_order_time: str = Field(default="09:00", description="HH:MM when tomorrow's orders are generated.")
    order_number_prefix: str = Field(default="ORD")
    order_number_max_retries: int = Field(default=3, ge=0)

    # WhatsApp Cloud API
    whatsapp_api_url: str = Field(default="https://graph.facebook.com/v17.0")
    whatsapp_phone_number_id: Optional[str] = Field(default=None)
    whatsapp_access_token: Optional[str] = Field(default=None)
    whatsapp_timeout_seconds: float = Field(default=10.0, gt=0.0)
    whatsapp_max_retries: int = Field(default=2, ge=0)
    whatsapp_backoff_seconds: float = Field(default=1.0, ge=0.0)
    whatsapp_country_code: str = Field(default="91", description="Prefix added to 10-digit phone numbers.")
    whatsapp_notify_workers: int = Field(default=4, ge=1, description="Background threads sending notifications.")

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("daily_order_time", "lookahead_order_time")
    @classmethod
    def _validate_clock_time(cls, value: str) -> str:
        parts = value.strip().split(":")
        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            raise ValueError(f"Expected HH:MM, got '{value}'")
        hour, minute = int(parts[0]), int(parts[1])
        if not (0 <= hour < 24 and 0 <= minute < 60):
            raise ValueError(f"Clock time out of range: '{value}'")
        return f"{hour:02d}:{minute:02d}"

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @property
    def whatsapp_configured(self) -> bool:
        return bool(self.whatsapp_phone_number_id and self.whatsapp_access_token)


settings = Settings()
