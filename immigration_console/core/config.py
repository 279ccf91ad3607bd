"""Application configuration using Pydantic Settings."""

import json
import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "RUS Control"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    port: int = 3000

    allowed_origins_str: str = Field(default="", alias="ALLOWED_ORIGINS")

    @property
    def allowed_origins(self) -> list[str]:
        """Parse allowed origins from string."""
        return [o.strip() for o in self.allowed_origins_str.split(",") if o.strip()]

    # Staff accounts, e.g. [{"username": "admin", "password": "SuperSecret"}]
    admin_accounts_str: str = Field(default="[]", alias="ADMIN_ACCOUNTS")

    @property
    def admin_accounts(self) -> dict[str, str]:
        """Map of staff username -> password. Malformed entries are skipped."""
        try:
            entries = json.loads(self.admin_accounts_str or "[]")
        except json.JSONDecodeError as e:
            logger.error(f"[AUTH] Failed to parse ADMIN_ACCOUNTS: {e}")
            return {}

        accounts: dict[str, str] = {}
        if not isinstance(entries, list):
            return accounts
        for entry in entries:
            if isinstance(entry, dict) and entry.get("username") and entry.get("password"):
                accounts[str(entry["username"])] = str(entry["password"])
        return accounts

    # Groups whose members get flagged on the evaluation card, e.g. "123456,789012"
    blacklisted_groups_str: str = Field(default="", alias="BLACKLISTED_GROUPS")

    @property
    def blacklisted_groups(self) -> list[int]:
        """Parse blacklisted group ids, dropping anything non-numeric."""
        ids = []
        for item in self.blacklisted_groups_str.split(","):
            item = item.strip()
            if item.lstrip("-").isdigit():
                ids.append(int(item))
        return ids

    # Roblox
    roblox_cookie: str = Field(default="", alias="ROBLOX_COOKIE")
    immigration_group_id: int = Field(default=0, ge=0, alias="IMMIGRATION_GROUP_ID")
    # Rank numbers (0-255), not role-set ids
    immigration_rank: int = Field(default=0, ge=0, le=255, alias="IMMIGRATION_ROLE_ID")
    denied_rank: int = Field(default=235, ge=0, le=255, alias="DENIED_RANK")
    roblox_timeout_seconds: float = Field(default=10.0, gt=0)

    @property
    def roblox_enabled(self) -> bool:
        """Ranking and member fetches need both a cookie and a group."""
        return bool(self.roblox_cookie and self.immigration_group_id)

    # Sessions
    secret_key: str = Field(default="change-me-in-production-use-strong-random-key")
    session_cookie_name: str = "auth"
    session_expire_hours: int = Field(default=12, ge=1)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
