"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into
  the CLI.
- Adapters (HTTP, cache, retry) and services read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import ThresholdPolicy


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "bgcheck"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "bgcheck"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "bgcheck"
    return Path.home() / ".config" / "bgcheck"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        try:
            existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError):
            existing = {}

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# bgcheck user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without polluting the Core.
    - One configuration contract shared by the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="BGCHECK_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="bgcheck/0.1 (+https://local)",
        min_length=1,
        description="User-Agent sent to the profile service.",
    )

    users_api_url: str = Field(
        default="https://users.roblox.com",
        min_length=8,
        description="Base URL of the users API (details + username lookup).",
    )
    friends_api_url: str = Field(
        default="https://friends.roblox.com",
        min_length=8,
        description="Base URL of the friends API.",
    )
    groups_api_url: str = Field(
        default="https://groups.roblox.com",
        min_length=8,
        description="Base URL of the groups API.",
    )

    rate_limit_backoff_seconds: float = Field(
        default=3.0,
        ge=0,
        description="Fixed wait before retrying a rate-limited (429) call.",
    )
    fetch_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Total attempts of a cached fetch under persistent rate limiting.",
    )

    min_account_age_days: int = Field(
        default=90,
        ge=0,
        description="Minimum account age (days) to pass.",
    )
    min_friends: int = Field(
        default=20,
        ge=0,
        description="Minimum number of friends to pass.",
    )
    min_groups: int = Field(
        default=30,
        ge=0,
        description="Minimum number of groups to pass.",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR).",
    )

    def threshold_policy(self) -> ThresholdPolicy:
        return ThresholdPolicy(
            min_account_age_days=self.min_account_age_days,
            min_friends=self.min_friends,
            min_groups=self.min_groups,
        )
