from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional, Union

from apscheduler.util import astimezone
from loguru import logger
from pydantic import ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gift_claimer.exceptions import ConfigLoadError

DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_CLAIM_URL = "https://storeapi.startrekfleetcommand.com/api/v2/offers/gifts/claim"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
        extra="ignore",
    )

    # Claim endpoint
    bearer_token: str
    claim_url: str = DEFAULT_CLAIM_URL
    claim_timeout: float = 10.0

    # Bundles
    bundle_id_10m: int
    bundle_id_4h: int
    bundle_id_24h: int
    daily_bundle_ids: List[int] = []

    # Schedules (second minute hour day month day_of_week)
    schedule_10m: str = "30 */10 * * * *"
    schedule_4h: str = "30 0 */4 * * *"
    schedule_daily: str = "30 0 10 * * *"
    timezone: Optional[str] = None

    # Scheduler
    scheduler_max_workers: int = 20
    scheduler_max_overlap: int = 10
    skip_overlapping_firings: bool = False

    # Notifications
    notification_channel: Literal["webhook", "email"] = "webhook"
    notify_max_workers: int = 4
    slack_webhook_url: str = ""
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""
    notify_to: str = ""
    smtp_use_ssl: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: str = ""
    log_rotation: str = "10 MB"
    log_to_syslog: bool = False

    @field_validator("bearer_token")
    @classmethod
    def _token_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("bearer_token must not be empty")
        return value

    @field_validator("bundle_id_10m", "bundle_id_4h", "bundle_id_24h")
    @classmethod
    def _positive_bundle_id(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("bundle ids must be positive integers")
        return value

    @field_validator("daily_bundle_ids")
    @classmethod
    def _positive_daily_ids(cls, value: List[int]) -> List[int]:
        if any(bundle_id <= 0 for bundle_id in value):
            raise ValueError("bundle ids must be positive integers")
        return value

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        try:
            astimezone(value)
        except (KeyError, ValueError, TypeError) as e:
            raise ValueError(f"unknown timezone {value!r}") from e
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        try:
            logger.level(level)
        except ValueError as e:
            raise ValueError(f"unknown log_level {value!r}") from e
        return level

    @model_validator(mode="after")
    def _check_channel(self) -> "Settings":
        if self.notification_channel == "webhook" and not self.slack_webhook_url:
            raise ValueError("slack_webhook_url is required for the webhook channel")
        if self.notification_channel == "email":
            missing = [
                name
                for name in ("smtp_host", "smtp_from", "notify_to")
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(
                    f"email channel requires: {', '.join(missing)}"
                )
        return self

    @property
    def daily_fanout(self) -> List[int]:
        """Bundle ids claimed on the daily rule, 24h bundle first if not listed."""
        daily = list(dict.fromkeys(self.daily_bundle_ids))
        if self.bundle_id_24h not in daily:
            daily.insert(0, self.bundle_id_24h)
        return daily


def load_settings(config_file: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from a JSON config document plus the environment.

    Keys in the document win over environment variables. A missing document
    is not an error on its own; required fields then have to come from the
    environment.
    """
    path = Path(config_file or os.getenv("CLAIMER_CONFIG_FILE", DEFAULT_CONFIG_FILE))

    document = {}
    if path.exists():
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigLoadError(f"Error reading config file {path}: {e}") from e
        if not isinstance(document, dict):
            raise ConfigLoadError(f"Config file {path} must contain a JSON object")

    try:
        return Settings(**document)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid configuration: {e}") from e


@lru_cache
def get_settings() -> Settings:
    return load_settings()
