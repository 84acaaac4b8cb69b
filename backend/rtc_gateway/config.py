"""Application configuration for the RTC login gateway."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

ProviderName = Literal["aliyun"]

# Aliyun RTC OpenAPI
ALIYUN_RTC_ENDPOINT = "https://rtc.aliyuncs.com/"
ALIYUN_RTC_API_VERSION = "2018-01-11"

DEFAULT_GSLB = "https://rgslb.rtc.aliyuncs.com"


class Settings(BaseSettings):
    """Runtime configuration loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="RTC_",
        env_file=Path(__file__).resolve().parent.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "RTC Login Gateway"
    app_version: str = "0.1.0"

    listen: str = ""
    appid: str = ""
    access_key_id: str = ""
    access_key_secret: str = ""
    gslb: str = ""

    provider: ProviderName = "aliyun"
    region_id: str = "cn-hangzhou"
    rtc_endpoint: str = ALIYUN_RTC_ENDPOINT

    login_path: str = "/app/v1/login"
    id_length: int = Field(default=16, ge=1)
    # None keeps the provider call unbounded.
    provision_timeout_seconds: float | None = Field(default=None, gt=0)
    log_level: str = "INFO"

    @field_validator("login_path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        if not value.startswith("/"):
            return "/" + value
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    def missing_required(self) -> list[str]:
        """Return the names of required startup parameters that are empty."""
        required = {
            "listen": self.listen,
            "appid": self.appid,
            "access-key-id": self.access_key_id,
            "access-key-secret": self.access_key_secret,
            "gslb": self.gslb,
        }
        return [name for name, value in required.items() if not value.strip()]

    def listen_address(self) -> tuple[str, int]:
        """Split ``listen`` into (host, port); ``8080`` and ``:8080`` bind all interfaces."""
        host, sep, port = self.listen.rpartition(":")
        if not sep:
            host, port = "", self.listen
        try:
            port_number = int(port)
        except ValueError:
            logger.error("Invalid listen address: %s", self.listen)
            raise ValueError(f"Invalid listen address: {self.listen!r}") from None
        return host or "0.0.0.0", port_number


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()
