from __future__ import annotations

import asyncio
import os

import pytest

from rtc_gateway.config import Settings
from rtc_gateway.schemas.login import ChannelCredential
from rtc_gateway.services.channel_provider import ProvisioningError


class FakeProvider:
    """Provider stub that counts calls and can fail a number of times."""

    def __init__(self, delay: float = 0.0, failures: int = 0) -> None:
        self.delay = delay
        self.failures = failures
        self.calls: list[tuple[str, str]] = []

    async def provision(self, app_id: str, channel_id: str) -> ChannelCredential:
        self.calls.append((app_id, channel_id))
        await asyncio.sleep(self.delay)
        if self.failures:
            self.failures -= 1
            raise ProvisioningError("CreateChannel failed: 503 unavailable")
        return ChannelCredential(
            app_id=app_id,
            channel_id=channel_id,
            nonce="n1",
            timestamp=1000,
            secret="s3cr3t",
            request_id=f"req-{len(self.calls)}",
        )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("RTC_"):
            monkeypatch.delenv(key)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        listen="8080",
        appid="app1",
        access_key_id="test-id",
        access_key_secret="test-secret",
        gslb="https://rgslb.rtc.aliyuncs.com",
    )
