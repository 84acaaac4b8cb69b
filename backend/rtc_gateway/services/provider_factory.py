"""Factory for channel credential providers."""

from __future__ import annotations

import logging

from rtc_gateway.config import Settings
from rtc_gateway.services.aliyun_rtc import AliyunRtcProvider
from rtc_gateway.services.channel_provider import ChannelProvider

logger = logging.getLogger(__name__)


def get_provider(settings: Settings) -> ChannelProvider:
    if settings.provider == "aliyun":
        logger.info("Using Aliyun RTC provider (region %s)", settings.region_id)
        return AliyunRtcProvider(
            settings.access_key_id,
            settings.access_key_secret,
            region_id=settings.region_id,
            endpoint=settings.rtc_endpoint,
            timeout_seconds=settings.provision_timeout_seconds,
        )
    logger.error("Unsupported provider configured: %s", settings.provider)
    raise ValueError(f"Unsupported provider: {settings.provider}")
