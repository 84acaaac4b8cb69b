"""Aliyun RTC channel provisioning helper."""

from __future__ import annotations

import asyncio
import base64
import hashlib
import hmac
import logging
from datetime import datetime, timezone
from typing import Mapping
from urllib.parse import quote
from uuid import uuid4

import aiohttp
from yarl import URL

from rtc_gateway.config import ALIYUN_RTC_API_VERSION, ALIYUN_RTC_ENDPOINT
from rtc_gateway.schemas.login import ChannelCredential
from rtc_gateway.services.channel_provider import ProvisioningError

logger = logging.getLogger(__name__)


def percent_encode(value: str) -> str:
    """RFC 3986 encoding as required by the Aliyun RPC signature."""
    return quote(value, safe="~")


def canonical_query(params: Mapping[str, str]) -> str:
    return "&".join(
        f"{percent_encode(key)}={percent_encode(params[key])}" for key in sorted(params)
    )


def sign(params: Mapping[str, str], access_key_secret: str, method: str = "GET") -> str:
    """Return the base64 HMAC-SHA1 signature for an RPC request."""
    string_to_sign = "&".join(
        [method, percent_encode("/"), percent_encode(canonical_query(params))]
    )
    mac = hmac.new(
        (access_key_secret + "&").encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha1,
    )
    return base64.b64encode(mac.digest()).decode("ascii")


class AliyunRtcProvider:
    """Provision channels through the Aliyun RTC ``CreateChannel`` API."""

    def __init__(
        self,
        access_key_id: str,
        access_key_secret: str,
        *,
        region_id: str = "cn-hangzhou",
        endpoint: str = ALIYUN_RTC_ENDPOINT,
        timeout_seconds: float | None = None,
    ) -> None:
        self._access_key_id = access_key_id
        self._access_key_secret = access_key_secret
        self._region_id = region_id
        self._endpoint = endpoint
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    def build_params(self, app_id: str, channel_id: str) -> dict[str, str]:
        params = {
            "Format": "JSON",
            "Version": ALIYUN_RTC_API_VERSION,
            "AccessKeyId": self._access_key_id,
            "SignatureMethod": "HMAC-SHA1",
            "SignatureVersion": "1.0",
            "SignatureNonce": str(uuid4()),
            "Timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "RegionId": self._region_id,
            "Action": "CreateChannel",
            "AppId": app_id,
            "ChannelId": channel_id,
        }
        params["Signature"] = sign(params, self._access_key_secret)
        return params

    def build_url(self, app_id: str, channel_id: str) -> URL:
        query = canonical_query(self.build_params(app_id, channel_id))
        return URL(f"{self._endpoint}?{query}", encoded=True)

    async def provision(self, app_id: str, channel_id: str) -> ChannelCredential:
        url = self.build_url(app_id, channel_id)
        logger.info("Creating channel app=%s channel=%s", app_id, channel_id)

        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as client:
                async with client.get(url) as response:
                    if response.status != 200:
                        text = await response.text()
                        logger.error(
                            "CreateChannel failed: %s %s", response.status, text
                        )
                        raise ProvisioningError(
                            f"CreateChannel failed: {response.status} {text}"
                        )
                    data = await response.json(content_type=None)
        except asyncio.TimeoutError as exc:
            logger.error("CreateChannel timed out for channel %s", channel_id)
            raise ProvisioningError("CreateChannel timed out") from exc
        except aiohttp.ClientError as exc:
            logger.error("CreateChannel request error: %s", exc)
            raise ProvisioningError(f"CreateChannel request error: {exc}") from exc
        except ValueError as exc:
            logger.error("CreateChannel returned invalid JSON: %s", exc)
            raise ProvisioningError("CreateChannel returned invalid JSON") from exc

        return self._parse(app_id, channel_id, data)

    @staticmethod
    def _parse(app_id: str, channel_id: str, data: object) -> ChannelCredential:
        if not isinstance(data, dict):
            logger.error("CreateChannel response is not an object: %s", data)
            raise ProvisioningError("CreateChannel response is not an object")

        secret = data.get("ChannelKey")
        nonce = data.get("Nonce")
        timestamp = data.get("Timestamp")
        if not secret or not nonce or timestamp is None:
            # Do not echo the payload, it may hold a partial key.
            logger.error(
                "CreateChannel response missing fields, RequestId=%s",
                data.get("RequestId"),
            )
            raise ProvisioningError("CreateChannel response missing ChannelKey/Nonce/Timestamp")
        try:
            issued_at = int(timestamp)
        except (TypeError, ValueError) as exc:
            raise ProvisioningError(f"CreateChannel returned bad Timestamp: {timestamp!r}") from exc

        logger.info(
            "Created channel app=%s channel=%s RequestId=%s",
            app_id,
            channel_id,
            data.get("RequestId"),
        )
        return ChannelCredential(
            app_id=app_id,
            channel_id=channel_id,
            nonce=str(nonce),
            timestamp=issued_at,
            secret=str(secret),
            request_id=data.get("RequestId"),
        )
