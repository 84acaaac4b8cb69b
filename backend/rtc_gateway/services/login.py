"""Login orchestration: channel credential, session identifiers and token."""

from __future__ import annotations

import logging

from rtc_gateway.config import Settings
from rtc_gateway.schemas.login import LoginResponse, TurnCredential
from rtc_gateway.services.credential_cache import ChannelCredentialCache
from rtc_gateway.services.tokens import derive_token, random_hex

logger = logging.getLogger(__name__)


def turn_username(
    user_id: str, app_id: str, session_id: str, channel_id: str, nonce: str, timestamp: int
) -> str:
    return (
        f"{user_id}?appid={app_id}&session={session_id}"
        f"&channel={channel_id}&nonce={nonce}&timestamp={timestamp}"
    )


class LoginService:
    """Issue connection parameters for one user joining a channel."""

    def __init__(self, settings: Settings, cache: ChannelCredentialCache) -> None:
        self._settings = settings
        self._cache = cache

    async def login(self, channel_id: str, user: str) -> LoginResponse:
        """Return login parameters for ``user`` in ``channel_id``.

        Raises ``ProvisioningError`` when the channel cannot be created and
        ``DerivationError`` when the token cannot be computed.
        """
        app_id = self._settings.appid
        credential = await self._cache.get_or_create(app_id, channel_id)

        user_id = random_hex(self._settings.id_length)
        session_id = random_hex(self._settings.id_length)
        token = derive_token(
            channel_id,
            credential.secret,
            app_id,
            user_id,
            session_id,
            credential.nonce,
            credential.timestamp,
        )

        logger.info(
            "Login room=%s user=%s userid=%s session=%s",
            channel_id,
            user,
            user_id,
            session_id,
        )
        return LoginResponse(
            appid=app_id,
            userid=user_id,
            gslb=[self._settings.gslb],
            session=session_id,
            token=token,
            nonce=credential.nonce,
            timestamp=credential.timestamp,
            turn=TurnCredential(
                username=turn_username(
                    user_id,
                    app_id,
                    session_id,
                    channel_id,
                    credential.nonce,
                    credential.timestamp,
                ),
                password=token,
            ),
        )
