"""Channel credential provider interfaces."""

from __future__ import annotations

from typing import Protocol

from rtc_gateway.schemas.login import ChannelCredential


class ProvisioningError(RuntimeError):
    """Raised when the remote service could not provision a channel."""


class ChannelProvider(Protocol):
    async def provision(self, app_id: str, channel_id: str) -> ChannelCredential:
        """Create the channel remotely and return its credential."""
        raise NotImplementedError
