"""In-memory channel credential cache with single-flight provisioning."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from rtc_gateway.schemas.login import ChannelCredential
from rtc_gateway.services.channel_provider import ChannelProvider

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str]


@dataclass(slots=True)
class _KeyLock:
    """Lock for one key plus the number of callers holding or awaiting it."""

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    waiters: int = 0


class ChannelCredentialCache:
    """Cache channel credentials, provisioning each channel at most once.

    Every ``(app_id, channel_id)`` key gets its own lock, so a slow
    provisioning call only holds up requests for the same channel. Entries
    live until the process exits and failures are never stored.
    """

    def __init__(self, provider: ChannelProvider) -> None:
        self._provider = provider
        self._credentials: Dict[CacheKey, ChannelCredential] = {}
        self._locks: Dict[CacheKey, _KeyLock] = {}

    def __len__(self) -> int:
        return len(self._credentials)

    def __contains__(self, key: object) -> bool:
        return key in self._credentials

    def get(self, app_id: str, channel_id: str) -> Optional[ChannelCredential]:
        """Return the cached credential without provisioning."""
        return self._credentials.get((app_id, channel_id))

    async def get_or_create(self, app_id: str, channel_id: str) -> ChannelCredential:
        key = (app_id, channel_id)
        credential = self._credentials.get(key)
        if credential is not None:
            logger.debug("Credential cache hit for %s/%s", app_id, channel_id)
            return credential

        entry = self._acquire(key)
        try:
            async with entry.lock:
                # Another request may have finished provisioning while we waited.
                credential = self._credentials.get(key)
                if credential is not None:
                    return credential

                logger.debug("Credential cache miss for %s/%s, provisioning", app_id, channel_id)
                credential = await self._provider.provision(app_id, channel_id)
                self._credentials[key] = credential
                return credential
        finally:
            self._release(key, entry)

    def clear(self) -> None:
        self._credentials.clear()

    # Registry updates never await, so they cannot interleave on the event loop.
    def _acquire(self, key: CacheKey) -> _KeyLock:
        entry = self._locks.get(key)
        if entry is None:
            entry = _KeyLock()
            self._locks[key] = entry
        entry.waiters += 1
        return entry

    def _release(self, key: CacheKey, entry: _KeyLock) -> None:
        entry.waiters -= 1
        if entry.waiters == 0 and self._locks.get(key) is entry:
            del self._locks[key]
