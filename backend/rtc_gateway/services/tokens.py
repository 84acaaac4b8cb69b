"""Token derivation and random identifiers for login sessions."""

from __future__ import annotations

import hashlib
import logging
import secrets

logger = logging.getLogger(__name__)


class DerivationError(RuntimeError):
    """Raised when a session token cannot be computed."""


def derive_token(
    channel_id: str,
    secret: str,
    app_id: str,
    user_id: str,
    session_id: str,
    nonce: str,
    timestamp: int,
) -> str:
    """Return the lowercase hex SHA-256 token for one user session.

    The fields are hashed in this exact order with no separator. Media servers
    recompute the same digest to authenticate the session, so the order is
    part of the wire contract.
    """
    digest = hashlib.sha256()
    fields = (channel_id, secret, app_id, user_id, session_id, nonce, str(timestamp))
    try:
        for value in fields:
            digest.update(value.encode("utf-8"))
    except UnicodeEncodeError as exc:
        logger.error("Token derivation failed for channel %r: %s", channel_id, exc)
        raise DerivationError(f"token derivation failed: {exc}") from exc
    return digest.hexdigest()


def random_hex(length: int) -> str:
    """Return ``length`` random lowercase hex characters, or ``""`` for ``length <= 0``."""
    if length <= 0:
        return ""
    return secrets.token_hex((length + 1) // 2)[:length]
