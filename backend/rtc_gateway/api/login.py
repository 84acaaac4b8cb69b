"""Channel login endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from rtc_gateway.schemas.login import LoginEnvelope
from rtc_gateway.services.channel_provider import ProvisioningError
from rtc_gateway.services.login import LoginService
from rtc_gateway.services.tokens import DerivationError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_login_service(request: Request) -> LoginService:
    return request.app.state.login_service


@router.get("", response_model=LoginEnvelope)
async def login(
    room: str = "",
    user: str = "",
    service: LoginService = Depends(get_login_service),
) -> LoginEnvelope:
    try:
        data = await service.login(room, user)
    except ProvisioningError as exc:
        logger.error("Login failed for room %r (provisioning): %s", room, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="channel_provisioning_failed",
        ) from exc
    except DerivationError as exc:
        logger.error("Login failed for room %r (token): %s", room, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="token_derivation_failed",
        ) from exc

    return LoginEnvelope(data=data)
