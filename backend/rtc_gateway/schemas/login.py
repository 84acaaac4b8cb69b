"""Schemas for channel credentials and the login endpoint."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ChannelCredential(BaseModel):
    """Secret material provisioned for one channel."""

    model_config = ConfigDict(frozen=True)

    app_id: str
    channel_id: str
    nonce: str
    timestamp: int
    secret: str = Field(repr=False)
    request_id: str | None = None


class TurnCredential(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    appid: str
    userid: str
    gslb: List[str]
    session: str
    token: str
    nonce: str
    timestamp: int
    turn: TurnCredential


class LoginEnvelope(BaseModel):
    code: int = 0
    data: LoginResponse

