"""FastAPI application factory for the RTC login gateway."""

from __future__ import annotations

from fastapi import FastAPI, Request, Response

from rtc_gateway.api.login import router as login_router
from rtc_gateway.config import Settings, get_settings
from rtc_gateway.services.channel_provider import ChannelProvider
from rtc_gateway.services.credential_cache import ChannelCredentialCache
from rtc_gateway.services.login import LoginService
from rtc_gateway.services.provider_factory import get_provider

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,HEAD,PUT,DELETE,OPTIONS",
    "Access-Control-Expose-Headers": "Server,range,Content-Length,Content-Range",
    "Access-Control-Allow-Headers": (
        "origin,range,accept-encoding,referer,Cache-Control,"
        "X-Proxy-Authorization,X-Requested-With,Content-Type"
    ),
}


def create_app(
    settings: Settings | None = None,
    provider: ChannelProvider | None = None,
) -> FastAPI:
    """Build the app with its own credential cache.

    ``provider`` defaults to the one selected by ``settings.provider``.
    """
    if settings is None:
        settings = get_settings()
    if provider is None:
        provider = get_provider(settings)
    cache = ChannelCredentialCache(provider)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.credential_cache = cache
    app.state.login_service = LoginService(settings, cache)

    @app.middleware("http")
    async def cors_headers(request: Request, call_next):
        # Login preflight never reaches the routes.
        if request.method == "OPTIONS" and request.url.path == settings.login_path:
            response = Response(status_code=200)
        else:
            response = await call_next(request)
        if request.headers.get("origin"):
            response.headers.update(CORS_HEADERS)
        return response

    app.include_router(login_router, prefix=settings.login_path, tags=["Login"])

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Simple health probe."""
        return {"status": "ok"}

    return app
