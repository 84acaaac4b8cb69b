"""Command line entrypoint: parse startup options and serve the gateway."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import uvicorn
from pydantic import ValidationError

from rtc_gateway.config import DEFAULT_GSLB, Settings
from rtc_gateway.main import create_app

logger = logging.getLogger(__name__)

EXAMPLE = (
    "Example:\n"
    "  rtc-gateway --listen=8080 --access-key-id=OGAEkdiL62AkwSgs"
    " --access-key-secret=4JaIs4SG4dLwPsQSwGAHzeOQKxO6iw --appid=iwo5l81k"
    f" --gslb={DEFAULT_GSLB}\n\n"
    "Every option can also be set through the environment, e.g. RTC_LISTEN=8080."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rtc-gateway",
        description="Login gateway issuing RTC channel tokens.",
        epilog=EXAMPLE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--listen", help="listen port or host:port")
    parser.add_argument("--appid", help="the id of the RTC application")
    parser.add_argument("--access-key-id", dest="access_key_id", help="the id of access key")
    parser.add_argument(
        "--access-key-secret", dest="access_key_secret", help="the secret of access key"
    )
    parser.add_argument("--gslb", help="the gslb url")
    parser.add_argument("--region-id", dest="region_id", help="provider region")
    parser.add_argument("--login-path", dest="login_path", help="path of the login endpoint")
    parser.add_argument(
        "--provision-timeout",
        dest="provision_timeout_seconds",
        type=float,
        help="seconds to wait for channel creation (default: no limit)",
    )
    parser.add_argument("--log-level", dest="log_level", help="logging level")
    return parser


def load_settings(argv: Sequence[str] | None = None) -> Settings:
    """Merge command line flags over the environment, exiting on missing options."""
    parser = build_parser()
    args = parser.parse_args(argv)
    overrides = {key: value for key, value in vars(args).items() if value is not None}

    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        parser.print_help()
        print(f"\n{exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    missing = settings.missing_required()
    if missing:
        parser.print_help()
        print(f"\nmissing required options: {', '.join(missing)}", file=sys.stderr)
        raise SystemExit(2)
    return settings


def main(argv: Sequence[str] | None = None) -> None:
    settings = load_settings(argv)
    try:
        host, port = settings.listen_address()
    except ValueError as exc:
        print(exc, file=sys.stderr)
        raise SystemExit(2) from exc

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    app = create_app(settings)
    logger.info(
        "Serving appid=%s on %s:%s%s", settings.appid, host, port, settings.login_path
    )
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
