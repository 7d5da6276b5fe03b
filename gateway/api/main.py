"""
Server entrypoint for the message gateway.

Architectural role:
- Load `.env`, resolve `GatewaySettings` once and configure logging.
- Build the FastAPI app via `gateway.api.http_api.create_app`.
- Serve it with uvicorn on `HOST:PORT`.

Usage:
    python -m gateway.api.main
    message-gateway
"""

import logging

import uvicorn
from dotenv import load_dotenv

from gateway.api.http_api import create_app
from gateway.core.settings import GatewaySettings


logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def main():
    load_dotenv()

    settings = GatewaySettings.from_env()
    configure_logging(settings.log_level)

    app = create_app(settings)

    logger.info(
        "Message gateway listening on http://%s:%s (news provider: %s, chat credentials: %s)",
        settings.host,
        settings.port,
        settings.news.provider,
        "configured" if settings.provider.has_credentials else "missing",
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
