"""CLI entrypoint."""

from __future__ import annotations

import logging
import sys

import anyio
import uvicorn
from pydantic import ValidationError

from .asgi import create_app
from .mcp_server import PaperlessMcpServer
from .settings import Settings, mask_token

logger = logging.getLogger("mcp_paperless")

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(level: str) -> None:
    # stderr only: stdout carries the protocol in stdio mode.
    logging.basicConfig(
        level=_LEVELS.get(level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )


def main() -> None:
    try:
        settings = Settings()
    except ValidationError as exc:
        print(f"Failed to load configuration: {exc}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.log_level)
    logger.info(
        "Starting Paperless MCP Server paperless_url=%s mcp_transport=%s log_level=%s "
        "paperless_token=%s mcp_auth_token=%s mcp_http_port=%s",
        settings.paperless_base_url,
        settings.mcp_transport,
        settings.log_level,
        mask_token(settings.paperless_token),
        mask_token(settings.mcp_auth_token),
        settings.mcp_http_port,
    )

    if settings.mcp_transport == "stdio":
        anyio.run(PaperlessMcpServer(settings).run_stdio)
    else:
        uvicorn.run(
            create_app(settings),
            host=settings.mcp_host,
            port=settings.mcp_http_port,
            log_level="warning" if settings.log_level == "warn" else settings.log_level,
        )
    logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()
