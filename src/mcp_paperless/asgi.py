"""ASGI app hosting the MCP Streamable HTTP endpoint."""

from __future__ import annotations

import contextlib
import logging
import secrets
from collections.abc import AsyncIterator, Awaitable, Callable

from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from .mcp_server import PaperlessMcpServer
from .settings import Settings
from .tools import SERVER_NAME, SERVER_VERSION

logger = logging.getLogger(__name__)

HEALTH_PATH = "/health"
MCP_PATH = "/mcp"


class BearerTokenMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: Starlette, *, token: str) -> None:
        super().__init__(app)
        self._expected = f"Bearer {token}"

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        # Health checks stay reachable for container probes.
        if request.url.path == HEALTH_PATH:
            return await call_next(request)
        presented = request.headers.get("authorization", "")
        if not secrets.compare_digest(presented.encode(), self._expected.encode()):
            logger.warning(
                "Authentication failed path=%s remote_addr=%s",
                request.url.path,
                request.client.host if request.client else None,
            )
            return JSONResponse({"error": "unauthorized"}, status_code=401)
        return await call_next(request)


class StreamableHTTPEndpoint:
    """Plain ASGI app forwarding every request to the MCP session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager) -> None:
        self._session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._session_manager.handle_request(scope, receive, send)


async def health(_: Request) -> Response:
    return JSONResponse({"status": "ok", "server": SERVER_NAME, "version": SERVER_VERSION})


def create_app(
    settings: Settings | None = None,
    *,
    server: PaperlessMcpServer | None = None,
) -> Starlette:
    settings = settings or Settings()
    mcp = server or PaperlessMcpServer(settings)
    session_manager = StreamableHTTPSessionManager(
        app=mcp.server,
        json_response=True,
        stateless=True,
    )

    @contextlib.asynccontextmanager
    async def lifespan(_: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info(
                "HTTP transport ready health=%s mcp=%s auth=%s",
                HEALTH_PATH,
                MCP_PATH,
                bool(settings.mcp_auth_token),
            )
            try:
                yield
            finally:
                await mcp.aclose()

    app = Starlette(
        routes=[
            Route(HEALTH_PATH, endpoint=health, methods=["GET"]),
            Route(MCP_PATH, endpoint=StreamableHTTPEndpoint(session_manager)),
        ],
        lifespan=lifespan,
    )
    if settings.mcp_auth_token:
        app.add_middleware(BearerTokenMiddleware, token=settings.mcp_auth_token)
    return app
