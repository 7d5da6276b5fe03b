"""
HTTP API adapter for the message gateway.

Architectural role:
- Expose the single `POST /api/message` endpoint (plus `GET /health`).
- Enforce transport-level validation (content type, multipart limits).
- Delegate validation/routing to `gateway.core.dispatcher.MessageDispatcher`.
- Convert every outcome or escaped exception into one JSON response.

API request lifecycle (`POST /api/message`):
1. Reject non-multipart content types with HTTP 400.
2. Parse the multipart body into an `InboundRequest`.
3. Dispatch to exactly one adapter.
4. Emit `200 <mode-specific body>` or `<status> {"error": {"message": ...}}`.

Error handling strategy:
- Adapter failures arrive as `Outcome` errors and are rendered directly.
- `GatewayError` subclasses (payload limits, parser failures) use their `status`.
- Any other exception carrying a `status` attribute uses that status; everything
  else becomes HTTP 500 with the exception message.

Side effects:
- One access-log line per request via the `gateway.access` logger.
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gateway.api.multimodal.upload_reader import GatewayError, is_multipart, read_inbound_request
from gateway.core.dispatcher import MessageDispatcher, to_http
from gateway.core.settings import GatewaySettings
from gateway.retrieval.news.news_module import NewsProvider


logger = logging.getLogger(__name__)
access_logger = logging.getLogger("gateway.access")

NOT_MULTIPART_MESSAGE = "Content-Type must be multipart/form-data."
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"message": message}})


# ============================================================
# Exception handlers
# ============================================================

async def handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
    """Render multipart-layer failures with their own status."""
    logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.detail)
    return error_response(exc.status, exc.message)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: status from the exception when present, else 500."""
    logger.exception("Unhandled error on %s", request.url.path)
    status = getattr(exc, "status", None)
    if not isinstance(status, int):
        status = 500
    return error_response(status, str(exc) or INTERNAL_ERROR_MESSAGE)


# ============================================================
# Application factory
# ============================================================

def create_app(
    settings: GatewaySettings | None = None,
    news_provider: NewsProvider | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Startup configuration; read from the environment when omitted.
        news_provider: Override for the configured news provider.
    """
    settings = settings or GatewaySettings.from_env()

    app = FastAPI(
        title="Message Gateway",
        description="Multipart gateway for chat, image generation and news search",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.dispatcher = MessageDispatcher(settings, news_provider=news_provider)

    app.add_exception_handler(GatewayError, handle_gateway_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        access_logger.info(
            '%s "%s %s" %s %.1fms',
            request.client.host if request.client else "-",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/api/message")
    async def post_message(request: Request):
        """
        Accept one multipart message and forward it to the selected upstream.

        Form fields:
        - `message`: optional text (trimmed).
        - `mode`: `text` (default), `image` or `news`; unknown values fall back to `text`.
        - `images`: up to five `image/*` files, 10MB each.
        """
        if not is_multipart(request):
            return error_response(400, NOT_MULTIPART_MESSAGE)

        inbound = await read_inbound_request(request, settings.uploads)
        outcome = await request.app.state.dispatcher.dispatch(inbound)

        status_code, body = to_http(outcome)
        if status_code >= 400:
            logger.warning("Request failed with %s: %s", status_code, body["error"]["message"])
        return JSONResponse(status_code=status_code, content=body)

    return app
