"""Request validation, mode classification and adapter routing.

Architectural role:
    Turns one parsed `InboundRequest` into exactly one adapter call and returns
    its `Outcome`. The HTTP layer converts that outcome into a response.

Control-flow model:
    1. Reject payloads where neither `message` nor `mode` was present at all.
    2. Trim `message`; default `mode` to `text`.
    3. Reject requests with no message text and no attachments.
    4. `news`: search via the configured `NewsProvider` (no chat credential needed).
    5. Any other mode requires the chat/image credential.
    6. `image`: prompt required, fixed target size.
    7. Anything else (including unknown modes): text/vision generation.

Error handling strategy:
    Validation and configuration failures are returned before any adapter runs.
    Adapter failures are returned unchanged. Unexpected exceptions propagate to
    the HTTP layer's catch-all handler.
"""

import asyncio
import logging

from gateway.core.settings import GatewaySettings
from gateway.core.types import ErrorKind, InboundRequest, Outcome
from gateway.image.service import generate_image
from gateway.llm.service import generate_text
from gateway.retrieval.news.news_module import NewsProvider, build_news_provider


logger = logging.getLogger(__name__)

DEFAULT_MODE = "text"
NEWS_MODE = "news"
IMAGE_MODE = "image"

INVALID_PAYLOAD_MESSAGE = "invalid or unparsable multipart payload"
EMPTY_REQUEST_MESSAGE = "Either message text or an image is required."
NEWS_QUERY_MESSAGE = "News search requires a query."
MISSING_CREDENTIALS_MESSAGE = "Server is missing OpenAI credentials."
IMAGE_PROMPT_MESSAGE = "Image generation requires a text prompt."


def resolve_mode(raw_mode) -> str:
    """Return the normalized mode, defaulting to `text` for absent or non-string values."""
    if isinstance(raw_mode, str) and raw_mode.strip():
        return raw_mode.strip().lower()
    return DEFAULT_MODE


class MessageDispatcher:
    """Routes validated requests to the text, image or news adapter.

    Args:
        settings: Startup configuration.
        news_provider: Provider implementing `NewsProvider`. Built from
            `settings.news` when omitted.
    """

    def __init__(self, settings: GatewaySettings, news_provider: NewsProvider | None = None) -> None:
        self.settings = settings
        self.news_provider = news_provider or build_news_provider(settings.news)

    async def dispatch(self, inbound: InboundRequest) -> Outcome:
        if not inbound.has_message_field and not inbound.has_mode_field:
            return Outcome.failure(ErrorKind.VALIDATION, INVALID_PAYLOAD_MESSAGE)

        message = inbound.message.strip() if isinstance(inbound.message, str) else ""
        mode = resolve_mode(inbound.mode)
        attachments = inbound.attachments

        if not message and not attachments:
            return Outcome.failure(ErrorKind.VALIDATION, EMPTY_REQUEST_MESSAGE)

        logger.info("Dispatching mode=%s attachments=%d", mode, len(attachments))

        if mode == NEWS_MODE:
            if not message:
                return Outcome.failure(ErrorKind.VALIDATION, NEWS_QUERY_MESSAGE)
            return await self.news_provider.search(message)

        provider = self.settings.provider
        if not provider.has_credentials:
            logger.error("Rejecting mode=%s: no OpenAI credential configured", mode)
            return Outcome.failure(ErrorKind.CONFIGURATION, MISSING_CREDENTIALS_MESSAGE)

        if mode == IMAGE_MODE:
            if not message:
                return Outcome.failure(ErrorKind.VALIDATION, IMAGE_PROMPT_MESSAGE)
            return await asyncio.to_thread(generate_image, message, provider.image_size, provider)

        return await asyncio.to_thread(
            generate_text,
            message or None,
            attachments,
            provider.model,
            provider,
        )


def to_http(outcome: Outcome) -> tuple[int, dict]:
    """Map an outcome to `(status_code, json_body)`."""
    if outcome.ok:
        return 200, outcome.value
    return outcome.error.http_status, outcome.error.to_body()
