"""Upstream error-body reading and message normalization.

Shared by `gateway.llm.service` and `gateway.image.service`. Both helpers are
total: they never raise, so an unreadable upstream response still produces a
short user-facing message.
"""

import json
import logging

from gateway.core.types import UpstreamErrorInfo

logger = logging.getLogger(__name__)

MAX_MESSAGE_CHARS = 500
HTML_RESPONSE_MESSAGE = "OpenAI API returned an unexpected HTML response. Please try again later."
DEFAULT_FALLBACK = "Failed to process request."


def normalize_upstream_error(parsed, raw, fallback: str = DEFAULT_FALLBACK) -> str:
    """Reduce an upstream error body to one bounded message.

    Args:
        parsed: JSON-decoded body, or `None`.
        raw: Raw body text (may be empty).
        fallback: Message used when neither body carries anything useful.

    Returns:
        - `parsed["error"]["message"]` verbatim when present,
        - a fixed message for HTML bodies,
        - the trimmed raw body, cut to 500 characters plus `…`,
        - otherwise `fallback`.
    """
    if isinstance(parsed, dict):
        error = parsed.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])

    if isinstance(raw, str) and raw.strip():
        trimmed = raw.strip()

        if trimmed.startswith("<"):
            return HTML_RESPONSE_MESSAGE

        if len(trimmed) > MAX_MESSAGE_CHARS:
            return f"{trimmed[:MAX_MESSAGE_CHARS]}…"
        return trimmed

    return fallback


def read_response_body(response) -> UpstreamErrorInfo:
    """Read an upstream response body without raising.

    Works with any response object exposing `.text` and `.status_code`
    (`requests.Response`, `httpx.Response`).

    Returns:
        `UpstreamErrorInfo` with the parsed JSON (or `None`), the raw text (or
        `""`) and the status code when available.
    """
    if response is None:
        return UpstreamErrorInfo()

    status = getattr(response, "status_code", None)

    try:
        raw = response.text or ""
    except Exception:
        logger.exception("Failed to read upstream error response body")
        return UpstreamErrorInfo(status=status)

    if not raw:
        return UpstreamErrorInfo(status=status)

    try:
        parsed = json.loads(raw)
    except ValueError:
        return UpstreamErrorInfo(raw=raw, status=status)

    return UpstreamErrorInfo(parsed=parsed if isinstance(parsed, dict) else None, raw=raw, status=status)
