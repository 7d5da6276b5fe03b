"""HTTP transport for the OpenAI-style upstream.

Architectural role:
    Executes one JSON POST against the configured upstream and converts every
    failure into an `Outcome` carrying a normalized upstream error.

Model invocation flow:
    `service.generate_text` / `gateway.image.client.send_image_request` ->
    `send_request(path, payload, config, fallback)` -> `requests.post` ->
    `Outcome(value=<parsed JSON>)` or `Outcome(error=<upstream CoreError>)`.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once with the
    configured timeout.

Failure handling model:
    - Non-2xx: body read via `read_response_body`, normalized, status mirrored.
    - Transport errors: exception text normalized, status 502.
    - 2xx with a non-JSON body: fallback message, status 502.
"""

import logging

import requests

from gateway.core.types import ErrorKind, Outcome
from gateway.llm.errors import normalize_upstream_error, read_response_body
from gateway.llm.provider_config import ProviderConfig

logger = logging.getLogger(__name__)


def _headers(config: ProviderConfig) -> dict:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {config.api_key}",
    }


def send_request(path: str, payload: dict, config: ProviderConfig, fallback: str) -> Outcome:
    """POST `payload` to `<base_url>/<path>` once.

    Args:
        path: Endpoint path relative to the configured base URL.
        payload: JSON body.
        config: Provider settings (credential, base URL, timeout).
        fallback: Message used when the upstream body carries nothing readable.

    Returns:
        `Outcome` with the parsed JSON body on success, or an upstream error whose
        status mirrors the upstream (502 when none is available).
    """
    url = config.endpoint(path)

    try:
        response = requests.post(
            url,
            headers=_headers(config),
            json=payload,
            timeout=config.timeout_seconds,
        )
    except requests.exceptions.RequestException as err:
        logger.error("OpenAI API error: %s", err)
        info = read_response_body(getattr(err, "response", None))
        message = normalize_upstream_error(info.parsed, info.raw or str(err), fallback)
        return Outcome.failure(ErrorKind.UPSTREAM, message, info.status or 502)

    if not response.ok:
        info = read_response_body(response)
        logger.error("OpenAI API error: %s", info.parsed if info.parsed is not None else info.raw)
        message = normalize_upstream_error(info.parsed, info.raw, fallback)
        return Outcome.failure(ErrorKind.UPSTREAM, message, response.status_code or 502)

    try:
        data = response.json()
    except ValueError:
        logger.error("OpenAI API returned a non-JSON body from %s", url)
        return Outcome.failure(ErrorKind.UPSTREAM, fallback, 502)

    return Outcome.success(data)
