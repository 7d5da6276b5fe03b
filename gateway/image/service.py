"""Image generation adapter used by the dispatcher for `mode=image`.

Role in pipeline:
    - Receives the prompt and fixed target size from the dispatcher.
    - Requests exactly one image from the upstream.
    - Extracts the first generated image and returns it beside the raw upstream body.

Base64 handling:
    `b64_json` is passed through untouched; no decoding or temporary files.

Error handling strategy:
    Upstream failures are already normalized by the client and returned as-is.
"""

from gateway.core.types import Outcome
from gateway.image.client import send_image_request
from gateway.llm.provider_config import ProviderConfig

DEFAULT_MIME_TYPE = "image/png"


def extract_first_image(response: dict) -> dict | None:
    """Map the first `data[]` entry to `{b64_json, mime_type}`, or `None`."""
    data = response.get("data") if isinstance(response, dict) else None
    if not isinstance(data, list) or not data:
        return None

    first = data[0]
    if not isinstance(first, dict):
        return None

    return {
        "b64_json": first.get("b64_json"),
        "mime_type": first.get("mime_type") or DEFAULT_MIME_TYPE,
    }


def generate_image(prompt: str, size: str, config: ProviderConfig) -> Outcome:
    """Generate one image for `prompt` at `size`.

    Returns:
        `Outcome` whose value is `{"result": <upstream body>, "image": {...} | None}`.
    """
    payload = {
        "model": config.image_model,
        "prompt": prompt,
        "size": size,
        "n": 1,
    }

    outcome = send_image_request(payload, config)
    if not outcome.ok:
        return outcome

    return Outcome.success({
        "result": outcome.value,
        "image": extract_first_image(outcome.value),
    })
