"""Image-generation HTTP client.

Processing flow:
    1. Receive the generation payload from `gateway.image.service`.
    2. Submit it once to `<base_url>/images/generations`.
    3. Return the parsed JSON body or a normalized upstream error as an `Outcome`.

Base64 handling:
    This module does not decode Base64 content; `b64_json` is passed through.
"""

from gateway.core.types import Outcome
from gateway.llm.client import send_request
from gateway.llm.provider_config import ProviderConfig

IMAGES_PATH = "images/generations"
IMAGE_FALLBACK = (
    "OpenAI API returned an unreadable response while generating the image. "
    "Please try again later."
)


def send_image_request(payload: dict, config: ProviderConfig) -> Outcome:
    """Send an image-generation request to the configured upstream."""
    return send_request(IMAGES_PATH, payload, config, IMAGE_FALLBACK)
