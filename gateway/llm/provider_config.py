"""Provider configuration for the chat and image upstreams.

Architectural role:
    Resolves model names, endpoint base URL, timeouts and the API credential for
    `gateway.llm.client` and `gateway.image.client`.

Model call flow integration:
    - `service.generate_text` consumes `model` (from the dispatcher).
    - `client.send_response_request` consumes `base_url`, `api_key`, `timeout_seconds`.
    - `gateway.image.service.generate_image` consumes `image_model` and `image_size`.

Determinism:
    Values are resolved once by `ProviderConfig.from_env()` at startup and then
    passed explicitly; nothing in this package re-reads the environment per request.

Failure behavior:
    Missing key material is represented as `None`; the dispatcher reports it as a
    configuration error for non-news modes.
"""

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_IMAGE_MODEL = "gpt-image-1"
DEFAULT_IMAGE_SIZE = "1024x1024"
KEY_FILE = "config/openai.key"


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/openai.key` -> `OPENAI_API_KEY`).
        2. Raw file contents at `path`.

    Args:
        path: Configured key file path or `None`.

    Returns:
        Key string or `None` when not available.

    Edge cases:
        - `None` path returns `None`.
        - Missing or empty file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name, "").strip()
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None


@dataclass(frozen=True)
class ProviderConfig:
    """Chat/image upstream settings.

    Relevant environment variables:
        - `OPENAI_API_KEY` (or the `config/openai.key` file)
        - `OPENAI_MODEL`
        - `OPENAI_IMAGE_MODEL`
        - `OPENAI_IMAGE_SIZE`
        - `OPENAI_BASE_URL`
        - `OPENAI_TIMEOUT_SECONDS`
    """

    api_key: str | None = None
    model: str = DEFAULT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    image_size: str = DEFAULT_IMAGE_SIZE
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 120.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    def endpoint(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @classmethod
    def from_env(cls) -> "ProviderConfig":
        return cls(
            api_key=load_key(KEY_FILE),
            model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL).strip() or DEFAULT_MODEL,
            image_model=os.getenv("OPENAI_IMAGE_MODEL", DEFAULT_IMAGE_MODEL).strip() or DEFAULT_IMAGE_MODEL,
            image_size=os.getenv("OPENAI_IMAGE_SIZE", DEFAULT_IMAGE_SIZE).strip() or DEFAULT_IMAGE_SIZE,
            base_url=os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL,
            timeout_seconds=float(os.getenv("OPENAI_TIMEOUT_SECONDS", "120")),
        )
