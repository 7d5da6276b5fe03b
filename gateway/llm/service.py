"""Text/vision generation adapter.

Architectural role:
    Builds the multimodal content array for one user turn and forwards it to the
    responses endpoint through `gateway.llm.client`.

Model call flow:
    message + attachments -> `build_content` -> payload -> `client.send_request`.

Content ordering:
    The text part comes first (only when the message is non-empty), followed by
    one image part per attachment in upload order.

Failure scenarios:
    - A non-image attachment yields a validation error before any upstream call.
    - Upstream failures are normalized by `client.send_request`.
"""

import base64
from typing import Iterable, Sequence

from gateway.core.types import Attachment, ErrorKind, Outcome
from gateway.llm.client import send_request
from gateway.llm.provider_config import ProviderConfig

RESPONSES_PATH = "responses"
UNSUPPORTED_UPLOAD_MESSAGE = "Only image uploads are supported."
TEXT_FALLBACK = (
    "OpenAI API returned an unreadable response while processing the request. "
    "Please try again later."
)


class UnsupportedAttachmentError(ValueError):
    """Raised by `build_content` for an attachment that is not an image."""

    status = 400


def to_data_uri(attachment: Attachment) -> str:
    """Encode an attachment as `data:<mime>;base64,<payload>`."""
    encoded = base64.b64encode(attachment.data).decode("ascii")
    return f"data:{attachment.mime_type};base64,{encoded}"


def build_content(message: str | None, attachments: Iterable[Attachment]) -> list[dict]:
    """Build the ordered content parts for a single user message.

    Raises:
        UnsupportedAttachmentError: If any attachment is not `image/*`.
    """
    content = []

    if message:
        content.append({"type": "input_text", "text": message})

    for attachment in attachments:
        if not (attachment.mime_type or "").startswith("image/"):
            raise UnsupportedAttachmentError(UNSUPPORTED_UPLOAD_MESSAGE)
        content.append({"type": "input_image", "image_url": to_data_uri(attachment)})

    return content


def generate_text(
    message: str | None,
    attachments: Sequence[Attachment],
    model: str,
    config: ProviderConfig,
) -> Outcome:
    """Run one text/vision generation.

    Returns:
        `Outcome` whose value is `{"result": <upstream body>}`.
    """
    try:
        content = build_content(message, attachments)
    except UnsupportedAttachmentError as err:
        return Outcome.failure(ErrorKind.VALIDATION, str(err), err.status)

    payload = {
        "model": model,
        "input": [
            {
                "role": "user",
                "content": content,
            }
        ],
    }

    outcome = send_request(RESPONSES_PATH, payload, config, TEXT_FALLBACK)
    if not outcome.ok:
        return outcome

    return Outcome.success({"result": outcome.value})
