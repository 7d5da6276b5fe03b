"""
Multipart request reading for the message endpoint.

Architectural role:
- Parse `multipart/form-data` into an `InboundRequest` (fields + buffered files).
- Enforce upload limits while parsing (file count, file size, field size,
  field-name length, field count, part count).
- Translate parser limit failures into `PayloadTooLarge`, other parser
  failures into `MultipartParseError`.

Processing lifecycle:
1. Parse the body with Starlette's multipart parser and the configured limits.
2. Check field names and total part count.
3. Buffer each `images` file part into an `Attachment`, rejecting oversized files.
4. Record whether `message` / `mode` were present at all.

Interaction with core:
- No adapter is invoked here. The caller hands the result to the dispatcher.
- MIME types are not validated here; the text/vision adapter rejects non-images.

Error handling strategy:
- Both exception types carry a `status` attribute and are converted to JSON by
  the app's exception handlers.

Side effects:
- Spooled upload files are closed when the form context exits.
"""

import logging

from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from gateway.core.settings import UploadLimits
from gateway.core.types import Attachment, InboundRequest


logger = logging.getLogger(__name__)


# ============================================================
# CONFIG
# ============================================================

FILE_FIELD = "images"
MULTIPART_CONTENT_TYPE = "multipart/form-data"
PAYLOAD_TOO_LARGE_MESSAGE = "Multipart payload exceeds allowed size limits."

# Parser messages that signal a size/count limit rather than a malformed body.
PAYLOAD_LIMIT_MARKERS = (
    "too many files",
    "too many fields",
    "too many parts",
    "part exceeded maximum size",
    "field name too long",
    "field value too long",
    "file too large",
)


# ============================================================
# ERRORS
# ============================================================

class GatewayError(Exception):
    """Base for errors raised by the multipart layer; carries an HTTP status."""

    status = 500

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or message


class PayloadTooLarge(GatewayError):
    """Upload or field limits were exceeded."""

    status = 413

    def __init__(self, detail: str) -> None:
        super().__init__(PAYLOAD_TOO_LARGE_MESSAGE, detail)


class MultipartParseError(GatewayError):
    """The body could not be parsed for a reason other than a size limit."""

    status = 500


def is_payload_limit_message(message: str | None) -> bool:
    lowered = (message or "").lower()
    return any(marker in lowered for marker in PAYLOAD_LIMIT_MARKERS)


def is_multipart(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == MULTIPART_CONTENT_TYPE


# ============================================================
# PUBLIC ENTRYPOINT
# ============================================================

async def read_inbound_request(request: Request, limits: UploadLimits) -> InboundRequest:
    """
    Parse the multipart body of `request` into an `InboundRequest`.

    Raises:
        PayloadTooLarge: If any configured limit is exceeded.
        MultipartParseError: If the body cannot be parsed otherwise.
    """
    try:
        form_context = request.form(
            max_files=limits.max_files,
            max_fields=limits.max_fields,
            max_part_size=limits.max_field_bytes,
        )
        form = await form_context
    except (MultiPartException, StarletteHTTPException) as exc:
        raise _translate_parser_error(exc) from exc

    try:
        items = form.multi_items()
        _check_shape(items, limits)

        attachments = []
        for key, value in items:
            if not isinstance(value, UploadFile):
                continue
            if key != FILE_FIELD:
                raise MultipartParseError(f"Unexpected field: {key}")
            attachments.append(await _buffer_upload(value, limits))

        message = form.get("message")
        mode = form.get("mode")

        return InboundRequest(
            message=message if isinstance(message, str) else None,
            mode=mode if isinstance(mode, str) else None,
            attachments=tuple(attachments),
            has_message_field="message" in form,
            has_mode_field="mode" in form,
        )
    finally:
        await form.close()


# ============================================================
# VALIDATION
# ============================================================

def _translate_parser_error(exc: Exception) -> GatewayError:
    detail = getattr(exc, "message", None) or getattr(exc, "detail", None) or str(exc)
    if is_payload_limit_message(detail):
        logger.warning("Multipart limit exceeded: %s", detail)
        return PayloadTooLarge(detail)
    logger.error("Multipart parsing failed: %s", detail)
    return MultipartParseError(str(detail))


def _check_shape(items: list, limits: UploadLimits) -> None:
    if len(items) > limits.max_parts:
        raise PayloadTooLarge(f"Too many parts. Maximum number of parts is {limits.max_parts}.")

    for key, _ in items:
        if len(key) > limits.max_field_name_chars:
            raise PayloadTooLarge(
                f"Field name too long. Maximum length is {limits.max_field_name_chars}."
            )


async def _buffer_upload(upload: UploadFile, limits: UploadLimits) -> Attachment:
    """Read one upload into memory, enforcing the per-file size limit."""
    if upload.size is not None and upload.size > limits.max_file_bytes:
        raise PayloadTooLarge(f"File too large: {upload.filename}")

    data = await upload.read()
    if len(data) > limits.max_file_bytes:
        raise PayloadTooLarge(f"File too large: {upload.filename}")

    return Attachment(
        data=data,
        mime_type=upload.content_type or "application/octet-stream",
        filename=upload.filename,
    )
