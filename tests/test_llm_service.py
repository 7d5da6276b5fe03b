"""
Text/vision generation adapter tests.

`requests.post` is patched in `gateway.llm.client`; no real upstream calls.
"""

import base64
from unittest.mock import Mock, patch

import requests

from gateway.core.types import Attachment, ErrorKind
from gateway.llm.provider_config import ProviderConfig
from gateway.llm.service import (
    UNSUPPORTED_UPLOAD_MESSAGE,
    TEXT_FALLBACK,
    build_content,
    generate_text,
    to_data_uri,
)


CONFIG = ProviderConfig(api_key="sk-test", model="gpt-4.1-mini")


def _response(status_code=200, json_body=None, text=""):
    response = Mock(status_code=status_code, ok=status_code < 400, text=text)
    response.json.return_value = json_body
    return response


class TestBuildContent:
    """Content ordering and data-URI encoding."""

    def test_text_only(self):
        assert build_content("hello", []) == [{"type": "input_text", "text": "hello"}]

    def test_text_first_then_images_in_order(self):
        first = Attachment(data=b"\x89PNG", mime_type="image/png")
        second = Attachment(data=b"\xff\xd8", mime_type="image/jpeg")

        content = build_content("describe", [first, second])

        assert [part["type"] for part in content] == ["input_text", "input_image", "input_image"]
        assert content[1]["image_url"].startswith("data:image/png;base64,")
        assert content[2]["image_url"].startswith("data:image/jpeg;base64,")

    def test_no_text_part_for_empty_message(self):
        content = build_content("", [Attachment(data=b"x", mime_type="image/gif")])
        assert len(content) == 1
        assert content[0]["type"] == "input_image"

    def test_data_uri_encoding(self):
        attachment = Attachment(data=b"abc", mime_type="image/webp")
        expected = "data:image/webp;base64," + base64.b64encode(b"abc").decode("ascii")
        assert to_data_uri(attachment) == expected


class TestGenerateTextValidation:
    """Non-image attachments abort before any upstream call."""

    def test_text_plain_attachment_rejected(self):
        with patch("gateway.llm.client.requests.post") as mock_post:
            outcome = generate_text(
                "hi",
                [Attachment(data=b"notes", mime_type="text/plain")],
                CONFIG.model,
                CONFIG,
            )

        assert outcome.error.kind == ErrorKind.VALIDATION
        assert outcome.error.http_status == 400
        assert outcome.error.message == UNSUPPORTED_UPLOAD_MESSAGE
        mock_post.assert_not_called()


class TestGenerateTextUpstream:
    """Payload shape and response/error mapping."""

    def test_success_wraps_upstream_body(self):
        upstream = {"id": "resp_1", "output": [{"type": "message"}]}
        with patch("gateway.llm.client.requests.post", return_value=_response(json_body=upstream)) as mock_post:
            outcome = generate_text("hello", [], "gpt-4.1-mini", CONFIG)

        assert outcome.ok
        assert outcome.value == {"result": upstream}

        args, kwargs = mock_post.call_args
        assert args[0] == "https://api.openai.com/v1/responses"
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        assert kwargs["json"] == {
            "model": "gpt-4.1-mini",
            "input": [{"role": "user", "content": [{"type": "input_text", "text": "hello"}]}],
        }
        assert kwargs["timeout"] == CONFIG.timeout_seconds

    def test_upstream_error_status_and_message(self):
        response = _response(status_code=401, text='{"error": {"message": "bad key"}}')
        with patch("gateway.llm.client.requests.post", return_value=response):
            outcome = generate_text("hello", [], "gpt-4.1-mini", CONFIG)

        assert outcome.error.kind == ErrorKind.UPSTREAM
        assert outcome.error.http_status == 401
        assert outcome.error.message == "bad key"

    def test_upstream_html_error(self):
        response = _response(status_code=503, text="<html><body>Service Unavailable</body></html>")
        with patch("gateway.llm.client.requests.post", return_value=response):
            outcome = generate_text("hello", [], "gpt-4.1-mini", CONFIG)

        assert outcome.error.http_status == 503
        assert "unexpected HTML response" in outcome.error.message

    def test_empty_error_body_uses_fallback(self):
        with patch("gateway.llm.client.requests.post", return_value=_response(status_code=500, text="")):
            outcome = generate_text("hello", [], "gpt-4.1-mini", CONFIG)

        assert outcome.error.http_status == 500
        assert outcome.error.message == TEXT_FALLBACK

    def test_connection_error_defaults_to_502(self):
        error = requests.exceptions.ConnectionError("Connection refused")
        with patch("gateway.llm.client.requests.post", side_effect=error):
            outcome = generate_text("hello", [], "gpt-4.1-mini", CONFIG)

        assert outcome.error.kind == ErrorKind.UPSTREAM
        assert outcome.error.http_status == 502
        assert outcome.error.message == "Connection refused"

    def test_non_json_success_body(self):
        response = _response(status_code=200, text="ok")
        response.json.side_effect = ValueError("no json")
        with patch("gateway.llm.client.requests.post", return_value=response):
            outcome = generate_text("hello", [], "gpt-4.1-mini", CONFIG)

        assert outcome.error.http_status == 502
        assert outcome.error.message == TEXT_FALLBACK
