"""
Image generation adapter tests.

`requests.post` is patched in `gateway.llm.client`, which the image client
uses for transport.
"""

from unittest.mock import Mock, patch

from gateway.core.types import ErrorKind
from gateway.image.client import IMAGE_FALLBACK
from gateway.image.service import extract_first_image, generate_image
from gateway.llm.provider_config import ProviderConfig


CONFIG = ProviderConfig(api_key="sk-test", image_model="gpt-image-1")


def _response(status_code=200, json_body=None, text=""):
    response = Mock(status_code=status_code, ok=status_code < 400, text=text)
    response.json.return_value = json_body
    return response


class TestExtractFirstImage:
    """First `data[]` entry mapped with a default mime type."""

    def test_default_mime_type(self):
        assert extract_first_image({"data": [{"b64_json": "AAA"}]}) == {
            "b64_json": "AAA",
            "mime_type": "image/png",
        }

    def test_explicit_mime_type_kept(self):
        image = extract_first_image({"data": [{"b64_json": "BBB", "mime_type": "image/webp"}]})
        assert image["mime_type"] == "image/webp"

    def test_only_first_image_used(self):
        image = extract_first_image({"data": [{"b64_json": "1"}, {"b64_json": "2"}]})
        assert image["b64_json"] == "1"

    def test_no_images(self):
        assert extract_first_image({"data": []}) is None
        assert extract_first_image({}) is None


class TestGenerateImage:
    """Request payload and envelope."""

    def test_success(self):
        upstream = {"created": 1, "data": [{"b64_json": "AAA"}]}
        with patch("gateway.llm.client.requests.post", return_value=_response(json_body=upstream)) as mock_post:
            outcome = generate_image("a red fox", "1024x1024", CONFIG)

        assert outcome.ok
        assert outcome.value == {
            "result": upstream,
            "image": {"b64_json": "AAA", "mime_type": "image/png"},
        }

        args, kwargs = mock_post.call_args
        assert args[0] == "https://api.openai.com/v1/images/generations"
        assert kwargs["json"] == {
            "model": "gpt-image-1",
            "prompt": "a red fox",
            "size": "1024x1024",
            "n": 1,
        }

    def test_no_image_returned(self):
        with patch("gateway.llm.client.requests.post", return_value=_response(json_body={"data": []})):
            outcome = generate_image("a red fox", "1024x1024", CONFIG)

        assert outcome.value["image"] is None

    def test_upstream_error(self):
        response = _response(
            status_code=400,
            text='{"error": {"message": "Your request was rejected by the safety system."}}',
        )
        with patch("gateway.llm.client.requests.post", return_value=response):
            outcome = generate_image("something", "1024x1024", CONFIG)

        assert outcome.error.kind == ErrorKind.UPSTREAM
        assert outcome.error.http_status == 400
        assert outcome.error.message == "Your request was rejected by the safety system."

    def test_empty_error_body_uses_image_fallback(self):
        with patch("gateway.llm.client.requests.post", return_value=_response(status_code=500, text="")):
            outcome = generate_image("x", "1024x1024", CONFIG)

        assert outcome.error.message == IMAGE_FALLBACK
