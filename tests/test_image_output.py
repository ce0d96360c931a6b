import asyncio
import base64
import io

import pytest
import requests

from app.utils import image_output
from app.utils.errors import GenerationError
from conftest import FakeResponse, event_stream

DEFAULT_MIME = "image/jpeg"


def normalize(output, default_mime=DEFAULT_MIME):
    return asyncio.run(image_output.normalize_output(output, default_mime))


class FakeFileOutput:
    """Mimics replicate's FileOutput: async iteration over byte chunks plus a url"""

    def __init__(self, chunks, url="https://replicate.delivery/out.jpg"):
        self.chunks = chunks
        self.url = url

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk


class AsyncUrlOutput:
    def __init__(self, url):
        self._url = url

    async def url(self):
        return self._url


@pytest.fixture
def fake_get(monkeypatch):
    calls = []

    def install(response):
        def get(url, timeout=None):
            calls.append(url)
            return response

        monkeypatch.setattr(image_output.requests, "get", get)
        return calls

    return install


def test_data_uri_is_split_without_fetching():
    assert normalize("data:image/png;base64,QUJD") == {"imageData": "QUJD", "mimeType": "image/png"}


def test_data_uri_without_parameters_uses_header_as_mime():
    assert normalize("data:image/webp,QUJD") == {"imageData": "QUJD", "mimeType": "image/webp"}


def test_data_uri_with_empty_mime_uses_default():
    assert normalize("data:;base64,QUJD")["mimeType"] == DEFAULT_MIME


def test_http_url_is_downloaded(fake_get):
    calls = fake_get(FakeResponse(200, b"\x01\x02\x03", {"content-type": "image/jpeg"}))
    result = normalize("http://example.com/x.jpg")
    assert result == {"imageData": base64.b64encode(b"\x01\x02\x03").decode(), "mimeType": "image/jpeg"}
    assert calls == ["http://example.com/x.jpg"]


def test_http_url_without_content_type_uses_default(fake_get):
    fake_get(FakeResponse(200, b"\x01\x02\x03"))
    assert normalize("https://example.com/x", "image/png")["mimeType"] == "image/png"


def test_failed_fetch_raises_with_status(fake_get):
    fake_get(FakeResponse(404, text="not found"))
    with pytest.raises(GenerationError) as exc_info:
        normalize("https://example.com/missing.jpg")
    assert exc_info.value.status == 404
    assert "fetch failed" in exc_info.value.message


def test_fetch_connection_error_is_a_generation_error(monkeypatch):
    def get(url, timeout=None):
        raise requests.exceptions.ConnectionError("connection refused")

    monkeypatch.setattr(image_output.requests, "get", get)
    with pytest.raises(GenerationError):
        normalize("https://example.com/x.jpg")


def test_list_output_uses_first_non_null_item():
    assert normalize([None, "data:image/png;base64,QUJD", "data:image/gif;base64,WFla"]) == {
        "imageData": "QUJD",
        "mimeType": "image/png",
    }


@pytest.mark.parametrize("output", [None, [], [None, None]])
def test_missing_output_is_not_usable(output):
    with pytest.raises(GenerationError) as exc_info:
        normalize(output)
    assert "no usable image" in exc_info.value.message


def test_raw_bytes_are_encoded():
    assert normalize(b"ABC") == {"imageData": "QUJD", "mimeType": DEFAULT_MIME}
    assert normalize(bytearray(b"ABC"))["imageData"] == "QUJD"


def test_empty_bytes_are_rejected():
    with pytest.raises(GenerationError):
        normalize(b"")


def test_readable_object_is_drained():
    assert normalize([io.BytesIO(b"ABC")]) == {"imageData": "QUJD", "mimeType": DEFAULT_MIME}


def test_file_output_in_list_is_drained():
    assert normalize([FakeFileOutput([b"A", b"BC"])])["imageData"] == "QUJD"


def test_async_url_accessor_is_downloaded(fake_get):
    calls = fake_get(FakeResponse(200, b"ABC", {"content-type": "image/webp"}))
    assert normalize(AsyncUrlOutput("https://cdn.example.com/out.webp")) == {"imageData": "QUJD", "mimeType": "image/webp"}
    assert calls == ["https://cdn.example.com/out.webp"]


def test_non_http_url_accessor_falls_through():
    with pytest.raises(GenerationError) as exc_info:
        normalize(AsyncUrlOutput("ftp://example.com/out.png"))
    assert exc_info.value.message == image_output.UNUSABLE_OUTPUT_MESSAGE


def test_url_field_is_downloaded(fake_get):
    fake_get(FakeResponse(200, b"ABC", {"content-type": "image/png"}))
    assert normalize({"url": "https://cdn.example.com/out.png"})["mimeType"] == "image/png"


def test_base64_field_is_returned_directly():
    assert normalize({"base64": "QUJD", "mime_type": "image/gif"}) == {"imageData": "QUJD", "mimeType": "image/gif"}
    assert normalize({"base64": "QUJD"})["mimeType"] == DEFAULT_MIME


def test_byte_array_field_is_encoded():
    assert normalize({"data": [65, 66, 67]}) == {"imageData": "QUJD", "mimeType": DEFAULT_MIME}


def test_invalid_byte_array_falls_through_to_failure():
    with pytest.raises(GenerationError) as exc_info:
        normalize({"data": [65, 300]})
    assert exc_info.value.message == image_output.UNUSABLE_OUTPUT_MESSAGE


@pytest.mark.parametrize("output", [{"status": "succeeded"}, 42, "not an image", "data:no-comma"])
def test_unrecognized_output_fails_loudly(output):
    with pytest.raises(GenerationError) as exc_info:
        normalize(output)
    assert exc_info.value.message == image_output.UNUSABLE_OUTPUT_MESSAGE


def test_binary_stream_keeps_every_byte_in_order():
    original = bytes(range(256)) * 40
    chunks = [original[i:i + 777] for i in range(0, len(original), 777)]

    result = normalize(event_stream(*chunks))

    decoded = base64.b64decode(result["imageData"])
    assert decoded == original
    assert len(decoded) == len(original)
    assert result["mimeType"] == DEFAULT_MIME


def test_binary_stream_ignores_non_binary_events():
    result = normalize(event_stream({"status": "starting"}, b"AB", "log line", b"C"))
    assert result["imageData"] == "QUJD"


def test_stream_is_drained_before_using_first_event():
    consumed = []

    async def stream():
        for event in ["data:image/png;base64,QUJD", {"status": "processing"}, "done"]:
            consumed.append(event)
            yield event

    assert normalize(stream()) == {"imageData": "QUJD", "mimeType": "image/png"}
    assert len(consumed) == 3


def test_top_level_file_output_is_read_as_binary_stream():
    assert normalize(FakeFileOutput([b"AB", b"C"]))["imageData"] == "QUJD"


def test_empty_stream_fails():
    with pytest.raises(GenerationError) as exc_info:
        normalize(event_stream())
    assert exc_info.value.message == image_output.EMPTY_STREAM_MESSAGE


def test_stream_of_nulls_fails():
    with pytest.raises(GenerationError) as exc_info:
        normalize(event_stream(None, None))
    assert exc_info.value.message == image_output.EMPTY_STREAM_MESSAGE


@pytest.mark.parametrize("output", ["data:image/png;base64,", {"base64": ""}, {"base64": "", "mime_type": "image/png"}])
def test_empty_base64_text_is_rejected(output):
    with pytest.raises(GenerationError) as exc_info:
        normalize(output)
    assert exc_info.value.message == image_output.EMPTY_IMAGE_MESSAGE


@pytest.mark.parametrize("output", [{"base64": "not base64 !!!"}, "data:image/png;base64,QUJD!!", "data:image/png;base64,ünïcode"])
def test_invalid_base64_text_is_rejected(output):
    with pytest.raises(GenerationError) as exc_info:
        normalize(output)
    assert exc_info.value.message == image_output.UNUSABLE_OUTPUT_MESSAGE


def test_async_iterable_of_text_in_list_falls_through():
    with pytest.raises(GenerationError) as exc_info:
        normalize([event_stream("starting", "processing")])
    assert exc_info.value.message == image_output.UNUSABLE_OUTPUT_MESSAGE
