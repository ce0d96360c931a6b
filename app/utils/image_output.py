import asyncio
import base64
import binascii
import inspect
import logging
import os
from typing import Any, Dict, Optional

import requests

from app.utils.errors import GenerationError

logger = logging.getLogger(__name__)

NO_OUTPUT_MESSAGE = "Image generation failed: model returned no output, no usable image."
UNUSABLE_OUTPUT_MESSAGE = "Image generation failed: model did not return a usable image."
EMPTY_STREAM_MESSAGE = "Image generation failed: stream yielded no usable data."
EMPTY_IMAGE_MESSAGE = "Image generation failed: model returned an empty image."

BINARY_TYPES = (bytes, bytearray, memoryview)


def image_result(image_data: str, mime_type: str) -> Dict[str, str]:
    return {"imageData": image_data, "mimeType": mime_type}


def checked_image_result(payload: str, mime_type: str) -> Dict[str, str]:
    """Pass through base64 text from the provider once it decodes to a non-empty image"""
    if not payload:
        raise GenerationError(EMPTY_IMAGE_MESSAGE)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        logger.error("Model returned text that is not valid base64")
        raise GenerationError(UNUSABLE_OUTPUT_MESSAGE)
    if not data:
        raise GenerationError(EMPTY_IMAGE_MESSAGE)
    return image_result(payload, mime_type)


def encode_image_bytes(data: bytes, mime_type: str) -> Dict[str, str]:
    """Base64-encode a complete image buffer; an empty buffer is never a usable image"""
    if not data:
        raise GenerationError(EMPTY_IMAGE_MESSAGE)
    return image_result(base64.b64encode(data).decode("utf-8"), mime_type)


def is_async_stream(value: Any) -> bool:
    return hasattr(value, "__aiter__")


def _field(item: Any, name: str) -> Any:
    """Read a field from either a dict payload or an attribute of a provider object"""
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def _fetch_timeout() -> Optional[float]:
    raw = os.getenv("IMAGE_FETCH_TIMEOUT")
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid IMAGE_FETCH_TIMEOUT value: {raw!r}")
        return None


async def download_image_as_base64(url: str, fallback_mime: str) -> Dict[str, str]:
    """Fetch a remote image and return it as an image result.
    The response content-type wins over the fallback mime type."""
    try:
        response = await asyncio.to_thread(requests.get, url, timeout=_fetch_timeout())
    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to fetch image from URL: {url}. Error: {str(e)}")
        raise GenerationError(f"Image generation failed: fetch failed for {url}: {str(e)}")

    if not response.ok:
        logger.error(
            f"Failed to fetch image from URL: {url}. Status: {response.status_code}. Body: {response.text[:200]}"
        )
        raise GenerationError(
            f"Image generation failed: fetch failed for {url} (status {response.status_code})",
            status=response.status_code,
        )

    mime_type = response.headers.get("content-type") or fallback_mime
    logger.info(f"Fetched image from URL ({len(response.content)} bytes, {mime_type})")
    return encode_image_bytes(response.content, mime_type)


async def read_byte_stream(stream: Any) -> bytes:
    """Drain a readable byte stream to the end, keeping chunk order"""
    if is_async_stream(stream):
        chunks = []
        async for chunk in stream:
            if chunk:
                chunks.append(bytes(chunk))
        return b"".join(chunks)

    if inspect.iscoroutinefunction(stream.read):
        data = await stream.read()
    else:
        data = await asyncio.to_thread(stream.read)
    return bytes(data or b"")


# Matchers over a single candidate output, tried in order. A handler returning
# None falls through to the next matcher.

def _is_data_uri(item: Any) -> bool:
    return isinstance(item, str) and item.startswith("data:") and "," in item


async def _from_data_uri(item: str, default_mime: str):
    header, payload = item[len("data:"):].split(",", 1)
    mime_type = header.split(";")[0] or default_mime
    return checked_image_result(payload, mime_type)


def _is_http_url(item: Any) -> bool:
    return isinstance(item, str) and item.startswith("http")


async def _from_http_url(item: str, default_mime: str):
    return await download_image_as_base64(item, default_mime)


def _is_binary(item: Any) -> bool:
    return isinstance(item, BINARY_TYPES)


async def _from_binary(item, default_mime: str):
    return encode_image_bytes(bytes(item), default_mime)


def _is_byte_stream(item: Any) -> bool:
    return is_async_stream(item) or callable(getattr(item, "read", None))


async def _from_byte_stream(item: Any, default_mime: str):
    try:
        data = await read_byte_stream(item)
    except TypeError as e:
        # Iterable of text or structured events rather than byte chunks
        logger.warning(f"Readable output did not yield bytes: {str(e)}")
        return None
    logger.info(f"Drained readable stream output ({len(data)} bytes)")
    return encode_image_bytes(data, default_mime)


def _has_url_accessor(item: Any) -> bool:
    return not isinstance(item, dict) and callable(getattr(item, "url", None))


async def _from_url_accessor(item: Any, default_mime: str):
    url = item.url()
    if inspect.isawaitable(url):
        url = await url
    if _is_http_url(url):
        return await download_image_as_base64(url, default_mime)
    return None


def _has_url_field(item: Any) -> bool:
    return _is_http_url(_field(item, "url"))


async def _from_url_field(item: Any, default_mime: str):
    return await download_image_as_base64(_field(item, "url"), default_mime)


def _has_base64_field(item: Any) -> bool:
    return isinstance(_field(item, "base64"), str)


async def _from_base64_field(item: Any, default_mime: str):
    mime_type = _field(item, "mime_type")
    if not isinstance(mime_type, str) or not mime_type:
        mime_type = default_mime
    return checked_image_result(_field(item, "base64"), mime_type)


def _has_byte_array_field(item: Any) -> bool:
    return isinstance(_field(item, "data"), list)


async def _from_byte_array_field(item: Any, default_mime: str):
    try:
        data = bytes(_field(item, "data"))
    except (TypeError, ValueError) as e:
        logger.warning(f"Failed to convert array data to bytes: {str(e)}")
        return None
    return encode_image_bytes(data, default_mime)


OUTPUT_MATCHERS = [
    (_is_data_uri, _from_data_uri),
    (_is_http_url, _from_http_url),
    (_is_binary, _from_binary),
    (_is_byte_stream, _from_byte_stream),
    (_has_url_accessor, _from_url_accessor),
    (_has_url_field, _from_url_field),
    (_has_base64_field, _from_base64_field),
    (_has_byte_array_field, _from_byte_array_field),
]


async def extract_image_payload(raw_output: Any, default_mime: str) -> Dict[str, str]:
    """Normalize a direct (non-stream) model output into {imageData, mimeType}.

    Lists and tuples use their first non-None element. Unrecognized shapes
    raise GenerationError instead of returning a guess.
    """
    if raw_output is None:
        raise GenerationError(NO_OUTPUT_MESSAGE)

    items = raw_output if isinstance(raw_output, (list, tuple)) else [raw_output]
    item = next((candidate for candidate in items if candidate is not None), None)
    if item is None:
        raise GenerationError(NO_OUTPUT_MESSAGE)

    for matches, handle in OUTPUT_MATCHERS:
        if not matches(item):
            continue
        result = await handle(item, default_mime)
        if result is not None:
            return result

    logger.error(f"Unrecognized model output of type {type(item).__name__}")
    raise GenerationError(UNUSABLE_OUTPUT_MESSAGE)


async def consume_stream(stream: Any, default_mime: str) -> Dict[str, str]:
    """Drain an event stream to completion, then decide how to read it.

    The first byte chunk marks the stream as binary and every byte chunk is
    joined in arrival order. A stream without byte chunks falls back to its
    first non-binary event, processed like a direct output.
    """
    chunks = []
    is_binary_stream = False
    first_event = None
    event_count = 0

    async for event in stream:
        event_count += 1
        if isinstance(event, BINARY_TYPES):
            is_binary_stream = True
            chunks.append(bytes(event))
        elif not is_binary_stream and first_event is None and event is not None:
            first_event = event
        else:
            logger.debug(f"Skipping stream event of type {type(event).__name__}")

    logger.info(f"Stream finished after {event_count} events (binary={is_binary_stream})")

    if is_binary_stream and chunks:
        logger.info(f"Collected {len(chunks)} binary chunks for image data")
        return encode_image_bytes(b"".join(chunks), default_mime)

    if first_event is not None:
        return await extract_image_payload(first_event, default_mime)

    raise GenerationError(EMPTY_STREAM_MESSAGE)


async def normalize_output(output: Any, default_mime: str) -> Dict[str, str]:
    if is_async_stream(output):
        logger.info("Received a stream from the provider, consuming")
        return await consume_stream(output, default_mime)
    return await extract_image_payload(output, default_mime)
