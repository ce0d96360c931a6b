import math
from typing import Any, Dict, List, Optional

from app.utils.errors import ValidationError

SEEDREAM_SIZES = ["1K", "2K", "4K", "custom"]
DEFAULT_SIZE = "2K"

ASPECT_RATIOS = [
    "match_input_image",
    "1:1",
    "4:3",
    "3:4",
    "16:9",
    "9:16",
    "3:2",
    "2:3",
    "21:9",
]
DEFAULT_ASPECT_RATIO = "match_input_image"

SEQUENTIAL_GENERATION_MODES = ["disabled", "auto"]
DEFAULT_SEQUENTIAL_MODE = "disabled"

OUTPUT_FORMAT_MIME = {"jpg": "image/jpeg", "png": "image/png"}

MIN_CUSTOM_DIMENSION = 1024
MAX_CUSTOM_DIMENSION = 4096
MIN_IMAGES = 1
MAX_IMAGES = 15
MIN_SAFETY_TOLERANCE = 0
MAX_SAFETY_TOLERANCE = 6
DEFAULT_SAFETY_TOLERANCE = 2
# flux-kontext rejects higher tolerances when editing an input image
MAX_SAFETY_TOLERANCE_WITH_IMAGE = 2


def parse_int(value: Any) -> Optional[int]:
    """Parse a finite number (int, float or numeric string) and floor it"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return math.floor(parsed)


def int_in_range(value: Any, minimum: int, maximum: int) -> Optional[int]:
    parsed = parse_int(value)
    if parsed is None or parsed < minimum or parsed > maximum:
        return None
    return parsed


def clamp_int(value: Any, minimum: int, maximum: int, default: int) -> int:
    parsed = parse_int(value)
    if parsed is None:
        return default
    return max(minimum, min(maximum, parsed))


def _choice(value: Any, allowed: List[str], default: str) -> str:
    requested = value.strip() if isinstance(value, str) else ""
    return requested if requested in allowed else default


def normalise_prompt(value: Any) -> str:
    prompt = value.strip() if isinstance(value, str) else ""
    if not prompt:
        raise ValidationError("prompt required")
    return prompt


def normalise_size(value: Any) -> str:
    return _choice(value, SEEDREAM_SIZES, DEFAULT_SIZE)


def normalise_aspect_ratio(value: Any) -> str:
    return _choice(value, ASPECT_RATIOS, DEFAULT_ASPECT_RATIO)


def normalise_sequential_mode(value: Any) -> str:
    return _choice(value, SEQUENTIAL_GENERATION_MODES, DEFAULT_SEQUENTIAL_MODE)


def normalise_output_format(value: Any, default: str) -> str:
    return _choice(value, list(OUTPUT_FORMAT_MIME), default)


def normalise_image_input(value: Any) -> Optional[List[str]]:
    """Accept one URL or a list of URLs; blank and non-string entries are dropped"""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return None
    urls = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return urls or None


def build_seedream_input(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Map studio settings to bytedance/seedream-4 input parameters"""
    model_input: Dict[str, Any] = {"prompt": normalise_prompt(settings.get("prompt"))}

    size = normalise_size(settings.get("size"))
    model_input["size"] = size

    if size == "custom":
        width = int_in_range(settings.get("width"), MIN_CUSTOM_DIMENSION, MAX_CUSTOM_DIMENSION)
        height = int_in_range(settings.get("height"), MIN_CUSTOM_DIMENSION, MAX_CUSTOM_DIMENSION)
        if width is None or height is None:
            raise ValidationError("custom size requires width/height in range")
        model_input["width"] = width
        model_input["height"] = height
    else:
        model_input["aspect_ratio"] = normalise_aspect_ratio(settings.get("aspectRatio"))

    sequential_mode = normalise_sequential_mode(settings.get("sequentialImageGeneration"))
    model_input["sequential_image_generation"] = sequential_mode
    if sequential_mode == "auto":
        model_input["max_images"] = clamp_int(settings.get("maxImages"), MIN_IMAGES, MAX_IMAGES, MIN_IMAGES)
    else:
        model_input["max_images"] = 1

    image_input = normalise_image_input(settings.get("imageInput"))
    if image_input:
        model_input["image_input"] = image_input

    return model_input


def build_flux_kontext_input(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Map studio settings to black-forest-labs/flux-kontext-pro input parameters"""
    model_input: Dict[str, Any] = {
        "prompt": normalise_prompt(settings.get("prompt")),
        "aspect_ratio": normalise_aspect_ratio(settings.get("aspectRatio")),
        "output_format": normalise_output_format(settings.get("outputFormat"), "png"),
    }

    # Single reference image; fall back to the first entry of the list field
    images = normalise_image_input(settings.get("inputImage")) or normalise_image_input(settings.get("imageInput"))
    max_tolerance = MAX_SAFETY_TOLERANCE
    if images:
        model_input["input_image"] = images[0]
        max_tolerance = MAX_SAFETY_TOLERANCE_WITH_IMAGE

    model_input["safety_tolerance"] = clamp_int(
        settings.get("safetyTolerance"),
        MIN_SAFETY_TOLERANCE,
        max_tolerance,
        min(DEFAULT_SAFETY_TOLERANCE, max_tolerance),
    )

    seed = parse_int(settings.get("seed"))
    if seed is not None:
        model_input["seed"] = seed

    return model_input


def build_nano_banana_input(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Map studio settings to google/nano-banana input parameters"""
    model_input: Dict[str, Any] = {
        "prompt": normalise_prompt(settings.get("prompt")),
        "output_format": normalise_output_format(settings.get("outputFormat"), "jpg"),
    }

    image_input = normalise_image_input(settings.get("imageInput"))
    if image_input:
        model_input["image_input"] = image_input

    return model_input


PROVIDERS = {
    "seedream": {
        "model": "bytedance/seedream-4",
        "build_input": build_seedream_input,
        "default_mime": "image/jpeg",
    },
    "flux_kontext": {
        "model": "black-forest-labs/flux-kontext-pro",
        "build_input": build_flux_kontext_input,
        "default_mime": "image/png",
    },
    "nano_banana": {
        "model": "google/nano-banana",
        "build_input": build_nano_banana_input,
        "default_mime": "image/jpeg",
    },
}
DEFAULT_PROVIDER = "seedream"


def default_mime_for(provider: str, model_input: Dict[str, Any]) -> str:
    """Mime type used when the output itself carries none"""
    output_format = model_input.get("output_format")
    if output_format in OUTPUT_FORMAT_MIME:
        return OUTPUT_FORMAT_MIME[output_format]
    return PROVIDERS[provider]["default_mime"]
