import os
import logging
from typing import Any, Dict

import replicate
from dotenv import load_dotenv

from .generate_image_schema import GenerateImageResponse
from .generate_image_input import PROVIDERS, DEFAULT_PROVIDER, default_mime_for
from app.utils.errors import TransportError
from app.utils.image_output import normalize_output

load_dotenv()

logger = logging.getLogger(__name__)


def provider_error_message(error: Exception) -> str:
    """Prefer the provider's structured detail over the exception text"""
    detail = getattr(error, "detail", None)
    if isinstance(detail, str) and detail:
        return detail

    response = getattr(error, "response", None)
    if response is not None:
        try:
            body = response.json()
        except (ValueError, AttributeError):
            body = None
        if isinstance(body, dict) and isinstance(body.get("detail"), str):
            return body["detail"]

    return str(error) or "Failed to generate image"


class GenerateImage:
    def __init__(self):
        self.api_token = os.getenv("REPLICATE_API_TOKEN")
        self.provider = os.getenv("IMAGE_PROVIDER", DEFAULT_PROVIDER)
        if self.provider not in PROVIDERS:
            raise ValueError(f"Unknown image provider: {self.provider}")
        self.model = os.getenv("MODEL_NAME") or PROVIDERS[self.provider]["model"]
        self.client = replicate.Client(api_token=self.api_token)

    def build_input(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        return PROVIDERS[self.provider]["build_input"](settings)

    async def generate_image(self, settings: Dict[str, Any]) -> GenerateImageResponse:
        """Build the provider input, run the model once and normalize its output"""
        model_input = self.build_input(settings)
        default_mime = default_mime_for(self.provider, model_input)

        logger.info(f"Sending prompt to Replicate ({self.model}): {model_input['prompt'][:100]}")
        output = await self.run_model(model_input)

        payload = await normalize_output(output, default_mime)
        logger.info(f"Image ready ({payload['mimeType']}, {len(payload['imageData'])} base64 chars)")
        return GenerateImageResponse(**payload)

    async def run_model(self, model_input: Dict[str, Any]) -> Any:
        try:
            return await self.client.async_run(self.model, input=model_input)
        except Exception as e:
            logger.error(f"Replicate call failed for {self.model}: {str(e)}")
            raise TransportError(provider_error_message(e)) from e
