import logging

from fastapi import APIRouter
from .generate_image import GenerateImage
from .generate_image_schema import GenerateImageRequest, GenerateImageResponse, ErrorResponse
from app.utils.errors import StudioError, error_response

logger = logging.getLogger(__name__)

router = APIRouter()
generate_image_service = GenerateImage()


@router.post(
    "/generate",
    response_model=GenerateImageResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_image(request: GenerateImageRequest):
    """Generate one image from a prompt and return it as base64"""
    try:
        return await generate_image_service.generate_image(request.model_dump(exclude_none=True))
    except StudioError as e:
        logger.error(f"Image generation failed: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception("Unexpected error generating image")
        return error_response(e)
