from fastapi import APIRouter
from .compose_prompt import ComposePrompt
from .compose_prompt_schema import ComposePromptRequest, ComposePromptResponse
from app.services.Generate_Image.generate_image_schema import ErrorResponse
from app.utils.errors import error_response

router = APIRouter()
compose_prompt_service = ComposePrompt()


@router.post("/compose_prompt", response_model=ComposePromptResponse, responses={400: {"model": ErrorResponse}})
async def get_compose_prompt(request: ComposePromptRequest):
    try:
        return compose_prompt_service.get_compose_prompt(request)
    except Exception as e:
        return error_response(e)
