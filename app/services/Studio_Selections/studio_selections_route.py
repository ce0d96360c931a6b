from fastapi import APIRouter
from .studio_selections import SelectionStateManager, default_selections
from .selection_storage import InMemorySelectionStorage
from .studio_selections_schema import SelectRequest, SelectionsResponse, PromptOptionsResponse
from app.services.Generate_Image.generate_image_schema import ErrorResponse
from app.utils.errors import error_response
from app.utils.prompt_options import PROMPT_OPTIONS, SELECTION_KEYS, GARMENT_CATEGORIES

# Selections live in the browser; each call replays one transition on the record it sends
router = APIRouter()


@router.get("/prompt_options", response_model=PromptOptionsResponse)
async def get_prompt_options():
    return PromptOptionsResponse(
        options=PROMPT_OPTIONS,
        selection_keys=SELECTION_KEYS,
        garment_categories=GARMENT_CATEGORIES,
    )


@router.get("/selections/defaults", response_model=SelectionsResponse)
async def get_default_selections():
    return SelectionsResponse(selections=default_selections())


@router.post("/selections/select", response_model=SelectionsResponse, responses={400: {"model": ErrorResponse}})
async def select_option(request: SelectRequest):
    try:
        manager = SelectionStateManager(InMemorySelectionStorage(request.selections))
        return SelectionsResponse(selections=manager.select(request.category, request.value))
    except Exception as e:
        return error_response(e)


@router.post("/selections/randomize", response_model=SelectionsResponse)
async def randomize_selections():
    manager = SelectionStateManager()
    return SelectionsResponse(selections=manager.randomize())
