from pydantic import BaseModel, Field
from typing import Dict

from app.utils.prompt_options import DEFAULT_GARMENT_CATEGORY


class ComposePromptRequest(BaseModel):
    selections: Dict[str, str] = Field(description="Chosen value per attribute category")
    category: str = Field(default=DEFAULT_GARMENT_CATEGORY, description="Garment category: 'clothing', 'headwear' or 'jewelry'")


class ComposePromptResponse(BaseModel):
    prompt: str
