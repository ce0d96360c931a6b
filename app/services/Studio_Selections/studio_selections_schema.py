from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class SelectRequest(BaseModel):
    selections: Optional[Dict[str, str]] = Field(default=None, description="Record currently held by the client; defaults when missing or invalid")
    category: str = Field(description="Category being changed, e.g. 'gender'")
    value: str = Field(description="New value for the category")


class SelectionsResponse(BaseModel):
    selections: Dict[str, str]


class PromptOptionsResponse(BaseModel):
    options: Dict[str, List[str]]
    selection_keys: List[str]
    garment_categories: List[str]
