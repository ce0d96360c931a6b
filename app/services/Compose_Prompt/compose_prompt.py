from typing import Dict

from .compose_prompt_schema import ComposePromptRequest, ComposePromptResponse
from app.services.Studio_Selections.studio_selections import validate_selections
from app.utils.prompt_options import FACIAL_HAIR_NONE

BACKGROUND_CLAUSES = {
    "Studio White": "shot against a seamless, solid white background with bright, even studio lighting",
    "Studio Grey": "shot against a seamless, solid light gray background with bright, even studio lighting",
    "Outdoor Park": "shot against a tranquil park scene with lush greenery and soft, natural sunlight, creating a fresh and calm mood",
    "Urban Street": "shot against a dynamic urban street scene with blurred city lights and modern architecture, creating an energetic and sophisticated mood",
    "Beach Sunset": "shot against a serene beach at sunset with dramatic golden hour lighting and waves in the background, creating a romantic and peaceful mood",
}
DEFAULT_BACKGROUND = "Studio Grey"


def facial_hair_clause(gender: str, facial_hair: str) -> str:
    if gender == "Male" and facial_hair and facial_hair != FACIAL_HAIR_NONE:
        return f", with {facial_hair.lower()} facial hair"
    return ""


def hair_description(hair_style: str, hair_color: str) -> str:
    if hair_style == "Bald":
        return "a bald head"
    return f"{hair_style.lower()} {hair_color.lower()} hair"


def background_clause(background: str) -> str:
    return BACKGROUND_CLAUSES.get(background, BACKGROUND_CLAUSES[DEFAULT_BACKGROUND])


def compose_prompt(selections: Dict[str, str], category: str) -> str:
    """Turn a selection record into the image prompt for a garment category.

    'headwear' asks for a front-facing portrait, every other category for a
    full-body shot. Values are lower-cased inside the sentences.
    """
    age = selections["age"].lower()
    gender = selections["gender"].lower()
    body_type = selections["body_type"].lower()
    hair = hair_description(selections["hair_style"], selections["hair_color"])
    facial_hair = facial_hair_clause(selections["gender"], selections.get("facial_hair", FACIAL_HAIR_NONE))
    background = background_clause(selections["background"])
    expression = selections["expression"].lower()

    if category == "headwear":
        prompt = (
            f"A high-resolution, front-facing photorealistic portrait of a {age} German {gender} model "
            f"with a {body_type} build and fair skin. "
            f"The model has {hair}{facial_hair}, with their head upright and directly facing the camera in a neutral pose. "
            f"The model is wearing a plain, form-fitting white t-shirt. "
            f"The background is {background}. "
            f"The facial expression is {expression}. "
            f"The model's hair is styled to be compatible with headwear. No headwear or accessories are present. "
            f"This is a professional e-commerce catalog photo intended for virtual headwear try-on. "
            f"Sharp focus, evenly lit, neutral background."
        )
    else:
        prompt = (
            f"A full-body, photorealistic photograph of a {age} German {gender} model "
            f"with a {body_type} build and fair skin. "
            f"The model has {hair}{facial_hair} and is wearing a plain, form-fitting white t-shirt "
            f"and neutral grey shorts with simple white sneakers. "
            f"The model is standing in a standard front-facing neutral pose, with arms relaxed at their sides, {background}. "
            f"The facial expression is {expression}. "
            f"The entire body, from head to toe, is visible in the frame. "
            f"High-resolution, sharp focus, professional e-commerce catalogue image."
        )

    return prompt.strip()


class ComposePrompt:
    def get_compose_prompt(self, request: ComposePromptRequest) -> ComposePromptResponse:
        selections = validate_selections(request.selections)
        return ComposePromptResponse(prompt=compose_prompt(selections, request.category))
