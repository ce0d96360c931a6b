import random
import logging
from typing import Any, Dict, Optional

from .selection_storage import SelectionStorage, InMemorySelectionStorage
from app.utils.errors import ValidationError
from app.utils.prompt_options import (
    PROMPT_OPTIONS,
    SELECTION_KEYS,
    FACIAL_HAIR_NONE,
    get_hair_style_options,
    get_options_for,
)

logger = logging.getLogger(__name__)


def default_selections() -> Dict[str, str]:
    """First-listed value of every category; the male hair list matches the default gender"""
    gender = PROMPT_OPTIONS["gender"][0]
    return {
        "gender": gender,
        "hair_color": PROMPT_OPTIONS["hair_color"][0],
        "hair_style": get_hair_style_options(gender)[0],
        "facial_hair": FACIAL_HAIR_NONE,
        "body_type": PROMPT_OPTIONS["body_type"][0],
        "age": PROMPT_OPTIONS["age"][0],
        "expression": PROMPT_OPTIONS["expression"][0],
        "background": PROMPT_OPTIONS["background"][0],
    }


def validate_selections(selections: Any) -> Dict[str, str]:
    """Check a selection record before it is used for a prompt.

    Every category needs a value from its allowed list, with hair styles
    checked against the chosen gender. Facial hair is forced to "None"
    for anyone but Male. Unknown keys are dropped.
    """
    if not isinstance(selections, dict):
        raise ValidationError("selections must be an object")

    gender = selections.get("gender")
    validated = {}
    for key in SELECTION_KEYS:
        value = selections.get(key)
        if key == "facial_hair" and gender != "Male":
            validated[key] = FACIAL_HAIR_NONE
            continue
        if not isinstance(value, str) or not value:
            raise ValidationError(f"{key} is required")
        if value not in get_options_for(key, gender):
            raise ValidationError(f"'{value}' is not a valid option for {key}")
        validated[key] = value
    return validated


class SelectionStateManager:
    """Current selection record with its dependency rules.

    The record is restored from storage once on construction; a missing or
    broken saved copy falls back to the defaults. After that every change is
    written back as a whole record.
    """

    def __init__(self, storage: Optional[SelectionStorage] = None, rng: Optional[random.Random] = None):
        self.storage = storage if storage is not None else InMemorySelectionStorage()
        self.rng = rng or random.Random()
        self.selections = self._restore()

    def _restore(self) -> Dict[str, str]:
        try:
            saved = self.storage.load()
            if saved is not None:
                return validate_selections(saved)
        except (ValueError, TypeError, OSError, ValidationError) as e:
            logger.warning(f"Failed to load saved selections, using defaults: {str(e)}")
        return default_selections()

    def _commit(self, selections: Dict[str, str]) -> Dict[str, str]:
        self.selections = selections
        self.storage.save(selections)
        return dict(selections)

    def get_selections(self) -> Dict[str, str]:
        return dict(self.selections)

    def select(self, category: str, value: str) -> Dict[str, str]:
        if category not in SELECTION_KEYS:
            raise ValidationError(f"Unknown category: {category}")

        gender = value if category == "gender" else self.selections["gender"]
        if category == "facial_hair" and gender != "Male" and value != FACIAL_HAIR_NONE:
            raise ValidationError("facial_hair only applies when gender is Male")
        if value not in get_options_for(category, gender):
            raise ValidationError(f"'{value}' is not a valid option for {category}")

        new_state = dict(self.selections)
        new_state[category] = value
        if category == "gender":
            new_state["hair_style"] = get_hair_style_options(value)[0]
            if value != "Male":
                new_state["facial_hair"] = FACIAL_HAIR_NONE
        return self._commit(new_state)

    def randomize(self) -> Dict[str, str]:
        new_state = {}
        new_state["gender"] = self.rng.choice(PROMPT_OPTIONS["gender"])
        for key in ["hair_color", "body_type", "age", "expression", "background"]:
            new_state[key] = self.rng.choice(PROMPT_OPTIONS[key])

        new_state["hair_style"] = self.rng.choice(get_hair_style_options(new_state["gender"]))
        if new_state["gender"] == "Male":
            new_state["facial_hair"] = self.rng.choice(PROMPT_OPTIONS["facial_hair"])
        else:
            new_state["facial_hair"] = FACIAL_HAIR_NONE

        return self._commit({key: new_state[key] for key in SELECTION_KEYS})

    def reset(self) -> Dict[str, str]:
        self.selections = default_selections()
        self.storage.clear()
        return dict(self.selections)
