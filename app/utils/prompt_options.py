PROMPT_OPTIONS = {
    "gender": ["Male", "Female"],
    "hair_color": [
        "Black",
        "Dark Brown",
        "Brown",
        "Blonde",
        "Red",
        "Gray",
        "Salt and Pepper",
    ],
    "hair_style_male": [
        "Buzz Cut",
        "Short",
        "Medium",
        "Slicked Back",
        "Man Bun",
        "Bald",
    ],
    "hair_style_female": [
        "Pixie Cut",
        "Short Bob",
        "Shoulder Length",
        "Long",
        "Ponytail",
        "Bun",
        "Bald",
    ],
    "facial_hair": [
        "None",
        "Light Stubble",
        "Goatee",
        "Mustache",
        "Short Beard",
    ],
    "body_type": ["Slim", "Athletic", "Average"],
    "age": ["Young Adult", "Adult", "Middle-aged"],
    "expression": ["Neutral", "Soft smile", "Serious"],
    "background": [
        "Studio White",
        "Studio Grey",
        "Outdoor Park",
        "Urban Street",
        "Beach Sunset",
    ],
}

# Order the studio renders its dropdowns in
SELECTION_KEYS = [
    "gender",
    "age",
    "body_type",
    "hair_color",
    "hair_style",
    "facial_hair",
    "expression",
    "background",
]

GARMENT_CATEGORIES = ["clothing", "headwear", "jewelry"]
DEFAULT_GARMENT_CATEGORY = "clothing"

FACIAL_HAIR_NONE = PROMPT_OPTIONS["facial_hair"][0]


def get_hair_style_options(gender: str) -> list:
    """Hair styles offered for a gender; anything but Male gets the female list"""
    if gender == "Male":
        return PROMPT_OPTIONS["hair_style_male"]
    return PROMPT_OPTIONS["hair_style_female"]


def get_options_for(key: str, gender: str) -> list:
    if key == "hair_style":
        return get_hair_style_options(gender)
    return PROMPT_OPTIONS.get(key, [])
