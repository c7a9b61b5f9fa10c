"""
Renders the instruction sent to the recipe oracle.

Both variants ask for a plain JSON array so the reply can be handed to
ResponseExtractor unchanged.
"""

import json
from enum import Enum
from typing import Optional, Sequence

from ..models.recipe import DietaryPreferences

SYSTEM_INSTRUCTION = (
    "You are a helpful assistant that generates JSON objects for recipes in a "
    "React app. Be strictly on format."
)

RECIPE_SCHEMA = """type Recipe = {
  id: number,
  title: string,
  readyInMinutes: number,
  servings: number,
  summary: string,
  instructions: string,
  image: string,
  dishTypes: string[]
};"""


class PromptVariant(str, Enum):
    STANDARD = "standard"
    REGIONAL = "regional"


def _flag(value: bool) -> str:
    return "true" if value else "false"


def render_dietary(preferences: DietaryPreferences) -> str:
    return (
        f"vegetarian: {_flag(preferences.vegetarian)}, "
        f"vegan: {_flag(preferences.vegan)}, "
        f"gluten free: {_flag(preferences.glutenFree)}, "
        f"dairy free: {_flag(preferences.dairyFree)}"
    )


def build_prompt(
    ingredients: Sequence[str],
    preferences: Optional[DietaryPreferences] = None,
    variant: PromptVariant = PromptVariant.STANDARD,
    recipe_count: int = 2,
    cuisine: str = "midwest",
) -> str:
    """Return the user prompt for the given ingredients and dietary flags."""
    if preferences is None:
        preferences = DietaryPreferences()

    subject = "a recipe"
    if variant == PromptVariant.REGIONAL:
        subject = f"a recipe popular in the {cuisine}"

    lines = [
        "Given these user inputs:",
        f"Ingredients: {json.dumps(list(ingredients), ensure_ascii=False)}",
        f"Dietary preferences: {render_dietary(preferences)}",
        "",
        f"Generate an array of exactly {recipe_count} JSON objects, each representing {subject}.",
        "The JSON must match EXACTLY this TypeScript interface, and be able to be interpreted using JSON.parse.",
        'The output must be a valid JSON array, with all property names and string values wrapped in double quotes ("). '
        "DO NOT use JavaScript variable assignments, only the plain JSON array.",
        "",
        RECIPE_SCHEMA,
        "",
        "Requirements:",
        "- Use only the provided ingredients and dietary preferences.",
        "- Each recipe should be unique and follow all selected dietary preferences.",
        "- Provide a realistic, Unsplash-style food image URL for each recipe.",
    ]
    if variant == PromptVariant.REGIONAL:
        lines.append(f"- Every recipe must be a dish commonly cooked in the {cuisine}.")
    lines += ["", "Respond ONLY with the JSON array, nothing else."]
    return "\n".join(lines) + "\n"
