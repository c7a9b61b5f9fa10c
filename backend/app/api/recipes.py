from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from ..core.config import Settings, get_settings
from ..core.state_machine import RecipeRequestFlow
from ..models.recipe import RecipeQuery
from ..services.openai_client import RecipeOracle, get_oracle
from ..services.prompt_builder import PromptVariant

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


async def _suggest(query: RecipeQuery, variant: PromptVariant, oracle: RecipeOracle, settings: Settings) -> JSONResponse:
    log.info(f"📝 Recipe request ({variant.value}): {len(query.ingredients)} ingredients")
    flow = RecipeRequestFlow(
        oracle,
        variant=variant,
        recipe_count=settings.recipe_count,
        cuisine=settings.regional_cuisine,
        validate=settings.validate_recipes,
    )
    outcome = await flow.run(query.ingredients, query.dietary)
    return JSONResponse(status_code=outcome.status_code, content=outcome.to_payload())


@router.post("/recipes")
async def suggest_recipes(
    query: RecipeQuery,
    oracle: RecipeOracle = Depends(get_oracle),
    settings: Settings = Depends(get_settings),
):
    """Suggest recipes for the given ingredients."""
    return await _suggest(query, PromptVariant.STANDARD, oracle, settings)


@router.post("/midwest")
async def suggest_regional_recipes(
    query: RecipeQuery,
    oracle: RecipeOracle = Depends(get_oracle),
    settings: Settings = Depends(get_settings),
):
    """Same as /recipes, biased toward the configured regional cuisine."""
    return await _suggest(query, PromptVariant.REGIONAL, oracle, settings)
