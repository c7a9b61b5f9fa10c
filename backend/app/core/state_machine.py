import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence

from ..models.recipe import DietaryPreferences
from ..services.openai_client import OracleCallFailed, RecipeOracle
from ..services.prompt_builder import SYSTEM_INSTRUCTION, PromptVariant, build_prompt
from ..services.response_extractor import ExtractionError, ResponseExtractor

log = logging.getLogger(__name__)


class RequestState(str, Enum):
    IDLE = "idle"
    PROMPT_BUILT = "prompt_built"
    ORACLE_CALLED = "oracle_called"
    EXTRACTED_OK = "extracted_ok"
    EXTRACTION_FAILED = "extraction_failed"
    ORACLE_CALL_FAILED = "oracle_call_failed"


TERMINAL_STATES = {
    RequestState.EXTRACTED_OK,
    RequestState.EXTRACTION_FAILED,
    RequestState.ORACLE_CALL_FAILED,
}


@dataclass
class RecipeOutcome:
    state: RequestState
    recipes: List[Any] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def status_code(self) -> int:
        if self.state == RequestState.ORACLE_CALL_FAILED:
            return 500
        return 200

    def to_payload(self) -> dict:
        if self.state == RequestState.EXTRACTED_OK:
            return {"recipes": [
                r.model_dump() if hasattr(r, "model_dump") else r for r in self.recipes
            ]}
        if isinstance(self.error, ExtractionError):
            return self.error.to_payload()
        return {"error": str(self.error)}


class RecipeRequestFlow:
    """
    One recipe request: build prompt, call the oracle once, extract.
    No retries; every failure is terminal.
    """

    def __init__(
        self,
        oracle: RecipeOracle,
        variant: PromptVariant = PromptVariant.STANDARD,
        recipe_count: int = 2,
        cuisine: str = "midwest",
        validate: bool = False,
    ):
        self.oracle = oracle
        self.variant = variant
        self.recipe_count = recipe_count
        self.cuisine = cuisine
        self.validate = validate
        self.state = RequestState.IDLE
        self.prompt: Optional[str] = None
        self.raw: Optional[str] = None

    def _move(self, state: RequestState) -> None:
        log.info(f"Recipe request {self.state.value} -> {state.value}")
        self.state = state

    async def run(
        self,
        ingredients: Sequence[str],
        preferences: Optional[DietaryPreferences] = None,
    ) -> RecipeOutcome:
        if self.state != RequestState.IDLE:
            raise RuntimeError(f"Recipe request already ran (state: {self.state.value})")

        self.prompt = build_prompt(
            ingredients,
            preferences,
            self.variant,
            recipe_count=self.recipe_count,
            cuisine=self.cuisine,
        )
        self._move(RequestState.PROMPT_BUILT)

        try:
            self.raw = await self.oracle.complete(SYSTEM_INSTRUCTION, self.prompt)
        except Exception as e:
            # Anything the oracle raises is reported as an upstream failure.
            error = e if isinstance(e, OracleCallFailed) else OracleCallFailed(str(e))
            log.error(f"💥 Oracle call failed: {error}")
            self._move(RequestState.ORACLE_CALL_FAILED)
            return RecipeOutcome(self.state, error=error)
        self._move(RequestState.ORACLE_CALLED)

        try:
            recipes = ResponseExtractor.extract(self.raw, validate=self.validate)
        except ExtractionError as e:
            log.warning(f"⚠️ Could not extract recipes ({e.kind}): {e}")
            self._move(RequestState.EXTRACTION_FAILED)
            return RecipeOutcome(self.state, error=e)

        self._move(RequestState.EXTRACTED_OK)
        log.info(f"✅ Extracted {len(recipes)} recipes")
        return RecipeOutcome(self.state, recipes=recipes)
