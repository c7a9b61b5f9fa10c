from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("OPENAI_API_KEY", "OPEN_AI_KEY"),
    )
    openai_model: str = "gpt-4"
    temperature: float = 0.2
    recipe_count: int = 2
    regional_cuisine: str = "midwest"
    validate_recipes: bool = False
    log_level: str = "INFO"
    port: int = 5050

    model_config = {
        "env_file": ".env",
        "env_prefix": "",
        "extra": "ignore",
        "populate_by_name": True,
    }

@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()
