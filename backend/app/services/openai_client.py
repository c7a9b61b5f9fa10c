"""
Recipe oracle backed by the OpenAI Responses API.
"""

import logging
from typing import Optional, Protocol

from openai import AsyncOpenAI

from ..core.config import Settings, get_settings

log = logging.getLogger(__name__)


class OracleCallFailed(Exception):
    """The upstream text generation call itself failed."""


class RecipeOracle(Protocol):
    async def complete(self, instructions: str, prompt: str) -> str:
        ...


class OpenAIRecipeOracle:
    def __init__(self, settings: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.settings.openai_api_key:
                raise OracleCallFailed("OpenAI API key not configured. Please set OPENAI_API_KEY in your .env file.")
            self._client = AsyncOpenAI(api_key=self.settings.openai_api_key)
        return self._client

    async def complete(self, instructions: str, prompt: str) -> str:
        client = self.client
        log.info(f"🔗 Calling OpenAI model {self.settings.openai_model}")
        try:
            response = await client.responses.create(
                model=self.settings.openai_model,
                instructions=instructions,
                input=prompt,
                temperature=self.settings.temperature,
            )
        except Exception as e:
            log.error(f"❌ OpenAI API error: {e}")
            raise OracleCallFailed(str(e)) from e

        text = response.output_text or ""
        log.info(f"✅ OpenAI replied with {len(text)} characters")
        log.debug(f"📋 OpenAI reply: {text}")
        return text


def get_oracle() -> RecipeOracle:
    """FastAPI dependency; override in tests to inject a fake oracle."""
    return OpenAIRecipeOracle(get_settings())
