import logging
from typing import Optional, Protocol, Union
import httpx
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError
from pydantic_ai.models import Model
from gitgrade.config import Settings
from gitgrade.errors import ModelUnavailable

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are the GitGrade review engine. You reply with a single JSON object and nothing else.
"""


class GenerativeModel(Protocol):
    async def invoke(self, prompt: str) -> str:
        ...


class AgentModel:
    """
    Text-in, text-out wrapper around a pydantic-ai Agent.
    The completion is returned untouched; it is validated downstream.
    """

    def __init__(
        self,
        model: Union[Model, str],
        timeout: Optional[float] = None,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self.model = model
        self.agent = Agent(model, output_type=str, system_prompt=system_prompt)
        self.model_settings = {"timeout": timeout} if timeout else None

    async def invoke(self, prompt: str) -> str:
        try:
            result = await self.agent.run(prompt, model_settings=self.model_settings)
        except (AgentRunError, httpx.HTTPError) as e:
            logger.debug("Model call failed: %r", e)
            raise ModelUnavailable(f"Generative model call failed: {e}") from e
        return result.output


def build_model(settings: Settings) -> AgentModel:
    """
    Gemini model keyed explicitly with the configured credential.
    """
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    model = GoogleModel(settings.model, provider=GoogleProvider(api_key=settings.ai_api_key))
    return AgentModel(model, timeout=settings.model_timeout)
