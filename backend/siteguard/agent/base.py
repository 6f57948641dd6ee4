from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from siteguard.agent.llm_client import LLMClient
from siteguard.core.config import settings

InType = TypeVar("InType")
OutType = TypeVar("OutType")


class BaseAgent(ABC, Generic[InType, OutType]):
    """Abstract base class for the AI helpers behind the site tools."""

    def __init__(self, model_name: str | None = None):
        model_to_use = model_name or settings.MODEL_DEFAULT
        self.llm = LLMClient(model_name=model_to_use)

    @abstractmethod
    async def run(self, input_data: InType) -> OutType:
        """Run the agent on the given input to produce its artifact."""
        pass
