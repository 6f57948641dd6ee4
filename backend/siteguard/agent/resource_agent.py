import json
import logging
from collections.abc import Sequence
from typing import Any

from siteguard.agent.artifacts import AllocationBrief, ResourceAllocation, SuggestedResource
from siteguard.agent.base import BaseAgent
from siteguard.agent.llm_client import AIServiceError
from siteguard.agent.prompts.resources import (
    ALLOCATION_SYSTEM_PROMPT,
    ALLOCATION_USER_PROMPT,
    INSIGHT_SYSTEM_PROMPT,
    INSIGHT_USER_PROMPT,
)
from siteguard.models import resource_status_for

logger = logging.getLogger(__name__)

MAX_SUGGESTED_RESOURCES = 8
INSIGHT_FALLBACK = "AI Insights currently unavailable due to usage limits."


class ResourceAllocationAgent(BaseAgent[AllocationBrief, list[SuggestedResource]]):
    """
    Agent responsible for proposing a stage-appropriate starting inventory.
    """

    async def run(self, input_data: AllocationBrief) -> list[SuggestedResource]:
        allocation = await self.llm.generate_structured(
            system_prompt=ALLOCATION_SYSTEM_PROMPT,
            user_prompt=ALLOCATION_USER_PROMPT.format(**input_data.model_dump()),
            response_schema=ResourceAllocation,
        )
        if not allocation.resources:
            raise ValueError("ResourceAllocationAgent returned no resources.")

        # The model's own status guess is discarded.
        return [
            resource.model_copy(
                update={"status": resource_status_for(resource.quantity, resource.threshold).value}
            )
            for resource in allocation.resources[:MAX_SUGGESTED_RESOURCES]
        ]


class ResourceInsightAgent(BaseAgent[Sequence[dict[str, Any]], str]):
    """
    Two-sentence stock planning advice. Never fails: any AI error yields the
    fallback text so a dashboard does not break over an insight string.
    """

    async def run(self, input_data: Sequence[dict[str, Any]]) -> str:
        inventory = json.dumps(list(input_data), default=str)
        try:
            return await self.llm.generate_text(
                INSIGHT_SYSTEM_PROMPT,
                INSIGHT_USER_PROMPT.format(inventory=inventory),
            )
        except AIServiceError as e:
            logger.warning("Resource insight unavailable: %s", e)
            return INSIGHT_FALLBACK
