from siteguard.agent.artifacts import SafetyAnalysis
from siteguard.agent.base import BaseAgent
from siteguard.agent.llm_client import ImageInput
from siteguard.agent.prompts.safety import SAFETY_SYSTEM_PROMPT, SAFETY_USER_PROMPT
from siteguard.core.config import settings
from siteguard.models import clamp_score


class SafetyAgent(BaseAgent[ImageInput, SafetyAnalysis]):
    """
    Agent responsible for assessing a site photo for hazards.
    """

    def __init__(self):
        super().__init__(model_name=settings.MODEL_VISION or settings.MODEL_DEFAULT)

    async def run(self, input_data: ImageInput) -> SafetyAnalysis:
        analysis = await self.llm.generate_structured(
            system_prompt=SAFETY_SYSTEM_PROMPT,
            user_prompt=SAFETY_USER_PROMPT,
            response_schema=SafetyAnalysis,
            image=input_data,
        )
        analysis.risk_score = clamp_score(analysis.risk_score)
        return analysis
