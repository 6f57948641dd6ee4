import logging
import re

from siteguard.agent.artifacts import LIFECYCLE_PHASES, ArchitectureBrief, GeneratedArchitecture, PlanStage
from siteguard.agent.base import BaseAgent
from siteguard.agent.prompts.architecture import ARCHITECTURE_SYSTEM_PROMPT, ARCHITECTURE_USER_PROMPT

logger = logging.getLogger(__name__)


def _phase_key(value: str) -> str:
    return re.sub(r"[^a-z]+", " ", value.lower().replace("&", " and ")).strip()


class ArchitectureAgent(BaseAgent[ArchitectureBrief, GeneratedArchitecture]):
    """
    Agent responsible for drafting a lifecycle plan from a project brief.
    """

    @staticmethod
    def _normalize_stages(stages: list[PlanStage]) -> list[PlanStage]:
        """Map the model's stages onto the five lifecycle phases, in order.

        Stages are matched by name ("2. Project Planning and Design" matches
        "Project Planning & Design"). Phases the model skipped are filled with
        an empty placeholder; stages matching no phase are dropped.
        """
        by_phase: dict[str, PlanStage] = {}
        for stage in stages:
            key = _phase_key(stage.phase)
            match = next((p for p in LIFECYCLE_PHASES if _phase_key(p) in key), None)
            if match is None:
                logger.warning("Dropping stage outside the lifecycle phases: %s", stage.phase)
                continue
            by_phase.setdefault(match, stage)

        if not by_phase:
            raise ValueError("ArchitectureAgent did not return any lifecycle phase.")

        normalized: list[PlanStage] = []
        for phase in LIFECYCLE_PHASES:
            stage = by_phase.get(phase)
            if stage is None:
                normalized.append(PlanStage(phase=phase, duration="TBD", tasks=[]))
            else:
                normalized.append(stage.model_copy(update={"phase": phase}))
        return normalized

    async def run(self, input_data: ArchitectureBrief) -> GeneratedArchitecture:
        prompt = ARCHITECTURE_USER_PROMPT.format(**input_data.model_dump())

        plan = await self.llm.generate_structured(
            system_prompt=ARCHITECTURE_SYSTEM_PROMPT,
            user_prompt=prompt,
            response_schema=GeneratedArchitecture,
        )

        plan.stages = self._normalize_stages(plan.stages)
        return plan
