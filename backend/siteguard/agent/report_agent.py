from datetime import date

from siteguard.agent.artifacts import DailyReport, ReportContext
from siteguard.agent.base import BaseAgent
from siteguard.agent.prompts.report import REPORT_SYSTEM_PROMPT, REPORT_USER_PROMPT


class ReportAgent(BaseAgent[ReportContext, DailyReport]):
    """
    Agent responsible for the daily construction site report of one workspace.
    """

    async def run(self, input_data: ReportContext) -> DailyReport:
        today = date.today().isoformat()
        prompt = REPORT_USER_PROMPT.format(
            workspace_name=input_data.workspace_name,
            stage=input_data.stage,
            progress=input_data.progress,
            safety_score=input_data.safety_score,
            critical_resources=", ".join(input_data.critical_resources) or "None",
            low_resources=", ".join(input_data.low_resources) or "None",
            date=today,
        )

        report = await self.llm.generate_structured(
            system_prompt=REPORT_SYSTEM_PROMPT,
            user_prompt=prompt,
            response_schema=DailyReport,
        )
        if not report.date:
            report.date = today
        return report
