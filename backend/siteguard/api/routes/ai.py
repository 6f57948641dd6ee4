import logging
from typing import Any, TypeVar

from fastapi import APIRouter, File, HTTPException, UploadFile

from siteguard import crud
from siteguard.agent.architecture_agent import ArchitectureAgent
from siteguard.agent.artifacts import (
    AllocationBrief,
    ArchitectureBrief,
    DailyReport,
    GeneratedArchitecture,
    ReportContext,
    SafetyAnalysis,
    SuggestedResource,
)
from siteguard.agent.base import BaseAgent
from siteguard.agent.llm_client import AIServiceError, AIUsageLimitExceeded, ImageInput
from siteguard.agent.report_agent import ReportAgent
from siteguard.agent.resource_agent import INSIGHT_FALLBACK, ResourceAllocationAgent, ResourceInsightAgent
from siteguard.agent.safety_agent import SafetyAgent
from siteguard.api.deps import CurrentUser, OwnedWorkspace, SessionDep
from siteguard.models import DataResponse, ListResponse, ResourceItemPublic, ResourceStatus

router = APIRouter(tags=["ai"])
logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 10 * 1024 * 1024

InT = TypeVar("InT")
OutT = TypeVar("OutT")


async def _run_agent(agent_cls: type[BaseAgent[InT, OutT]], input_data: InT) -> OutT:
    try:
        agent = agent_cls()
        return await agent.run(input_data)
    except AIUsageLimitExceeded as e:
        raise HTTPException(status_code=429, detail=str(e))
    except (AIServiceError, ValueError) as e:
        logger.error("%s failed: %s", agent_cls.__name__, e)
        raise HTTPException(status_code=502, detail="AI generation failed. Please try again.")


@router.post("/ai/architecture", response_model=DataResponse[GeneratedArchitecture])
async def generate_architecture(current_user: CurrentUser, brief: ArchitectureBrief) -> Any:
    """
    Draft a lifecycle plan. The plan is not saved; post it to the workspace's
    architecture endpoint to keep it.
    """
    plan = await _run_agent(ArchitectureAgent, brief)
    return DataResponse(data=plan)


@router.post("/ai/safety-analysis", response_model=DataResponse[SafetyAnalysis])
async def analyze_safety_image(current_user: CurrentUser, file: UploadFile = File(...)) -> Any:
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail=f"Unsupported file type: {content_type or 'unknown'}")
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="The uploaded image is empty.")
    if len(content) > MAX_IMAGE_BYTES:
        raise HTTPException(status_code=413, detail="The uploaded image is too large.")

    analysis = await _run_agent(SafetyAgent, ImageInput(data=content, mime_type=content_type))
    return DataResponse(data=analysis)


@router.post("/ai/resource-allocation", response_model=ListResponse[SuggestedResource])
async def suggest_resource_allocation(current_user: CurrentUser, brief: AllocationBrief) -> Any:
    resources = await _run_agent(ResourceAllocationAgent, brief)
    return ListResponse(data=resources, count=len(resources))


@router.post("/workspaces/{workspace_id}/resources/insights", response_model=DataResponse[str])
async def read_resource_insights(session: SessionDep, workspace: OwnedWorkspace) -> Any:
    resources = crud.list_resources(session=session, workspace_id=workspace.id)
    inventory = [
        ResourceItemPublic.model_validate(resource).model_dump(mode="json", exclude={"id", "workspace_id"})
        for resource in resources
    ]
    try:
        insight = await ResourceInsightAgent().run(inventory)
    except AIServiceError as e:
        logger.warning("Resource insight agent unavailable: %s", e)
        insight = INSIGHT_FALLBACK
    return DataResponse(data=insight)


@router.post("/workspaces/{workspace_id}/reports/daily", response_model=DataResponse[DailyReport])
async def generate_daily_report(session: SessionDep, workspace: OwnedWorkspace) -> Any:
    resources = crud.list_resources(session=session, workspace_id=workspace.id)
    context = ReportContext(
        workspace_name=workspace.name,
        stage=workspace.stage,
        progress=workspace.progress,
        safety_score=workspace.safety_score,
        critical_resources=[r.name for r in resources if r.status == ResourceStatus.CRITICAL],
        low_resources=[r.name for r in resources if r.status == ResourceStatus.LOW],
    )
    report = await _run_agent(ReportAgent, context)
    return DataResponse(data=report)
