import logging
import uuid
from typing import Any

from fastapi import APIRouter, HTTPException, status

from siteguard import crud
from siteguard.api.deps import OwnedWorkspace, SessionDep
from siteguard.models import (
    DataResponse,
    ListResponse,
    SafetyReport,
    SafetyReportCreate,
    SafetyReportPublic,
)

router = APIRouter(prefix="/workspaces/{workspace_id}/safety-reports", tags=["safety-reports"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ListResponse[SafetyReportPublic])
def read_safety_reports(session: SessionDep, workspace: OwnedWorkspace) -> Any:
    reports = crud.list_safety_reports(session=session, workspace_id=workspace.id)
    data = [SafetyReportPublic.model_validate(report) for report in reports]
    return ListResponse(data=data, count=len(data))


@router.post("", response_model=DataResponse[SafetyReportPublic], status_code=status.HTTP_201_CREATED)
def create_safety_report(
    *, session: SessionDep, workspace: OwnedWorkspace, report_in: SafetyReportCreate
) -> Any:
    """
    Append a report to the workspace history. The workspace safety score
    follows the newest report.
    """
    report = crud.create_safety_report(session=session, db_workspace=workspace, report_in=report_in)
    logger.info(
        "Saved safety report %s for workspace %s (risk %s)",
        report.id,
        workspace.id,
        report.risk_score,
    )
    return DataResponse(data=SafetyReportPublic.model_validate(report))


@router.get("/{report_id}", response_model=DataResponse[SafetyReportPublic])
def read_safety_report(session: SessionDep, workspace: OwnedWorkspace, report_id: uuid.UUID) -> Any:
    report = session.get(SafetyReport, report_id)
    if not report or report.workspace_id != workspace.id:
        raise HTTPException(status_code=404, detail="Safety report not found")
    return DataResponse(data=SafetyReportPublic.model_validate(report))
