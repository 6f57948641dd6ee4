from typing import Any

from fastapi import APIRouter, HTTPException, status

from siteguard import crud
from siteguard.api.deps import OwnedWorkspace, SessionDep
from siteguard.models import (
    ArchitectureMaterial,
    ArchitecturePlan,
    ArchitecturePlanIn,
    ArchitecturePlanPublic,
    ArchitectureSection,
    ArchitectureStage,
    DataResponse,
    Message,
    Workspace,
)

router = APIRouter(prefix="/workspaces/{workspace_id}/architecture", tags=["architecture"])


def _require_plan(workspace: Workspace) -> ArchitecturePlan:
    if workspace.architecture_plan is None:
        raise HTTPException(status_code=404, detail="Architecture plan not found")
    return workspace.architecture_plan


@router.get("", response_model=DataResponse[ArchitecturePlanPublic | None])
def read_architecture_plan(workspace: OwnedWorkspace) -> Any:
    plan = workspace.architecture_plan
    return DataResponse(data=ArchitecturePlanPublic.model_validate(plan) if plan else None)


@router.post("", response_model=DataResponse[ArchitecturePlanPublic], status_code=status.HTTP_201_CREATED)
def save_architecture_plan(
    *, session: SessionDep, workspace: OwnedWorkspace, plan_in: ArchitecturePlanIn
) -> Any:
    """
    Save the plan for this workspace. A workspace holds at most one plan,
    so saving again replaces the previous one.
    """
    plan = crud.save_architecture_plan(session=session, db_workspace=workspace, plan_in=plan_in)
    return DataResponse(data=ArchitecturePlanPublic.model_validate(plan))


@router.put("", response_model=DataResponse[ArchitecturePlanPublic])
def update_architecture_plan(
    *, session: SessionDep, workspace: OwnedWorkspace, plan_in: ArchitecturePlanIn
) -> Any:
    _require_plan(workspace)
    plan = crud.save_architecture_plan(session=session, db_workspace=workspace, plan_in=plan_in)
    return DataResponse(data=ArchitecturePlanPublic.model_validate(plan))


@router.delete("", response_model=Message)
def delete_architecture_plan(session: SessionDep, workspace: OwnedWorkspace) -> Any:
    plan = _require_plan(workspace)
    crud.delete_architecture_plan(session=session, db_workspace=workspace, db_plan=plan)
    return Message(message="Architecture plan deleted successfully")


@router.get("/sections", response_model=DataResponse[list[ArchitectureSection]])
def read_sections(workspace: OwnedWorkspace) -> Any:
    plan = _require_plan(workspace)
    return DataResponse(data=plan.sections)


@router.post("/sections", response_model=DataResponse[list[ArchitectureSection]], status_code=status.HTTP_201_CREATED)
def add_section(*, session: SessionDep, workspace: OwnedWorkspace, section: ArchitectureSection) -> Any:
    plan = crud.append_to_plan(
        session=session,
        db_workspace=workspace,
        db_plan=_require_plan(workspace),
        field="sections",
        item=section.model_dump(),
    )
    return DataResponse(data=plan.sections)


@router.get("/materials", response_model=DataResponse[list[ArchitectureMaterial]])
def read_materials(workspace: OwnedWorkspace) -> Any:
    plan = _require_plan(workspace)
    return DataResponse(data=plan.materials)


@router.post("/materials", response_model=DataResponse[list[ArchitectureMaterial]], status_code=status.HTTP_201_CREATED)
def add_material(*, session: SessionDep, workspace: OwnedWorkspace, material: ArchitectureMaterial) -> Any:
    plan = crud.append_to_plan(
        session=session,
        db_workspace=workspace,
        db_plan=_require_plan(workspace),
        field="materials",
        item=material.model_dump(),
    )
    return DataResponse(data=plan.materials)


@router.get("/stages", response_model=DataResponse[list[ArchitectureStage]])
def read_stages(workspace: OwnedWorkspace) -> Any:
    plan = _require_plan(workspace)
    return DataResponse(data=plan.stages)


@router.post("/stages", response_model=DataResponse[list[ArchitectureStage]], status_code=status.HTTP_201_CREATED)
def add_stage(*, session: SessionDep, workspace: OwnedWorkspace, stage: ArchitectureStage) -> Any:
    plan = crud.append_to_plan(
        session=session,
        db_workspace=workspace,
        db_plan=_require_plan(workspace),
        field="stages",
        item=stage.model_dump(),
    )
    return DataResponse(data=plan.stages)
