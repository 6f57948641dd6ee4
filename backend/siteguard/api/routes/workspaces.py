import logging
from typing import Any, Literal

from fastapi import APIRouter, HTTPException, status

from siteguard import crud
from siteguard.api.deps import CurrentUser, OwnedWorkspace, SessionDep
from siteguard.models import (
    DataResponse,
    ListResponse,
    Message,
    WorkspaceCreate,
    WorkspaceProgressUpdate,
    WorkspacePublic,
    WorkspaceStats,
    WorkspaceStatus,
    WorkspaceUpdate,
)

router = APIRouter(prefix="/workspaces", tags=["workspaces"])
logger = logging.getLogger(__name__)

StatusFilter = Literal["All", "Active", "Under Construction", "Finished"]


@router.get("", response_model=ListResponse[WorkspacePublic])
def read_workspaces(
    session: SessionDep,
    current_user: CurrentUser,
    search: str | None = None,
    status_filter: StatusFilter = "All",
) -> Any:
    workspaces = crud.list_workspaces(
        session=session,
        owner_id=current_user.id,
        search=search,
        status_filter=status_filter,
    )
    data = [WorkspacePublic.model_validate(ws) for ws in workspaces]
    return ListResponse(data=data, count=len(data))


@router.get("/stats", response_model=DataResponse[WorkspaceStats])
def read_workspace_stats(session: SessionDep, current_user: CurrentUser) -> Any:
    """
    Portfolio figures across all of the user's workspaces.
    """
    workspaces = crud.list_workspaces(session=session, owner_id=current_user.id)
    return DataResponse(data=crud.workspace_stats(workspaces))


@router.post("", response_model=DataResponse[WorkspacePublic], status_code=status.HTTP_201_CREATED)
def create_workspace(
    *, session: SessionDep, current_user: CurrentUser, workspace_in: WorkspaceCreate
) -> Any:
    workspace = crud.create_workspace(
        session=session, workspace_in=workspace_in, owner_id=current_user.id
    )
    logger.info("Created workspace %s for user %s", workspace.id, current_user.id)
    return DataResponse(data=WorkspacePublic.model_validate(workspace))


@router.get("/{workspace_id}", response_model=DataResponse[WorkspacePublic])
def read_workspace(workspace: OwnedWorkspace) -> Any:
    return DataResponse(data=WorkspacePublic.model_validate(workspace))


@router.put("/{workspace_id}", response_model=DataResponse[WorkspacePublic])
def update_workspace(
    *, session: SessionDep, workspace: OwnedWorkspace, workspace_in: WorkspaceUpdate
) -> Any:
    workspace = crud.update_workspace(
        session=session, db_workspace=workspace, workspace_in=workspace_in
    )
    return DataResponse(data=WorkspacePublic.model_validate(workspace))


@router.delete("/{workspace_id}", response_model=Message)
def delete_workspace(session: SessionDep, workspace: OwnedWorkspace) -> Any:
    workspace_id = workspace.id
    crud.delete_workspace(session=session, db_workspace=workspace)
    logger.info("Deleted workspace %s", workspace_id)
    return Message(message="Workspace deleted successfully")


@router.patch("/{workspace_id}/progress", response_model=DataResponse[WorkspacePublic])
def update_workspace_progress(
    *, session: SessionDep, workspace: OwnedWorkspace, progress_in: WorkspaceProgressUpdate
) -> Any:
    if workspace.status == WorkspaceStatus.FINISHED:
        raise HTTPException(
            status_code=409,
            detail="Progress cannot change on a finished workspace",
        )
    workspace = crud.update_workspace_progress(
        session=session, db_workspace=workspace, progress=progress_in.progress
    )
    return DataResponse(data=WorkspacePublic.model_validate(workspace))


@router.patch("/{workspace_id}/status", response_model=DataResponse[WorkspacePublic])
def toggle_workspace_status(session: SessionDep, workspace: OwnedWorkspace) -> Any:
    workspace = crud.toggle_workspace_status(session=session, db_workspace=workspace)
    logger.info("Workspace %s is now %s", workspace.id, workspace.status.value)
    return DataResponse(data=WorkspacePublic.model_validate(workspace))
