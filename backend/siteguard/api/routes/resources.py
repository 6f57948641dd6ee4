import uuid
from typing import Any

from fastapi import APIRouter, HTTPException, status

from siteguard import crud
from siteguard.api.deps import OwnedWorkspace, SessionDep
from siteguard.models import (
    DataResponse,
    ListResponse,
    Message,
    ResourceBulkReplace,
    ResourceItem,
    ResourceItemCreate,
    ResourceItemPublic,
    ResourceItemUpdate,
    ResourceQuantityUpdate,
    ResourceStatistics,
    Workspace,
)

router = APIRouter(prefix="/workspaces/{workspace_id}/resources", tags=["resources"])


def _get_resource_or_404(session: SessionDep, workspace: Workspace, resource_id: uuid.UUID) -> ResourceItem:
    resource = crud.get_resource(session=session, workspace_id=workspace.id, resource_id=resource_id)
    if not resource:
        raise HTTPException(status_code=404, detail="Resource not found")
    return resource


def _public_list(resources: list[ResourceItem]) -> ListResponse[ResourceItemPublic]:
    data = [ResourceItemPublic.model_validate(resource) for resource in resources]
    return ListResponse(data=data, count=len(data))


@router.get("", response_model=ListResponse[ResourceItemPublic])
def read_resources(session: SessionDep, workspace: OwnedWorkspace) -> Any:
    return _public_list(crud.list_resources(session=session, workspace_id=workspace.id))


@router.put("", response_model=ListResponse[ResourceItemPublic])
def replace_resources(
    *, session: SessionDep, workspace: OwnedWorkspace, bulk_in: ResourceBulkReplace
) -> Any:
    """
    Replace the whole inventory, e.g. when applying an AI allocation.
    """
    resources = crud.replace_resources(
        session=session, db_workspace=workspace, resources_in=bulk_in.resources
    )
    return _public_list(resources)


@router.get("/statistics", response_model=DataResponse[ResourceStatistics])
def read_resource_statistics(session: SessionDep, workspace: OwnedWorkspace) -> Any:
    resources = crud.list_resources(session=session, workspace_id=workspace.id)
    return DataResponse(data=crud.resource_statistics(resources))


@router.post("", response_model=DataResponse[ResourceItemPublic], status_code=status.HTTP_201_CREATED)
def create_resource(
    *, session: SessionDep, workspace: OwnedWorkspace, resource_in: ResourceItemCreate
) -> Any:
    resource = crud.create_resource(session=session, db_workspace=workspace, resource_in=resource_in)
    return DataResponse(data=ResourceItemPublic.model_validate(resource))


@router.get("/{resource_id}", response_model=DataResponse[ResourceItemPublic])
def read_resource(session: SessionDep, workspace: OwnedWorkspace, resource_id: uuid.UUID) -> Any:
    resource = _get_resource_or_404(session, workspace, resource_id)
    return DataResponse(data=ResourceItemPublic.model_validate(resource))


@router.put("/{resource_id}", response_model=DataResponse[ResourceItemPublic])
def update_resource(
    *,
    session: SessionDep,
    workspace: OwnedWorkspace,
    resource_id: uuid.UUID,
    resource_in: ResourceItemUpdate,
) -> Any:
    resource = _get_resource_or_404(session, workspace, resource_id)
    resource = crud.update_resource(
        session=session, db_workspace=workspace, db_resource=resource, resource_in=resource_in
    )
    return DataResponse(data=ResourceItemPublic.model_validate(resource))


@router.patch("/{resource_id}/quantity", response_model=DataResponse[ResourceItemPublic])
def update_resource_quantity(
    *,
    session: SessionDep,
    workspace: OwnedWorkspace,
    resource_id: uuid.UUID,
    quantity_in: ResourceQuantityUpdate,
) -> Any:
    resource = _get_resource_or_404(session, workspace, resource_id)
    resource = crud.update_resource(
        session=session,
        db_workspace=workspace,
        db_resource=resource,
        resource_in={"quantity": quantity_in.quantity},
    )
    return DataResponse(data=ResourceItemPublic.model_validate(resource))


@router.delete("/{resource_id}", response_model=Message)
def delete_resource(session: SessionDep, workspace: OwnedWorkspace, resource_id: uuid.UUID) -> Any:
    resource = _get_resource_or_404(session, workspace, resource_id)
    crud.delete_resource(session=session, db_workspace=workspace, db_resource=resource)
    return Message(message="Resource deleted successfully")
