import uuid
from collections import Counter
from typing import Any

from sqlmodel import Session, col, or_, select

from siteguard.core.security import get_password_hash, verify_password
from siteguard.models import (
    ArchitecturePlan,
    ArchitecturePlanIn,
    ResourceItem,
    ResourceItemCreate,
    ResourceItemUpdate,
    ResourceStatistics,
    ResourceStatus,
    ResourceStatusCounts,
    SafetyBuckets,
    SafetyReport,
    SafetyReportCreate,
    User,
    UserCreate,
    Workspace,
    WorkspaceCreate,
    WorkspaceStats,
    WorkspaceStatus,
    WorkspaceUpdate,
    clamp_score,
    get_datetime_utc,
    resource_status_for,
)


def create_user(*, session: Session, user_create: UserCreate) -> User:
    db_obj = User.model_validate(
        user_create, update={"hashed_password": get_password_hash(user_create.password)}
    )
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def get_user_by_email(*, session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email)
    return session.exec(statement).first()


# Argon2 hash of a throwaway password. Unknown emails are verified against it
# so a login takes the same time whether or not the account exists.
DUMMY_HASH = "$argon2id$v=19$m=65536,t=3,p=4$MjQyZWE1MzBjYjJlZTI0Yw$YTU4NGM5ZTZmYjE2NzZlZjY0ZWY3ZGRkY2U2OWFjNjk"


def authenticate(*, session: Session, email: str, password: str) -> User | None:
    db_user = get_user_by_email(session=session, email=email)
    if not db_user:
        verify_password(password, DUMMY_HASH)
        return None
    verified, updated_password_hash = verify_password(password, db_user.hashed_password)
    if not verified:
        return None
    if updated_password_hash:
        db_user.hashed_password = updated_password_hash
        session.add(db_user)
        session.commit()
        session.refresh(db_user)
    return db_user


# Workspaces

def _touch(workspace: Workspace) -> None:
    workspace.last_updated = get_datetime_utc()


def create_workspace(*, session: Session, workspace_in: WorkspaceCreate, owner_id: uuid.UUID) -> Workspace:
    db_workspace = Workspace.model_validate(workspace_in, update={"owner_id": owner_id})
    session.add(db_workspace)
    session.commit()
    session.refresh(db_workspace)
    return db_workspace


def list_workspaces(
    *,
    session: Session,
    owner_id: uuid.UUID,
    search: str | None = None,
    status_filter: str | None = None,
) -> list[Workspace]:
    statement = select(Workspace).where(Workspace.owner_id == owner_id)
    if search:
        pattern = f"%{search.lower()}%"
        statement = statement.where(
            or_(
                col(Workspace.name).ilike(pattern),
                col(Workspace.location).ilike(pattern),
            )
        )
    if status_filter and status_filter != "All":
        wanted = WorkspaceStatus.UNDER_CONSTRUCTION if status_filter == "Active" else WorkspaceStatus(status_filter)
        statement = statement.where(Workspace.status == wanted)
    statement = statement.order_by(col(Workspace.created_at).desc())
    return list(session.exec(statement).all())


def update_workspace(*, session: Session, db_workspace: Workspace, workspace_in: WorkspaceUpdate) -> Workspace:
    workspace_data = workspace_in.model_dump(exclude_unset=True, exclude_none=True)
    db_workspace.sqlmodel_update(workspace_data)
    _touch(db_workspace)
    session.add(db_workspace)
    session.commit()
    session.refresh(db_workspace)
    return db_workspace


def update_workspace_progress(*, session: Session, db_workspace: Workspace, progress: int) -> Workspace:
    db_workspace.progress = progress
    _touch(db_workspace)
    session.add(db_workspace)
    session.commit()
    session.refresh(db_workspace)
    return db_workspace


def toggle_workspace_status(*, session: Session, db_workspace: Workspace) -> Workspace:
    if db_workspace.status == WorkspaceStatus.FINISHED:
        db_workspace.status = WorkspaceStatus.UNDER_CONSTRUCTION
    else:
        db_workspace.status = WorkspaceStatus.FINISHED
        db_workspace.progress = 100
    _touch(db_workspace)
    session.add(db_workspace)
    session.commit()
    session.refresh(db_workspace)
    return db_workspace


def delete_workspace(*, session: Session, db_workspace: Workspace) -> None:
    session.delete(db_workspace)
    session.commit()


def workspace_stats(workspaces: list[Workspace]) -> WorkspaceStats:
    total = len(workspaces)
    active = sum(1 for ws in workspaces if ws.status == WorkspaceStatus.UNDER_CONSTRUCTION)
    average_progress = round(sum(ws.progress for ws in workspaces) / total) if total else 0
    return WorkspaceStats(
        total=total,
        active=active,
        completed=total - active,
        average_progress=average_progress,
        safety=SafetyBuckets(
            safe=sum(1 for ws in workspaces if ws.safety_score >= 90),
            warning=sum(1 for ws in workspaces if 75 <= ws.safety_score < 90),
            critical=sum(1 for ws in workspaces if ws.safety_score < 75),
        ),
    )


# Resources

def list_resources(*, session: Session, workspace_id: uuid.UUID) -> list[ResourceItem]:
    statement = (
        select(ResourceItem)
        .where(ResourceItem.workspace_id == workspace_id)
        .order_by(col(ResourceItem.created_at))
    )
    return list(session.exec(statement).all())


def get_resource(*, session: Session, workspace_id: uuid.UUID, resource_id: uuid.UUID) -> ResourceItem | None:
    resource = session.get(ResourceItem, resource_id)
    if resource is None or resource.workspace_id != workspace_id:
        return None
    return resource


def _new_resource(resource_in: ResourceItemCreate, workspace_id: uuid.UUID) -> ResourceItem:
    return ResourceItem.model_validate(
        resource_in,
        update={
            "workspace_id": workspace_id,
            "status": resource_status_for(resource_in.quantity, resource_in.threshold),
        },
    )


def create_resource(*, session: Session, db_workspace: Workspace, resource_in: ResourceItemCreate) -> ResourceItem:
    db_resource = _new_resource(resource_in, db_workspace.id)
    _touch(db_workspace)
    session.add(db_resource)
    session.add(db_workspace)
    session.commit()
    session.refresh(db_resource)
    return db_resource


def update_resource(
    *,
    session: Session,
    db_workspace: Workspace,
    db_resource: ResourceItem,
    resource_in: ResourceItemUpdate | dict[str, Any],
) -> ResourceItem:
    if isinstance(resource_in, dict):
        resource_data = resource_in
    else:
        resource_data = resource_in.model_dump(exclude_unset=True, exclude_none=True)
    db_resource.sqlmodel_update(resource_data)
    db_resource.status = resource_status_for(db_resource.quantity, db_resource.threshold)
    _touch(db_workspace)
    session.add(db_resource)
    session.add(db_workspace)
    session.commit()
    session.refresh(db_resource)
    return db_resource


def delete_resource(*, session: Session, db_workspace: Workspace, db_resource: ResourceItem) -> None:
    _touch(db_workspace)
    session.add(db_workspace)
    session.delete(db_resource)
    session.commit()


def replace_resources(
    *, session: Session, db_workspace: Workspace, resources_in: list[ResourceItemCreate]
) -> list[ResourceItem]:
    for existing in list_resources(session=session, workspace_id=db_workspace.id):
        session.delete(existing)
    new_resources = [_new_resource(resource_in, db_workspace.id) for resource_in in resources_in]
    session.add_all(new_resources)
    _touch(db_workspace)
    session.add(db_workspace)
    session.commit()
    for resource in new_resources:
        session.refresh(resource)
    return new_resources


def resource_statistics(resources: list[ResourceItem]) -> ResourceStatistics:
    counts = Counter(resource.status for resource in resources)
    by_status = ResourceStatusCounts(
        good=counts[ResourceStatus.GOOD],
        low=counts[ResourceStatus.LOW],
        critical=counts[ResourceStatus.CRITICAL],
    )
    return ResourceStatistics(
        total=len(resources),
        by_status=by_status,
        low_stock_count=by_status.low + by_status.critical,
    )


# Architecture plans

def save_architecture_plan(*, session: Session, db_workspace: Workspace, plan_in: ArchitecturePlanIn) -> ArchitecturePlan:
    """Create the workspace's plan, or overwrite it wholesale when one exists."""
    plan_data = plan_in.model_dump()
    db_plan = db_workspace.architecture_plan
    if db_plan is None:
        db_plan = ArchitecturePlan(workspace_id=db_workspace.id, **plan_data)
    else:
        db_plan.sqlmodel_update(plan_data)
    _touch(db_workspace)
    session.add(db_plan)
    session.add(db_workspace)
    session.commit()
    session.refresh(db_plan)
    return db_plan


def append_to_plan(
    *, session: Session, db_workspace: Workspace, db_plan: ArchitecturePlan, field: str, item: dict[str, Any]
) -> ArchitecturePlan:
    # JSON columns are not mutation-tracked, so assign a fresh list.
    setattr(db_plan, field, [*getattr(db_plan, field), item])
    _touch(db_workspace)
    session.add(db_plan)
    session.add(db_workspace)
    session.commit()
    session.refresh(db_plan)
    return db_plan


def delete_architecture_plan(*, session: Session, db_workspace: Workspace, db_plan: ArchitecturePlan) -> None:
    _touch(db_workspace)
    session.add(db_workspace)
    session.delete(db_plan)
    session.commit()


# Safety reports

def list_safety_reports(*, session: Session, workspace_id: uuid.UUID) -> list[SafetyReport]:
    statement = (
        select(SafetyReport)
        .where(SafetyReport.workspace_id == workspace_id)
        .order_by(col(SafetyReport.date).desc())
    )
    return list(session.exec(statement).all())


def create_safety_report(*, session: Session, db_workspace: Workspace, report_in: SafetyReportCreate) -> SafetyReport:
    risk_score = clamp_score(report_in.risk_score)
    db_report = SafetyReport(
        workspace_id=db_workspace.id,
        risk_score=risk_score,
        hazards=[hazard.model_dump() for hazard in report_in.hazards],
        summary=report_in.summary,
    )
    db_workspace.safety_score = max(0, 100 - risk_score)
    _touch(db_workspace)
    session.add(db_report)
    session.add(db_workspace)
    session.commit()
    session.refresh(db_report)
    return db_report
