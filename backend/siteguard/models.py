import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, EmailStr, FiniteFloat
from sqlalchemy import JSON, DateTime
from sqlmodel import Field, Relationship, SQLModel

T = TypeVar("T")

DEFAULT_STAGE = "Project Acquisition & Bidding"
DEFAULT_WORKSPACE_TYPE = "Residential"


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


class WorkspaceStatus(str, Enum):
    UNDER_CONSTRUCTION = "Under Construction"
    FINISHED = "Finished"


class ResourceStatus(str, Enum):
    GOOD = "Good"
    LOW = "Low"
    CRITICAL = "Critical"


def resource_status_for(quantity: float, threshold: float) -> ResourceStatus:
    """Stock level of a resource: at or below half the threshold is critical,
    at or below the threshold is low."""
    if quantity <= threshold * 0.5:
        return ResourceStatus.CRITICAL
    if quantity <= threshold:
        return ResourceStatus.LOW
    return ResourceStatus.GOOD


def clamp_score(value: float) -> int:
    return max(0, min(100, round(value)))


# Response envelopes
class DataResponse(BaseModel, Generic[T]):
    data: T


class ListResponse(BaseModel, Generic[T]):
    data: list[T]
    count: int


# Generic message
class Message(SQLModel):
    message: str


# Users
class UserBase(SQLModel):
    email: EmailStr = Field(unique=True, index=True, max_length=255)
    name: str | None = Field(default=None, max_length=255)
    is_active: bool = True
    is_superuser: bool = False


class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=128)


class UserRegister(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=8, max_length=128)


class UserLogin(SQLModel):
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=1, max_length=128)


class User(UserBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hashed_password: str
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    workspaces: list["Workspace"] = Relationship(back_populates="owner", cascade_delete=True)


class UserPublic(UserBase):
    id: uuid.UUID
    created_at: datetime | None = None


# Contents of JWT token
class TokenPayload(SQLModel):
    sub: str | None = None


class AuthSession(SQLModel):
    token: str
    user: UserPublic


# Workspaces
class WorkspaceBase(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    location: str = Field(default="", max_length=255)
    stage: str = Field(default=DEFAULT_STAGE, max_length=255)
    type: str = Field(default=DEFAULT_WORKSPACE_TYPE, max_length=100)
    budget: str = Field(default="", max_length=100)


class WorkspaceCreate(WorkspaceBase):
    pass


class WorkspaceUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    stage: str | None = Field(default=None, max_length=255)
    type: str | None = Field(default=None, max_length=100)
    budget: str | None = Field(default=None, max_length=100)


class WorkspaceProgressUpdate(SQLModel):
    progress: int = Field(ge=0, le=100)


class Workspace(WorkspaceBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    status: WorkspaceStatus = Field(default=WorkspaceStatus.UNDER_CONSTRUCTION)
    progress: int = Field(default=0)
    safety_score: int = Field(default=100)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    last_updated: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    owner_id: uuid.UUID = Field(
        foreign_key="user.id", nullable=False, ondelete="CASCADE"
    )
    owner: User | None = Relationship(back_populates="workspaces")
    resources: list["ResourceItem"] = Relationship(back_populates="workspace", cascade_delete=True)
    architecture_plan: Optional["ArchitecturePlan"] = Relationship(
        back_populates="workspace",
        cascade_delete=True,
        sa_relationship_kwargs={"uselist": False},
    )
    safety_reports: list["SafetyReport"] = Relationship(back_populates="workspace", cascade_delete=True)


# Resources
class ResourceItemBase(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    quantity: FiniteFloat = Field(default=0, ge=0)
    unit: str = Field(default="", max_length=50)
    threshold: FiniteFloat = Field(default=0, ge=0)


class ResourceItemCreate(ResourceItemBase):
    pass


class ResourceItemUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    quantity: FiniteFloat | None = Field(default=None, ge=0)
    unit: str | None = Field(default=None, max_length=50)
    threshold: FiniteFloat | None = Field(default=None, ge=0)


class ResourceQuantityUpdate(SQLModel):
    quantity: FiniteFloat = Field(ge=0)


class ResourceBulkReplace(SQLModel):
    resources: list[ResourceItemCreate]


class ResourceItem(ResourceItemBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    status: ResourceStatus = Field(default=ResourceStatus.GOOD)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    workspace_id: uuid.UUID = Field(
        foreign_key="workspace.id", nullable=False, ondelete="CASCADE", index=True
    )
    workspace: Workspace | None = Relationship(back_populates="resources")


class ResourceItemPublic(ResourceItemBase):
    id: uuid.UUID
    workspace_id: uuid.UUID
    status: ResourceStatus


class ResourceStatusCounts(SQLModel):
    good: int = 0
    low: int = 0
    critical: int = 0


class ResourceStatistics(SQLModel):
    total: int
    by_status: ResourceStatusCounts
    low_stock_count: int


# Architecture plans
class ArchitectureSection(SQLModel):
    title: str = Field(min_length=1)
    description: str = ""


class ArchitectureMaterial(SQLModel):
    name: str = Field(min_length=1)
    quantity: str = ""
    specification: str = ""


class ArchitectureStage(SQLModel):
    phase: str = Field(min_length=1)
    duration: str = ""
    tasks: list[str] = Field(default_factory=list)


class ArchitecturePlanIn(SQLModel):
    sections: list[ArchitectureSection] = Field(default_factory=list)
    materials: list[ArchitectureMaterial] = Field(default_factory=list)
    stages: list[ArchitectureStage] = Field(default_factory=list)
    summary: str = ""
    cost_estimate: str | None = None
    timeline: str | None = None


class ArchitecturePlan(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    sections: list[dict] = Field(default_factory=list, sa_type=JSON)
    materials: list[dict] = Field(default_factory=list, sa_type=JSON)
    stages: list[dict] = Field(default_factory=list, sa_type=JSON)
    summary: str = ""
    cost_estimate: str | None = None
    timeline: str | None = None
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    workspace_id: uuid.UUID = Field(
        foreign_key="workspace.id", nullable=False, ondelete="CASCADE", unique=True
    )
    workspace: Workspace | None = Relationship(back_populates="architecture_plan")


class ArchitecturePlanPublic(ArchitecturePlanIn):
    id: uuid.UUID
    workspace_id: uuid.UUID
    created_at: datetime | None = None


# Safety reports
class Hazard(SQLModel):
    description: str
    severity: Literal["Low", "Medium", "High"] = "Low"
    recommendation: str = ""


class SafetyReportCreate(SQLModel):
    # Clamped to 0-100 on save.
    risk_score: FiniteFloat
    hazards: list[Hazard] = Field(default_factory=list)
    summary: str = ""


class SafetyReport(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    risk_score: int = 0
    hazards: list[dict] = Field(default_factory=list, sa_type=JSON)
    summary: str = ""
    date: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    workspace_id: uuid.UUID = Field(
        foreign_key="workspace.id", nullable=False, ondelete="CASCADE", index=True
    )
    workspace: Workspace | None = Relationship(back_populates="safety_reports")


class SafetyReportPublic(SQLModel):
    id: uuid.UUID
    workspace_id: uuid.UUID
    risk_score: int
    hazards: list[Hazard]
    summary: str
    date: datetime | None = None


class WorkspacePublic(WorkspaceBase):
    id: uuid.UUID
    owner_id: uuid.UUID
    status: WorkspaceStatus
    progress: int
    safety_score: int
    created_at: datetime | None = None
    last_updated: datetime | None = None
    resources: list[ResourceItemPublic] = Field(default_factory=list)
    architecture_plan: ArchitecturePlanPublic | None = None
    safety_reports: list[SafetyReportPublic] = Field(default_factory=list)


class SafetyBuckets(SQLModel):
    safe: int = 0
    warning: int = 0
    critical: int = 0


class WorkspaceStats(SQLModel):
    total: int
    active: int
    completed: int
    average_progress: int
    safety: SafetyBuckets
