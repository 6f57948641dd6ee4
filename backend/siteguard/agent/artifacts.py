from typing import Literal

from pydantic import BaseModel, Field, FiniteFloat

LIFECYCLE_PHASES = (
    "Project Acquisition & Bidding",
    "Project Planning & Design",
    "Procurement & Mobilization",
    "Construction & Project Execution",
    "Project Close-out",
)


class ArchitectureBrief(BaseModel):
    building_type: str = Field(min_length=1, description="e.g. 'Residential Duplex'")
    land_size: str = Field(min_length=1, description="e.g. '600sqm'")
    floors: str = Field(min_length=1)
    budget: str = Field(min_length=1, description="Budget in Naira")


class PlanSection(BaseModel):
    title: str = Field(description="Section heading, e.g. 'Structural Design'")
    description: str = Field(description="What the section covers")


class PlanMaterial(BaseModel):
    name: str = Field(description="Material name, e.g. 'Portland Cement'")
    quantity: str = Field(default="", description="Estimated quantity with unit, e.g. '1,200 bags'")
    specification: str = Field(default="", description="Grade or specification")


class PlanStage(BaseModel):
    phase: str = Field(description="One of the five lifecycle phase names")
    duration: str = Field(default="", description="Estimated duration, e.g. '6 weeks'")
    tasks: list[str] = Field(default_factory=list, description="Key activities in this phase")


class GeneratedArchitecture(BaseModel):
    """Project execution plan produced by the Architecture Agent."""
    cost_estimate: str = Field(description="Estimated total cost in Naira")
    timeline: str = Field(description="Total project duration")
    sections: list[PlanSection] = Field(default_factory=list, description="Design sections of the plan")
    materials: list[PlanMaterial] = Field(default_factory=list, description="Major materials needed")
    stages: list[PlanStage] = Field(description="The five lifecycle phases, in order")
    summary: str = Field(description="A professional summary of the project plan")


class SafetyHazard(BaseModel):
    description: str
    severity: Literal["Low", "Medium", "High"]
    recommendation: str


class SafetyAnalysis(BaseModel):
    """Hazard assessment of one site photo, produced by the Safety Agent."""
    risk_score: FiniteFloat = Field(description="Safety risk score from 0 (safe) to 100 (high danger)")
    hazards: list[SafetyHazard] = Field(default_factory=list)
    summary: str = Field(description="Short overall assessment of the site")


class AllocationBrief(BaseModel):
    project_type: str = Field(min_length=1)
    stage: str = Field(min_length=1)
    budget: str = Field(min_length=1, description="Budget in Naira")


class SuggestedResource(BaseModel):
    name: str
    quantity: FiniteFloat = Field(ge=0)
    unit: str
    threshold: FiniteFloat = Field(ge=0)
    status: Literal["Good", "Low", "Critical"] | None = Field(
        default=None, description="Ignored; recomputed from quantity and threshold"
    )


class ResourceAllocation(BaseModel):
    """Inventory suggestion produced by the Resource Allocation Agent."""
    resources: list[SuggestedResource] = Field(description="5-8 key resources for the stage")


class ReportContext(BaseModel):
    workspace_name: str
    stage: str
    progress: int
    safety_score: int
    critical_resources: list[str] = Field(default_factory=list)
    low_resources: list[str] = Field(default_factory=list)


class DailyReport(BaseModel):
    """Daily site report produced by the Report Agent."""
    date: str = Field(default="", description="Report date, ISO format")
    executive_summary: str
    progress_update: str
    key_issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
