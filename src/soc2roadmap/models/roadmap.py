"""Roadmap (engine output) data models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .intake import ReportType, TrustCriterion


class RiskLevel(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


SEVERITY_ORDER: dict[RiskLevel, int] = {
    RiskLevel.CRITICAL: 0,
    RiskLevel.HIGH: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.LOW: 3,
}


class TaskCategory(str, Enum):
    POLICY = "policy"
    TECHNICAL = "technical"
    PROCESS = "process"
    EVIDENCE = "evidence"


class TaskEffort(str, Enum):
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"


class EvidenceCategory(str, Enum):
    ACCESS = "access"
    CHANGE = "change"
    MONITORING = "monitoring"
    TRAINING = "training"
    VENDOR = "vendor"
    BACKUP = "backup"
    POLICY = "policy"


class SprintTheme(str, Enum):
    FOUNDATION = "foundation"
    ACCESS = "access"
    POLICY = "policy"
    CONTINUITY = "continuity"
    AUDIT_PREP = "audit_prep"


class RoadmapModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class Task(RoadmapModel):
    id: str
    title: str
    description: str
    category: TaskCategory
    priority: RiskLevel
    effort: TaskEffort
    control_reference: str
    completed: bool = False
    why: str


class Sprint(RoadmapModel):
    number: int
    name: str
    weeks: str
    focus: str
    theme: SprintTheme
    tasks: tuple[Task, ...] = ()


class GapItem(RoadmapModel):
    control: str
    current_state: str
    required_state: str
    severity: RiskLevel


class PolicyItem(RoadmapModel):
    id: str
    name: str
    exists: bool
    required: bool = True
    conditional: Optional[str] = None


class EvidenceItem(RoadmapModel):
    id: str
    name: str
    description: str
    collection_method: str
    days_required: int = 0
    already_have: bool
    category: EvidenceCategory


class RiskItem(RoadmapModel):
    id: str
    title: str
    description: str
    severity: RiskLevel
    remediation: str
    sprint_reference: Optional[int] = None


class ScopeDecision(RoadmapModel):
    type: ReportType
    criteria: tuple[TrustCriterion, ...]
    justification: str
    systems_in_scope: tuple[str, ...]
    estimated_audit_cost: str


class ComplianceRoadmap(RoadmapModel):
    """Full engine result for one intake."""

    maturity_score: int
    risk_level: RiskLevel
    recommended_timeline: int
    sprints: tuple[Sprint, ...] = ()
    gaps: tuple[GapItem, ...] = ()
    policies: tuple[PolicyItem, ...] = ()
    evidence: tuple[EvidenceItem, ...] = ()
    risks: tuple[RiskItem, ...] = ()
    scope: ScopeDecision
    generated_at: datetime
