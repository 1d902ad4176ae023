"""Task-completion progress models."""

from __future__ import annotations

from pydantic import BaseModel

from .roadmap import PolicyItem, Task


class SprintProgress(BaseModel):
    number: int
    name: str
    done: int = 0
    total: int = 0
    percent: int = 0
    critical_open: int = 0


class EvidenceProgress(BaseModel):
    have: int = 0
    need: int = 0
    by_category: dict[str, dict[str, int]] = {}


class RoadmapProgress(BaseModel):
    done: int = 0
    total: int = 0
    percent: int = 0
    sprints: list[SprintProgress] = []
    urgent_open: list[Task] = []
    missing_policies: list[PolicyItem] = []
    evidence: EvidenceProgress = EvidenceProgress()
    unknown_ids: list[str] = []
