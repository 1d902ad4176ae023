"""Task-completion progress over a stored roadmap.

Completed task ids live outside the roadmap (the engine always emits
``completed=False``). These helpers only read both and never feed completion
state back into the engine.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..models.progress import EvidenceProgress, RoadmapProgress, SprintProgress
from ..models.roadmap import ComplianceRoadmap, RiskLevel, Task
from .policies import missing_required_policies

URGENT_PRIORITIES = {RiskLevel.CRITICAL, RiskLevel.HIGH}


def _percent(done: int, total: int) -> int:
    return round(done / total * 100) if total else 0


def all_tasks(roadmap: ComplianceRoadmap) -> list[Task]:
    return [task for sprint in roadmap.sprints for task in sprint.tasks]


def task_ids(roadmap: ComplianceRoadmap) -> set[str]:
    return {task.id for task in all_tasks(roadmap)}


def summarize_progress(roadmap: ComplianceRoadmap, completed_ids: Iterable[str]) -> RoadmapProgress:
    """Summarize completion per sprint and overall, plus open urgent work."""
    completed = set(completed_ids)

    sprint_progress: list[SprintProgress] = []
    for sprint in roadmap.sprints:
        done = sum(1 for t in sprint.tasks if t.id in completed)
        sprint_progress.append(SprintProgress(
            number=sprint.number,
            name=sprint.name,
            done=done,
            total=len(sprint.tasks),
            percent=_percent(done, len(sprint.tasks)),
            critical_open=sum(
                1 for t in sprint.tasks
                if t.priority == RiskLevel.CRITICAL and t.id not in completed
            ),
        ))

    tasks = all_tasks(roadmap)
    done_total = sum(1 for t in tasks if t.id in completed)

    by_category: dict[str, dict[str, int]] = {}
    for item in roadmap.evidence:
        counts = by_category.setdefault(item.category.value, {"have": 0, "need": 0})
        counts["have" if item.already_have else "need"] += 1

    return RoadmapProgress(
        done=done_total,
        total=len(tasks),
        percent=_percent(done_total, len(tasks)),
        sprints=sprint_progress,
        urgent_open=[t for t in tasks if t.priority in URGENT_PRIORITIES and t.id not in completed],
        missing_policies=missing_required_policies(list(roadmap.policies)),
        evidence=EvidenceProgress(
            have=sum(1 for e in roadmap.evidence if e.already_have),
            need=sum(1 for e in roadmap.evidence if not e.already_have),
            by_category=by_category,
        ),
        unknown_ids=sorted(completed - {t.id for t in tasks}),
    )
