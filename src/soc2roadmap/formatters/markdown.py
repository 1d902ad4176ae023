"""Markdown readiness report."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from .. import __version__
from ..core.policies import missing_required_policies
from ..core.progress import task_ids
from ..models.roadmap import ComplianceRoadmap

SEVERITY_LABELS = {"critical": "CRITICAL", "high": "HIGH", "medium": "MEDIUM", "low": "LOW"}


def generate_roadmap_report(
    roadmap: ComplianceRoadmap,
    company: str = "",
    completed: Optional[Iterable[str]] = None,
    include_gaps: bool = True,
    include_policies: bool = True,
    include_evidence: bool = True,
) -> str:
    """Render the SOC 2 readiness report for a stored roadmap."""
    done = set(completed or [])
    scope = roadmap.scope
    timestamp = roadmap.generated_at.strftime("%Y-%m-%d %H:%M:%S")

    lines: list[str] = []
    lines.append("# SOC 2 Readiness Roadmap")
    lines.append("")
    if company:
        lines.append(f"**Company:** {company}")
    lines.append(f"**Report:** {scope.type.value.replace('type', 'Type ')}")
    lines.append(f"**Criteria:** {', '.join(c.value for c in scope.criteria)}")
    lines.append(f"**Maturity score:** {roadmap.maturity_score}/100")
    lines.append(f"**Risk level:** {SEVERITY_LABELS[roadmap.risk_level.value]}")
    lines.append(f"**Recommended timeline:** {roadmap.recommended_timeline} weeks")
    lines.append(f"**Estimated audit cost:** {scope.estimated_audit_cost}")
    lines.append("")

    # Summary table
    missing = missing_required_policies(list(roadmap.policies))
    total_tasks = sum(len(s.tasks) for s in roadmap.sprints)
    lines.append("## Summary")
    lines.append("")
    lines.append("| Item | Count |")
    lines.append("|------|-------|")
    lines.append(f"| Gaps | {len(roadmap.gaps)} |")
    lines.append(f"| Missing policies | {len(missing)} of {len(roadmap.policies)} |")
    lines.append(f"| Evidence items | {len(roadmap.evidence)} |")
    lines.append(f"| Tasks | {total_tasks} ({len(done & task_ids(roadmap))} done) |")
    lines.append("")

    lines.append("## Scope")
    lines.append("")
    lines.append(scope.justification)
    lines.append("")
    lines.append(f"**Systems in scope:** {', '.join(scope.systems_in_scope)}")
    lines.append("")

    if roadmap.risks:
        lines.append("## Top Risks")
        lines.append("")
        for risk in roadmap.risks:
            lines.append(f"### {risk.title} [{SEVERITY_LABELS[risk.severity.value]}]")
            lines.append("")
            lines.append(risk.description)
            lines.append("")
            lines.append(f"**Remediation:** {risk.remediation}")
            if risk.sprint_reference is not None:
                lines.append(f"**Addressed in:** Sprint {risk.sprint_reference}")
            lines.append("")

    lines.append("## Sprint Plan")
    lines.append("")
    for sprint in roadmap.sprints:
        lines.append(f"### Sprint {sprint.number}: {sprint.name} ({sprint.weeks})")
        lines.append(f"*{sprint.focus}*")
        lines.append("")
        for task in sprint.tasks:
            mark = "x" if task.id in done else " "
            lines.append(
                f"- [{mark}] **{task.title}** `{task.id}` "
                f"({task.priority.value}, {task.effort.value}, {task.control_reference})"
            )
            lines.append(f"  - {task.description}")
            lines.append(f"  - Why: {task.why}")
        lines.append("")

    if include_gaps and roadmap.gaps:
        lines.append("## Gap Analysis")
        lines.append("")
        lines.append("| Control | Current State | Required State | Severity |")
        lines.append("|---------|---------------|----------------|----------|")
        for gap in roadmap.gaps:
            lines.append(
                f"| {gap.control} | {gap.current_state} | {gap.required_state} "
                f"| {SEVERITY_LABELS[gap.severity.value]} |"
            )
        lines.append("")

    if include_policies:
        lines.append("## Policies")
        lines.append("")
        for policy in roadmap.policies:
            status = "in place" if policy.exists else "needed"
            line = f"- **{policy.name}**: {status}"
            if policy.conditional:
                line += f" ({policy.conditional})"
            lines.append(line)
        lines.append("")

    if include_evidence:
        lines.append("## Evidence")
        lines.append("")
        lines.append("| Evidence | Category | Window | Have | Collection |")
        lines.append("|----------|----------|--------|------|------------|")
        for item in roadmap.evidence:
            window = f"{item.days_required} days" if item.days_required else "point-in-time"
            have = "yes" if item.already_have else "no"
            lines.append(
                f"| {item.name} | {item.category.value} | {window} | {have} | {item.collection_method} |"
            )
        lines.append("")

    lines.append("---")
    lines.append(f"*Generated by soc2roadmap v{__version__} at {timestamp}*")

    return "\n".join(lines)
