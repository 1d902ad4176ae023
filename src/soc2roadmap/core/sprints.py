"""Sprint planning.

Four themed sprints carry conditional remediation tasks, followed by a fixed
evidence and audit-prep sprint. Empty themed sprints are dropped (the
foundation sprint falls back to a documentation task instead) and the
survivors are numbered contiguously in two-week slots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from ..models.intake import CloudProvider, MfaCoverage
from ..models.roadmap import PolicyItem, RiskLevel, Sprint, SprintTheme, Task, TaskCategory, TaskEffort
from .context import AssessmentContext, Predicate, Text, always, apply_rules

SPRINT_LENGTH_WEEKS = 2

Priority = Union[RiskLevel, Callable[[AssessmentContext], RiskLevel]]


@dataclass(frozen=True)
class TaskRule:
    id: str
    title: Text
    description: Text
    category: TaskCategory
    priority: Priority
    effort: TaskEffort
    control_reference: str
    why: Text
    when: Predicate = always

    def build(self, ctx: AssessmentContext) -> Task:
        return Task(
            id=self.id,
            title=ctx.text(self.title),
            description=ctx.text(self.description),
            category=self.category,
            priority=ctx.resolve(self.priority),
            effort=self.effort,
            control_reference=self.control_reference,
            completed=False,
            why=ctx.text(self.why),
        )


@dataclass(frozen=True)
class SprintPlan:
    theme: SprintTheme
    name: str
    focus: str
    tasks: tuple[TaskRule, ...]
    fallback: Optional[TaskRule] = None


# ─── Sprint 1: Foundation ──────────────────────────────────────────────────

def _mfa_rollout(ctx: AssessmentContext) -> str:
    if ctx.has_named_sso:
        return (
            "Enable MFA enforcement policy in your {sso_label} admin console. "
            "Set a 72-hour grace period for adoption."
        )
    return (
        "Enable MFA in each system independently: start with admin accounts, then all users. "
        "Use an authenticator app (not SMS)."
    )


LOGGING_SETUP: dict[CloudProvider, str] = {
    CloudProvider.AWS: "Enable AWS CloudTrail in all regions, configure CloudWatch log groups, set retention "
    "to 365 days, and create alerts for root account usage and failed logins.",
    CloudProvider.GCP: "Enable Cloud Audit Logs for all services, configure log sinks to Cloud Storage, set up "
    "Cloud Monitoring alerts for admin activity.",
    CloudProvider.AZURE: "Enable the Azure Activity Log and diagnostic settings for all resources, route them "
    "to a Log Analytics workspace with 365-day retention, and create alerts for privileged role changes.",
}
DEFAULT_LOGGING_SETUP = (
    "Enable audit logging in all production systems; aggregate into a central location with 365-day retention."
)


def _logging_setup(ctx: AssessmentContext) -> str:
    for provider, text in LOGGING_SETUP.items():
        if ctx.uses_cloud(provider):
            return text
    return DEFAULT_LOGGING_SETUP


def _logging_why(ctx: AssessmentContext) -> str:
    if ctx.is_type2:
        return (
            "For {company}'s Type 2 audit, every day without logging is a day you can't count "
            "toward your 90-day evidence period."
        )
    return "Auditors need to see that {company} can detect and respond to security events."


FOUNDATION = SprintPlan(
    theme=SprintTheme.FOUNDATION,
    name="Foundation & Critical Controls",
    focus="Address critical gaps that block all other compliance work",
    tasks=(
        TaskRule(
            id="s1-policy",
            title="Write Information Security Policy",
            description="Draft your foundational security policy covering scope, roles, responsibilities, "
            "and control objectives.",
            category=TaskCategory.POLICY,
            priority=RiskLevel.CRITICAL,
            effort=TaskEffort.DAYS,
            control_reference="CC1.1",
            why="This is the first document auditors request from {company}. Everything else is built on it.",
            when=lambda ctx: not ctx.intake.security_posture.has_security_policies,
        ),
        TaskRule(
            id="s1-mfa",
            title="Enforce MFA for All Users",
            description=_mfa_rollout,
            category=TaskCategory.TECHNICAL,
            priority=RiskLevel.CRITICAL,
            effort=TaskEffort.HOURS,
            control_reference="CC6.1",
            why="MFA is the single highest-impact security control for {company}. It blocks over 99% of "
            "credential-based attacks.",
            when=lambda ctx: (
                not ctx.intake.access_control.has_mfa
                or ctx.intake.access_control.mfa_coverage != MfaCoverage.ALL_USERS
            ),
        ),
        TaskRule(
            id="s1-logging",
            title="Enable Centralized Logging & Alerting",
            description=_logging_setup,
            category=TaskCategory.TECHNICAL,
            priority=lambda ctx: RiskLevel.CRITICAL if ctx.is_type2 else RiskLevel.HIGH,
            effort=TaskEffort.DAYS,
            control_reference="CC7.2",
            why=_logging_why,
            when=lambda ctx: not ctx.intake.technical_infrastructure.has_monitoring,
        ),
    ),
    fallback=TaskRule(
        id="s1-review",
        title="Document Your Existing Controls",
        description="Your security posture is strong. Use this sprint to document all existing controls in a "
        "formal control matrix — this is what auditors will review.",
        category=TaskCategory.PROCESS,
        priority=RiskLevel.HIGH,
        effort=TaskEffort.DAYS,
        control_reference="CC1.x",
        why="{company} already has most controls in place. The audit risk is documentation gaps, "
        "not control gaps.",
    ),
)


# ─── Sprint 2: Access & Incident Readiness ─────────────────────────────────

def _vuln_setup(ctx: AssessmentContext) -> str:
    if ctx.uses_cloud(CloudProvider.AWS):
        return (
            "Enable AWS Inspector for EC2 and ECR. Set up Dependabot on all repos. Configure weekly scan "
            "schedule and define SLA for critical findings (e.g., patch within 30 days)."
        )
    return (
        "Deploy a vulnerability scanner (Qualys, Tenable, or open-source OpenVAS). Scan all production "
        "systems. Define a remediation SLA policy."
    )


ACCESS = SprintPlan(
    theme=SprintTheme.ACCESS,
    name="Access Controls & Incident Readiness",
    focus="Formalize access management and incident response",
    tasks=(
        TaskRule(
            id="s2-rbac",
            title="Define and Document Role-Based Access",
            description="Create a role matrix mapping job functions to required system access. Document who "
            "has admin vs. standard access in each production system.",
            category=TaskCategory.PROCESS,
            priority=RiskLevel.HIGH,
            effort=TaskEffort.DAYS,
            control_reference="CC6.2",
            why="Auditors will ask {company} to show that access is granted by role, not individually. "
            "Without a role matrix, every access grant looks ad hoc.",
            when=lambda ctx: not ctx.intake.access_control.has_rbac,
        ),
        TaskRule(
            id="s2-irp",
            title="Write Incident Response Plan",
            description="Document detection → containment → eradication → recovery → lessons learned. Assign "
            "named owners for each phase. Include contact list and escalation thresholds.",
            category=TaskCategory.POLICY,
            priority=RiskLevel.HIGH,
            effort=TaskEffort.DAYS,
            control_reference="CC9.1",
            why="If {company} has a breach and there is no written IRP, it is both a crisis and an automatic "
            "audit finding.",
            when=lambda ctx: not ctx.intake.security_posture.has_incident_response_plan,
        ),
        TaskRule(
            id="s2-access-review",
            title="Run First Formal Access Review",
            description="Pull the current user list for all production systems. Have each manager certify "
            "their team's access is appropriate. Remove any stale or excess access. Document the review.",
            category=TaskCategory.PROCESS,
            priority=RiskLevel.MEDIUM,
            effort=TaskEffort.DAYS,
            control_reference="CC6.3",
            why="Access reviews are often where {company} finds accounts from ex-employees or contractors "
            "that should have been removed.",
            when=lambda ctx: not ctx.intake.access_control.has_access_reviews,
        ),
        TaskRule(
            id="s2-vuln",
            title="Set Up Vulnerability Scanning",
            description=_vuln_setup,
            category=TaskCategory.TECHNICAL,
            priority=RiskLevel.HIGH,
            effort=TaskEffort.DAYS,
            control_reference="CC7.1",
            why="{company} needs to demonstrate it proactively finds and fixes vulnerabilities — not just "
            "reacts to breaches.",
            when=lambda ctx: not ctx.intake.security_posture.has_vulnerability_management,
        ),
    ),
)


# ─── Sprint 3: Policies & Vendor Risk ──────────────────────────────────────

POLICY = SprintPlan(
    theme=SprintTheme.POLICY,
    name="Policies & Vendor Risk",
    focus="Complete policy library and third-party risk program",
    tasks=(
        TaskRule(
            id="s3-vendors",
            title="Assess Critical Vendors",
            description="Identify your critical vendors ({vendor_count} reported). Request SOC 2 Type 2 "
            "reports from the top 5. For the rest, send a vendor security questionnaire. "
            "Document risk ratings.",
            category=TaskCategory.PROCESS,
            priority=RiskLevel.MEDIUM,
            effort=TaskEffort.WEEKS,
            control_reference="CC9.2",
            why="If a critical vendor is breached and {company} cannot show due diligence, it reflects on "
            "your audit.",
            when=lambda ctx: not ctx.intake.vendor_management.has_vendor_assessment,
        ),
        TaskRule(
            id="s3-classification",
            title="Create Data Classification Policy",
            description="Define at minimum three tiers: Public, Internal, and Confidential. Map your data "
            "types (PII, product data, financial records) to tiers. Document handling requirements per tier.",
            category=TaskCategory.POLICY,
            priority=RiskLevel.MEDIUM,
            effort=TaskEffort.DAYS,
            control_reference="CC6.7",
            why="Data classification tells auditors that {company} understands what data it holds and "
            "applies appropriate controls based on sensitivity.",
            when=lambda ctx: not ctx.intake.data_handling.has_data_classification,
        ),
        TaskRule(
            id="s3-training",
            title="Complete Security Awareness Training for All Staff",
            description="Deploy security awareness training to all employees. Track completion. Retain "
            "completion records — this is required evidence for the audit.",
            category=TaskCategory.PROCESS,
            priority=RiskLevel.MEDIUM,
            effort=TaskEffort.DAYS,
            control_reference="CC1.4",
            why="Auditors ask {company} for training completion records. If any employee hasn't completed "
            "training, it's a finding.",
            when=lambda ctx: not ctx.intake.security_posture.has_security_awareness,
        ),
    ),
)


def remaining_policies_task(missing: list[PolicyItem]) -> TaskRule:
    """Single aggregated task covering every missing required policy."""
    names = ", ".join(p.name for p in missing)
    return TaskRule(
        id="s3-policies",
        title=f"Write Remaining {len(missing)} Required Policies",
        description=f"Complete: {names}. Each policy should be reviewed and approved by management "
        "before the audit window opens.",
        category=TaskCategory.POLICY,
        priority=RiskLevel.HIGH,
        effort=TaskEffort.WEEKS,
        control_reference="CC1.x",
        why="Auditors will request all of {company}'s policies during fieldwork. Missing policies are automatic "
        "findings — they cannot be remediated during the audit.",
    )


# ─── Sprint 4: Change Management & Continuity ──────────────────────────────

CONTINUITY = SprintPlan(
    theme=SprintTheme.CONTINUITY,
    name="Change Management & Business Continuity",
    focus="Formalize change controls and validate recovery capabilities",
    tasks=(
        TaskRule(
            id="s4-cicd",
            title="Formalize Change Management in {scm_hint}",
            description="Require pull request approvals before merging to main. Enable branch protection rules. "
            "Document your deployment process. This creates an automatic audit trail.",
            category=TaskCategory.TECHNICAL,
            priority=RiskLevel.MEDIUM,
            effort=TaskEffort.HOURS,
            control_reference="CC8.1",
            why="Auditors need to see that {company} reviews every production change. Branch protection rules "
            "in {scm_hint} enforce this automatically.",
            when=lambda ctx: not ctx.intake.technical_infrastructure.has_ci_cd,
        ),
        TaskRule(
            id="s4-dr",
            title="Write and Test Disaster Recovery Plan",
            description="Document recovery procedures for your {cloud_hint} environment. Define RTO of {rto} "
            "and RPO of {rpo}. Run a tabletop exercise to test it.",
            category=TaskCategory.POLICY,
            priority=RiskLevel.HIGH,
            effort=TaskEffort.WEEKS,
            control_reference="A1.3",
            why="{company} selected Availability as a trust criteria — auditors will specifically test whether "
            "your DR plan is real and tested.",
            when=lambda ctx: ctx.has_availability and not ctx.intake.business_continuity.has_disaster_recovery_plan,
        ),
        TaskRule(
            id="s4-backup-test",
            title="Run and Document a Backup Restore Test",
            description="Select a non-production environment and restore from backup. Time the restore. "
            "Document the results. This is evidence that your backups actually work.",
            category=TaskCategory.PROCESS,
            priority=RiskLevel.MEDIUM,
            effort=TaskEffort.DAYS,
            control_reference="A1.2",
            why="Untested backups are not backups. Auditors expect {company} to prove backups restore "
            "successfully, not just that they run.",
            when=lambda ctx: (
                not ctx.intake.business_continuity.has_bcp_testing
                and ctx.intake.business_continuity.has_backup_strategy
            ),
        ),
    ),
)


# ─── Final sprint: Evidence & Audit Prep ───────────────────────────────────

def _evidence_package(ctx: AssessmentContext) -> str:
    text = (
        "Collect all required evidence artifacts. Organize by control area. "
        "Name files consistently for auditor handoff."
    )
    if ctx.is_type2:
        text += " Ensure log exports cover the full 90-day audit period."
    return text


AUDIT_PREP_NAME = "Evidence Collection & Audit Prep"
AUDIT_PREP_FOCUS = "Gather all evidence artifacts and prepare for auditor fieldwork"
AUDIT_PREP_TASKS: tuple[TaskRule, ...] = (
    TaskRule(
        id="se-evidence",
        title="Compile Evidence Package",
        description=_evidence_package,
        category=TaskCategory.EVIDENCE,
        priority=RiskLevel.CRITICAL,
        effort=TaskEffort.WEEKS,
        control_reference="All",
        why="Auditors will request evidence within 48 hours of starting fieldwork. An organized package "
        "demonstrates {company}'s maturity.",
    ),
    TaskRule(
        id="se-auditor",
        title="Select and Engage Auditor",
        description="Issue RFP to 2-3 AICPA-licensed CPA firms specializing in SOC 2. Budget {audit_cost} "
        "for a {report_label} report. Timeline from engagement to report is 6-12 weeks.",
        category=TaskCategory.PROCESS,
        priority=RiskLevel.HIGH,
        effort=TaskEffort.WEEKS,
        control_reference="N/A",
        why="Starting auditor selection late is the #1 reason companies miss target dates. Book {company}'s "
        "{report_label} auditor now, even before evidence is fully ready.",
    ),
    TaskRule(
        id="se-preaudit",
        title="Run Internal Pre-Audit Review",
        description="Walk through each control area and verify evidence exists. Identify any gaps. Create "
        "remediation tickets for anything missing. Better to find gaps now than during fieldwork.",
        category=TaskCategory.PROCESS,
        priority=RiskLevel.HIGH,
        effort=TaskEffort.DAYS,
        control_reference="All",
        why="Findings {company} discovers during the pre-audit can be fixed before the real audit. Findings "
        "discovered during fieldwork become report findings.",
    ),
)


def week_label(start: int, end: int) -> str:
    if end <= start:
        return f"Week {start}"
    return f"Weeks {start}–{end}"


def _theme_tasks(plan: SprintPlan, ctx: AssessmentContext, extra: tuple[TaskRule, ...] = ()) -> list[Task]:
    tasks = apply_rules(extra + plan.tasks, ctx)
    if not tasks and plan.fallback is not None:
        tasks = [plan.fallback.build(ctx)]
    return tasks


def build_sprints(
    ctx: AssessmentContext,
    missing_policies: list[PolicyItem],
    total_weeks: int,
) -> list[Sprint]:
    """Plan the themed sprints plus the closing audit-prep sprint."""
    policy_tasks: tuple[TaskRule, ...] = ()
    if missing_policies:
        policy_tasks = (remaining_policies_task(missing_policies),)

    planned = [
        (FOUNDATION, _theme_tasks(FOUNDATION, ctx)),
        (ACCESS, _theme_tasks(ACCESS, ctx)),
        (POLICY, _theme_tasks(POLICY, ctx, extra=policy_tasks)),
        (CONTINUITY, _theme_tasks(CONTINUITY, ctx)),
    ]

    sprints: list[Sprint] = []
    for plan, tasks in planned:
        if not tasks:
            continue
        number = len(sprints) + 1
        sprints.append(Sprint(
            number=number,
            name=plan.name,
            weeks=week_label((number - 1) * SPRINT_LENGTH_WEEKS + 1, number * SPRINT_LENGTH_WEEKS),
            focus=plan.focus,
            theme=plan.theme,
            tasks=tuple(tasks),
        ))

    final_number = len(sprints) + 1
    start_week = len(sprints) * SPRINT_LENGTH_WEEKS + 1
    sprints.append(Sprint(
        number=final_number,
        name=AUDIT_PREP_NAME,
        weeks=week_label(start_week, max(total_weeks, start_week)),
        focus=AUDIT_PREP_FOCUS,
        theme=SprintTheme.AUDIT_PREP,
        tasks=tuple(apply_rules(AUDIT_PREP_TASKS, ctx)),
    ))
    return sprints
