"""Top-risk ranking.

Rules emit narrative risk items that name the company's own answers. The
result is stable-sorted by severity and capped at five items.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from ..models.intake import BackupFrequency, VendorCount
from ..models.roadmap import SEVERITY_ORDER, RiskItem, RiskLevel, Sprint, SprintTheme
from .context import AssessmentContext, Predicate, Text, apply_rules

MAX_RISKS = 5

LARGE_VENDOR_COUNTS = {VendorCount.V16_30, VendorCount.V31_50, VendorCount.V50_PLUS}
WEAK_BACKUP_FREQUENCIES = {BackupFrequency.WEEKLY, BackupFrequency.MONTHLY, BackupFrequency.NONE}

# Sprint numbers are only final after planning; rules point at a theme and
# link_risks_to_sprints resolves it.
THEME_HINTS: dict[SprintTheme, int] = {
    SprintTheme.FOUNDATION: 1,
    SprintTheme.ACCESS: 2,
    SprintTheme.POLICY: 3,
    SprintTheme.CONTINUITY: 4,
}

Severity = Union[RiskLevel, Callable[[AssessmentContext], RiskLevel]]


@dataclass(frozen=True)
class RiskRule:
    id: str
    when: Predicate
    title: str
    description: Text
    severity: Severity
    remediation: Text
    theme: SprintTheme

    def build(self, ctx: AssessmentContext) -> RiskItem:
        return RiskItem(
            id=self.id,
            title=self.title,
            description=ctx.text(self.description),
            severity=ctx.resolve(self.severity),
            remediation=ctx.text(self.remediation),
            sprint_reference=THEME_HINTS[self.theme],
        )


def _no_mfa(ctx: AssessmentContext) -> bool:
    return not ctx.intake.access_control.has_mfa


def _no_monitoring(ctx: AssessmentContext) -> bool:
    return not ctx.intake.technical_infrastructure.has_monitoring


def _mfa_remediation(ctx: AssessmentContext) -> str:
    if ctx.has_named_sso:
        return (
            "Enable MFA across all accounts immediately. Because {company} already uses {sso_label}, "
            "this is a single policy change in the {sso_label} admin console. "
            "Prioritize this above all other compliance work."
        )
    return (
        "Enable MFA across all accounts immediately, starting with admin and production access. "
        "Use an authenticator app rather than SMS. Prioritize this above all other compliance work."
    )


def _weak_backups(ctx: AssessmentContext) -> bool:
    bc = ctx.intake.business_continuity
    return not bc.has_backup_strategy or bc.backup_frequency in WEAK_BACKUP_FREQUENCIES


RISK_RULES: tuple[RiskRule, ...] = (
    RiskRule(
        id="risk-mfa",
        when=lambda ctx: _no_mfa(ctx) and ctx.handles_sensitive_data,
        title="No MFA on Accounts Accessing Sensitive Data",
        description="{company} handles {sensitive_data} but accounts are not protected by multi-factor "
        "authentication. A single compromised password exposes regulated data.",
        severity=RiskLevel.CRITICAL,
        remediation=_mfa_remediation,
        theme=SprintTheme.FOUNDATION,
    ),
    RiskRule(
        id="risk-mfa",
        when=lambda ctx: _no_mfa(ctx) and not ctx.handles_sensitive_data,
        title="No Multi-Factor Authentication",
        description="{company}'s accounts are protected only by passwords. Credential theft is the #1 cause "
        "of breaches and the #1 thing auditors look for.",
        severity=RiskLevel.HIGH,
        remediation=_mfa_remediation,
        theme=SprintTheme.FOUNDATION,
    ),
    RiskRule(
        id="risk-monitoring",
        when=lambda ctx: _no_monitoring(ctx) and ctx.is_type2,
        title="No Monitoring — Cannot Produce Type 2 Evidence",
        description="Type 2 audits require 90 days of continuous monitoring evidence. Without logging and "
        "alerting in place now, {company} cannot start its audit window.",
        severity=RiskLevel.CRITICAL,
        remediation="Set up centralized logging immediately — this starts your audit clock. "
        "Turn on {log_source} as a fast first step.",
        theme=SprintTheme.FOUNDATION,
    ),
    RiskRule(
        id="risk-monitoring",
        when=lambda ctx: _no_monitoring(ctx) and not ctx.is_type2,
        title="No System Monitoring or Alerting",
        description="Without monitoring {company} cannot detect or demonstrate response to security "
        "events — a core SOC 2 requirement.",
        severity=RiskLevel.HIGH,
        remediation="Implement centralized logging and alerting. {log_source} is a fast, "
        "cost-effective starting point.",
        theme=SprintTheme.FOUNDATION,
    ),
    RiskRule(
        id="risk-irp",
        when=lambda ctx: not ctx.intake.security_posture.has_incident_response_plan,
        title="No Incident Response Plan",
        description="If {company} has a security incident without a documented response plan, it is both "
        "an operational crisis and an automatic audit finding.",
        severity=RiskLevel.HIGH,
        remediation="Draft an IRP this sprint. It does not need to be perfect — a documented, approved plan "
        "beats an unwritten \"we know what to do.\"",
        theme=SprintTheme.ACCESS,
    ),
    RiskRule(
        id="risk-policies",
        when=lambda ctx: not ctx.intake.security_posture.has_security_policies,
        title="No Formal Security Policies",
        description="Security policies are the foundation auditors check first. Without them, every other "
        "control {company} has is unanchored — there's nothing to audit against.",
        severity=RiskLevel.CRITICAL,
        remediation="Write and approve your Information Security Policy first. It takes 2-4 hours with a "
        "template and unlocks all other compliance work.",
        theme=SprintTheme.FOUNDATION,
    ),
    RiskRule(
        id="risk-vendors",
        when=lambda ctx: (
            not ctx.intake.vendor_management.has_vendor_assessment
            and ctx.intake.vendor_management.critical_vendor_count in LARGE_VENDOR_COUNTS
        ),
        title="Unassessed Third-Party Risk",
        description="{company} has {vendor_count} vendors with no formal security assessments. Auditors treat "
        "your vendors as extensions of your security boundary.",
        severity=RiskLevel.MEDIUM,
        remediation="Prioritize your top 10 critical vendors. Request their SOC 2 reports. For others, use a "
        "vendor security questionnaire.",
        theme=SprintTheme.POLICY,
    ),
    RiskRule(
        id="risk-availability",
        when=lambda ctx: ctx.has_availability and _weak_backups(ctx),
        title="Backup Strategy Does Not Support Availability Commitments",
        description="{company} selected the Availability trust criteria, but your backup frequency "
        "({backup_frequency}) may not support an RTO of {rto} and an RPO of {rpo}.",
        severity=RiskLevel.HIGH,
        remediation="Define explicit RTO and RPO targets, then verify your backup strategy meets them. "
        "Test a restore before your audit window opens.",
        theme=SprintTheme.CONTINUITY,
    ),
)


def sort_by_severity(risks: list[RiskItem]) -> list[RiskItem]:
    """Stable sort, critical first; equal severities keep evaluation order."""
    return sorted(risks, key=lambda r: SEVERITY_ORDER[r.severity])


def build_risks(ctx: AssessmentContext) -> list[RiskItem]:
    return sort_by_severity(apply_rules(RISK_RULES, ctx))[:MAX_RISKS]


def link_risks_to_sprints(risks: list[RiskItem], sprints: list[Sprint]) -> list[RiskItem]:
    """Point each risk's theme hint at the sprint number that was emitted.

    Themes whose sprint was omitted leave the risk without a reference.
    """
    number_by_theme = {s.theme: s.number for s in sprints}
    theme_by_hint = {hint: theme for theme, hint in THEME_HINTS.items()}

    linked: list[RiskItem] = []
    for risk in risks:
        theme = theme_by_hint.get(risk.sprint_reference) if risk.sprint_reference is not None else None
        number = number_by_theme.get(theme) if theme else None
        linked.append(risk.model_copy(update={"sprint_reference": number}))
    return linked
