"""Gap analysis against the SOC 2 control checks.

The catalog order is the output order; gaps are never re-sorted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from ..models.intake import MfaCoverage, ReportType, VendorCount
from ..models.roadmap import GapItem, RiskLevel
from .context import AssessmentContext, Predicate, Text, apply_rules

Severity = Union[RiskLevel, Callable[[AssessmentContext], RiskLevel]]


@dataclass(frozen=True)
class GapRule:
    control: str
    when: Predicate
    current_state: Text
    required_state: str
    severity: Severity

    def build(self, ctx: AssessmentContext) -> GapItem:
        return GapItem(
            control=self.control,
            current_state=ctx.text(self.current_state),
            required_state=ctx.text(self.required_state),
            severity=ctx.resolve(self.severity),
        )


def _partial_mfa(ctx: AssessmentContext) -> bool:
    ac = ctx.intake.access_control
    return ac.has_mfa and ac.mfa_coverage != MfaCoverage.ALL_USERS


def _mfa_scope_text(ctx: AssessmentContext) -> str:
    return f"MFA only applied to {ctx.intake.access_control.mfa_coverage.value.lower()}"


def _monitoring_severity(ctx: AssessmentContext) -> RiskLevel:
    return RiskLevel.CRITICAL if ctx.intake.soc2_type == ReportType.TYPE2 else RiskLevel.HIGH


def _encryption_at_rest_severity(ctx: AssessmentContext) -> RiskLevel:
    dh = ctx.intake.data_handling
    return RiskLevel.CRITICAL if dh.handles_customer_pii or dh.handles_phi else RiskLevel.HIGH


GAP_RULES: tuple[GapRule, ...] = (
    GapRule(
        control="CC6.1 – Logical Access Controls",
        when=lambda ctx: not ctx.intake.access_control.has_sso and not ctx.intake.access_control.has_mfa,
        current_state="No SSO or MFA implemented",
        required_state="All production systems require MFA; access managed through centralized IdP",
        severity=RiskLevel.CRITICAL,
    ),
    GapRule(
        control="CC6.1 – Logical Access Controls",
        when=lambda ctx: ctx.intake.access_control.has_sso and not ctx.intake.access_control.has_mfa,
        current_state="SSO in place but MFA not enforced",
        required_state="MFA required for all users accessing production systems",
        severity=RiskLevel.HIGH,
    ),
    GapRule(
        control="CC6.1 – Logical Access Controls",
        when=_partial_mfa,
        current_state=_mfa_scope_text,
        required_state="MFA enforced for all users",
        severity=RiskLevel.HIGH,
    ),
    GapRule(
        control="CC6.2 – Access Authorization",
        when=lambda ctx: not ctx.intake.access_control.has_rbac,
        current_state="No formal role-based access control documented",
        required_state="User access assigned by role; least-privilege enforced",
        severity=RiskLevel.HIGH,
    ),
    GapRule(
        control="CC6.3 – Access Reviews",
        when=lambda ctx: not ctx.intake.access_control.has_access_reviews,
        current_state="No periodic access review process",
        required_state="Quarterly access reviews with documented approval",
        severity=RiskLevel.MEDIUM,
    ),
    GapRule(
        control="CC7.1 – Vulnerability Management",
        when=lambda ctx: not ctx.intake.security_posture.has_vulnerability_management,
        current_state="No vulnerability scanning or management program",
        required_state="Regular vulnerability scans; critical findings remediated within SLA",
        severity=RiskLevel.HIGH,
    ),
    GapRule(
        control="CC7.2 – System Monitoring",
        when=lambda ctx: not ctx.intake.technical_infrastructure.has_monitoring,
        current_state="No centralized monitoring or alerting",
        required_state="Security events monitored and alerted; logs retained 90+ days",
        severity=_monitoring_severity,
    ),
    GapRule(
        control="CC8.1 – Change Management",
        when=lambda ctx: not ctx.intake.technical_infrastructure.has_ci_cd,
        current_state="No formal CI/CD or change management process",
        required_state="All production changes go through documented, approved pipeline",
        severity=RiskLevel.MEDIUM,
    ),
    GapRule(
        control="CC9.1 – Incident Response",
        when=lambda ctx: not ctx.intake.security_posture.has_incident_response_plan,
        current_state="No documented incident response plan",
        required_state="Documented IRP tested at least annually",
        severity=RiskLevel.HIGH,
    ),
    GapRule(
        control="CC1.x – Control Environment",
        when=lambda ctx: not ctx.intake.security_posture.has_security_policies,
        current_state="No formal information security policies documented",
        required_state="Information security policy and supporting policies approved by management",
        severity=RiskLevel.CRITICAL,
    ),
    GapRule(
        control="CC6.7 – Encryption at Rest",
        when=lambda ctx: not ctx.intake.data_handling.has_encryption_at_rest,
        current_state="Data not encrypted at rest",
        required_state="All sensitive data encrypted at rest using AES-256 or equivalent",
        severity=_encryption_at_rest_severity,
    ),
    GapRule(
        control="CC6.7 – Encryption in Transit",
        when=lambda ctx: not ctx.intake.data_handling.has_encryption_in_transit,
        current_state="Data not encrypted in transit",
        required_state="All data transmitted over TLS 1.2+",
        severity=RiskLevel.HIGH,
    ),
    # Availability criterion only
    GapRule(
        control="A1.2 – System Recovery",
        when=lambda ctx: ctx.has_availability and not ctx.intake.business_continuity.has_backup_strategy,
        current_state="No backup strategy defined",
        required_state="Automated backups with documented RTO/RPO and tested restore procedures",
        severity=RiskLevel.CRITICAL,
    ),
    GapRule(
        control="A1.3 – Disaster Recovery",
        when=lambda ctx: ctx.has_availability and not ctx.intake.business_continuity.has_disaster_recovery_plan,
        current_state="No disaster recovery plan",
        required_state="Documented DR plan tested at least annually",
        severity=RiskLevel.HIGH,
    ),
    # Privacy criterion only
    GapRule(
        control="P1.x – Privacy",
        when=lambda ctx: ctx.has_privacy and not ctx.intake.data_handling.has_data_classification,
        current_state="No data classification or privacy notice",
        required_state="Data classified by sensitivity; privacy notice published; consent mechanisms in place",
        severity=RiskLevel.HIGH,
    ),
    GapRule(
        control="CC9.2 – Vendor Risk",
        when=lambda ctx: (
            not ctx.intake.vendor_management.has_vendor_assessment
            and ctx.intake.vendor_management.critical_vendor_count != VendorCount.V0_5
        ),
        current_state="No vendor security assessments performed",
        required_state="Critical vendors assessed annually; risk ratings documented",
        severity=RiskLevel.MEDIUM,
    ),
)


def build_gaps(ctx: AssessmentContext) -> list[GapItem]:
    return apply_rules(GAP_RULES, ctx)
