"""Evidence collection plan.

Point-in-time artifacts are always requested. Type 2 reports add rolling
items covering the 90-day observation window. Collection instructions are
tailored to the cloud, SCM and SSO tools named in the intake.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models.intake import CloudProvider, MfaCoverage
from ..models.roadmap import EvidenceCategory, EvidenceItem
from .context import AssessmentContext, Predicate, Text, always, apply_rules

OBSERVATION_WINDOW_DAYS = 90

ENCRYPTION_METHODS: dict[CloudProvider, str] = {
    CloudProvider.AWS: "Screenshot S3 bucket encryption settings, RDS encryption, and ACM/TLS configuration",
    CloudProvider.GCP: "Screenshot Cloud Storage and Cloud SQL encryption settings (Google-managed or CMEK keys) "
    "and load balancer TLS policies",
    CloudProvider.AZURE: "Screenshot Storage Service Encryption, Azure SQL TDE settings, and App Gateway TLS policy",
}
DEFAULT_ENCRYPTION_METHOD = "Document encryption settings for each storage service and TLS certificates in use"

BACKUP_METHODS: dict[CloudProvider, str] = {
    CloudProvider.AWS: "Export AWS Backup job history; include restore test documentation",
}
DEFAULT_BACKUP_METHOD = (
    "Export backup job logs from your backup solution; include at least one documented restore test"
)


def _first_cloud_match(table: dict[CloudProvider, str], default: str):
    def method(ctx: AssessmentContext) -> str:
        for provider, text in table.items():
            if ctx.uses_cloud(provider):
                return text
        return default
    return method


def _roster_method(ctx: AssessmentContext) -> str:
    if ctx.intake.access_control.has_sso:
        return "Export user roster from your {sso_label} admin console"
    return "Export user list from each system manually; document roles in a spreadsheet"


def _mfa_method(ctx: AssessmentContext) -> str:
    if ctx.intake.access_control.has_sso:
        return "Screenshot MFA policy settings in your {sso_label} admin console"
    return "Screenshot MFA settings in each tool individually (GitHub, AWS, etc.)"


@dataclass(frozen=True)
class EvidenceRule:
    id: str
    name: str
    description: str
    collection_method: Text
    category: EvidenceCategory
    already_have: Predicate
    days_required: int = 0
    when: Predicate = always

    def build(self, ctx: AssessmentContext) -> EvidenceItem:
        return EvidenceItem(
            id=self.id,
            name=self.name,
            description=self.description,
            collection_method=ctx.text(self.collection_method),
            days_required=self.days_required,
            already_have=self.already_have(ctx),
            category=self.category,
        )


POINT_IN_TIME_EVIDENCE: tuple[EvidenceRule, ...] = (
    EvidenceRule(
        id="access-list",
        name="User Access List with Roles",
        description="Complete list of all users with their roles and access levels to production systems",
        collection_method=_roster_method,
        category=EvidenceCategory.ACCESS,
        already_have=lambda ctx: ctx.intake.access_control.has_rbac,
    ),
    EvidenceRule(
        id="mfa-config",
        name="MFA Configuration Screenshots",
        description="Documentation that MFA is enforced across all required accounts",
        collection_method=_mfa_method,
        category=EvidenceCategory.ACCESS,
        already_have=lambda ctx: (
            ctx.intake.access_control.has_mfa
            and ctx.intake.access_control.mfa_coverage == MfaCoverage.ALL_USERS
        ),
    ),
    EvidenceRule(
        id="encryption-config",
        name="Encryption Configuration Documentation",
        description="Evidence that data is encrypted at rest and in transit",
        collection_method=_first_cloud_match(ENCRYPTION_METHODS, DEFAULT_ENCRYPTION_METHOD),
        category=EvidenceCategory.POLICY,
        already_have=lambda ctx: (
            ctx.intake.data_handling.has_encryption_at_rest
            and ctx.intake.data_handling.has_encryption_in_transit
        ),
    ),
    EvidenceRule(
        id="vuln-scan",
        name="Vulnerability Scan Results",
        description="Recent scan showing identified vulnerabilities and remediation status",
        collection_method="Export report from your vulnerability scanner "
        "(e.g., Qualys, Tenable, AWS Inspector, GitHub Dependabot)",
        category=EvidenceCategory.MONITORING,
        already_have=lambda ctx: ctx.intake.security_posture.has_vulnerability_management,
    ),
    EvidenceRule(
        id="policies-signed",
        name="Signed Security Policies",
        description="All required security policies signed/approved by management",
        collection_method="Export signed policy documents from your document management system or HR platform",
        category=EvidenceCategory.POLICY,
        already_have=lambda ctx: ctx.intake.security_posture.has_security_policies,
    ),
    EvidenceRule(
        id="vendor-inventory",
        name="Vendor Inventory & Risk Ratings",
        description="List of all critical vendors with their security posture and risk rating",
        collection_method="Export vendor list from your GRC tool, or compile from contract records; "
        "include SOC 2 reports for critical vendors",
        category=EvidenceCategory.VENDOR,
        already_have=lambda ctx: (
            ctx.intake.vendor_management.has_vendor_inventory
            and ctx.intake.vendor_management.has_vendor_assessment
        ),
    ),
    EvidenceRule(
        id="irp-doc",
        name="Incident Response Plan",
        description="Documented IRP with roles, escalation procedures, and communication templates",
        collection_method="Retrieve current IRP document; ensure it has been reviewed/tested "
        "within the past 12 months",
        category=EvidenceCategory.POLICY,
        already_have=lambda ctx: ctx.intake.security_posture.has_incident_response_plan,
    ),
)


def _type2(ctx: AssessmentContext) -> bool:
    return ctx.is_type2


ROLLING_EVIDENCE: tuple[EvidenceRule, ...] = (
    EvidenceRule(
        id="access-logs",
        name="90-Day Access & Authentication Logs",
        description="Logs showing who accessed what systems and when over the audit period",
        collection_method="Export authentication logs from {log_source}; filter for production system access",
        category=EvidenceCategory.ACCESS,
        already_have=lambda ctx: ctx.intake.technical_infrastructure.has_monitoring,
        days_required=OBSERVATION_WINDOW_DAYS,
        when=_type2,
    ),
    EvidenceRule(
        id="change-records",
        name="90-Day Change Management Records",
        description="All production changes with approvals over the audit period",
        collection_method="Export from {change_source}; auditors look for approved PRs/MRs before merges",
        category=EvidenceCategory.CHANGE,
        already_have=lambda ctx: ctx.intake.technical_infrastructure.has_ci_cd,
        days_required=OBSERVATION_WINDOW_DAYS,
        when=_type2,
    ),
    EvidenceRule(
        id="access-reviews",
        name="Quarterly Access Review Evidence",
        description="Documentation that user access was reviewed and certified",
        collection_method="Export access review completion records; screenshot approvals or certification emails",
        category=EvidenceCategory.ACCESS,
        already_have=lambda ctx: ctx.intake.access_control.has_access_reviews,
        days_required=OBSERVATION_WINDOW_DAYS,
        when=_type2,
    ),
    EvidenceRule(
        id="monitoring-alerts",
        name="90-Day Monitoring Alerts & Responses",
        description="Security alert log showing alerts generated and how they were handled",
        collection_method="Export alert history from {log_source} or your SIEM; include ticket/resolution records",
        category=EvidenceCategory.MONITORING,
        already_have=lambda ctx: ctx.intake.technical_infrastructure.has_monitoring,
        days_required=OBSERVATION_WINDOW_DAYS,
        when=_type2,
    ),
    EvidenceRule(
        id="backup-logs",
        name="Backup Completion Logs",
        description="Evidence that backups ran successfully over the audit period",
        collection_method=_first_cloud_match(BACKUP_METHODS, DEFAULT_BACKUP_METHOD),
        category=EvidenceCategory.BACKUP,
        already_have=lambda ctx: ctx.intake.business_continuity.has_backup_strategy,
        days_required=OBSERVATION_WINDOW_DAYS,
        when=_type2,
    ),
    EvidenceRule(
        id="training-records",
        name="Security Awareness Training Records",
        description="Completion records showing all employees completed security training during the audit period",
        collection_method="Export completion report from your training platform (KnowBe4, Proofpoint, etc.) "
        "or HR system",
        category=EvidenceCategory.TRAINING,
        already_have=lambda ctx: ctx.intake.security_posture.has_security_awareness,
        days_required=OBSERVATION_WINDOW_DAYS,
        when=_type2,
    ),
)


def build_evidence(ctx: AssessmentContext) -> list[EvidenceItem]:
    return apply_rules(POINT_IN_TIME_EVIDENCE + ROLLING_EVIDENCE, ctx)
