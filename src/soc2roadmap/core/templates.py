"""Narrative text rendering.

Templates are plain strings with named ``{placeholders}``. Placeholder values
come from the intake, and stack-specific phrases come from lookup tables
keyed by the intake enums. Every table has a generic fallback.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TypeVar

from ..models.intake import (
    CloudProvider,
    IntakeForm,
    ReportType,
    SourceCodeManagement,
    SsoProvider,
)

K = TypeVar("K")

REPORT_LABELS: dict[ReportType, str] = {
    ReportType.TYPE1: "SOC 2 Type 1",
    ReportType.TYPE2: "SOC 2 Type 2",
}

AUDIT_COST: dict[ReportType, str] = {
    ReportType.TYPE1: "$15,000–$40,000",
    ReportType.TYPE2: "$30,000–$80,000",
}

# Providers without a console of their own fall back to the generic label.
SSO_LABELS: dict[SsoProvider, str] = {
    SsoProvider.OKTA: "Okta",
    SsoProvider.AZURE_AD: "Azure AD",
    SsoProvider.GOOGLE_WORKSPACE: "Google Workspace",
    SsoProvider.ONELOGIN: "OneLogin",
    SsoProvider.AUTH0: "Auth0",
}
DEFAULT_SSO_LABEL = "SSO provider"

# Insertion order is precedence when several clouds are in use.
LOG_SOURCES: dict[CloudProvider, str] = {
    CloudProvider.AWS: "AWS CloudTrail and CloudWatch",
    CloudProvider.GCP: "GCP Cloud Audit Logs and Cloud Logging",
    CloudProvider.AZURE: "Azure Monitor and Activity Log",
}
DEFAULT_LOG_SOURCE = "your cloud provider's logging console"

CHANGE_SOURCES: dict[SourceCodeManagement, str] = {
    SourceCodeManagement.GITHUB: "GitHub pull request history and branch protection settings",
    SourceCodeManagement.GITLAB: "GitLab merge request history and protected branches",
    SourceCodeManagement.BITBUCKET: "Bitbucket pull request history",
    SourceCodeManagement.AZURE_DEVOPS: "Azure DevOps pull request history and branch policies",
}
DEFAULT_CHANGE_SOURCE = "your version control system"


def lookup_first(table: Mapping[K, str], present: Iterable[K], default: str) -> str:
    """Return the first table entry (in table order) whose key is present."""
    present_set = set(present)
    for key, text in table.items():
        if key in present_set:
            return text
    return default


def named_clouds(intake: IntakeForm) -> list[CloudProvider]:
    """Cloud providers in use, without the on-premise marker."""
    return [
        c for c in intake.technical_infrastructure.cloud_providers
        if c != CloudProvider.NONE
    ]


def sensitive_data_label(intake: IntakeForm) -> str:
    """Most sensitive data type handled, in PHI > payment > PII order."""
    dh = intake.data_handling
    if dh.handles_phi:
        return "PHI"
    if dh.handles_payment_data:
        return "payment data"
    if dh.handles_customer_pii:
        return "customer PII"
    return "no regulated data"


def build_template_vars(intake: IntakeForm) -> dict[str, str]:
    """Resolve every named placeholder available to narrative templates."""
    company = intake.company_info
    infra = intake.technical_infrastructure
    access = intake.access_control
    vendors = intake.vendor_management
    continuity = intake.business_continuity

    clouds = named_clouds(intake)
    scm = infra.source_code_management
    sso_label = SSO_LABELS.get(access.sso_provider, DEFAULT_SSO_LABEL)

    return {
        "company": company.company_name,
        "industry": company.industry.value,
        "employee_count": company.employee_count.value,
        "report_label": REPORT_LABELS[intake.soc2_type],
        "audit_cost": AUDIT_COST[intake.soc2_type],
        "sso_label": sso_label,
        "cloud_hint": " / ".join(c.value for c in clouds) if clouds else "your infrastructure",
        "scm_hint": scm.value if scm not in (SourceCodeManagement.OTHER, SourceCodeManagement.UNSPECIFIED)
        else "your source control system",
        "log_source": lookup_first(LOG_SOURCES, clouds, DEFAULT_LOG_SOURCE),
        "change_source": CHANGE_SOURCES.get(scm, DEFAULT_CHANGE_SOURCE),
        "vendor_count": vendors.critical_vendor_count.value,
        "backup_frequency": continuity.backup_frequency.value if continuity.backup_frequency else "none",
        "rto": continuity.rto_requirement.value if continuity.rto_requirement else "your target",
        "rpo": continuity.rpo_requirement.value if continuity.rpo_requirement else "your target",
        "sensitive_data": sensitive_data_label(intake),
    }


def render(template: str, variables: Mapping[str, str]) -> str:
    """Fill ``{placeholders}`` in a template. Unknown names raise KeyError."""
    return template.format_map(variables)
