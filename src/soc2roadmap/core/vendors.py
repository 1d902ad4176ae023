"""Vendor inventory pre-populated from intake answers.

``KNOWN_VENDORS`` is the catalog of third parties the questionnaire can
reveal. Detection rules map intake answers to catalog keys; answers with no
catalog entry ("Other", "Unspecified", on-premise) are skipped. Each vendor is
listed once, in the order the rules first name it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Optional

from ..models.intake import DatabaseType, IntakeForm
from ..models.roadmap import RiskLevel
from ..models.vendor import Vendor, VendorCategory
from .context import AssessmentContext, Predicate, always, apply_rules


@dataclass(frozen=True)
class KnownVendor:
    name: str
    website: str
    category: VendorCategory
    risk_tier: RiskLevel
    data_access: tuple[str, ...]
    has_production_access: bool
    has_soc2_report: bool
    soc2_report_url: Optional[str]


def _known(name, website, category, tier, data_access, production, report_url) -> KnownVendor:
    return KnownVendor(
        name=name,
        website=website,
        category=category,
        risk_tier=tier,
        data_access=tuple(data_access),
        has_production_access=production,
        has_soc2_report=True,
        soc2_report_url=report_url,
    )


_INFRA = VendorCategory.INFRASTRUCTURE
_IDENTITY = VendorCategory.IDENTITY
_COMMS = VendorCategory.COMMUNICATION
_OPS = VendorCategory.BUSINESS_OPS
_SECURITY = VendorCategory.SECURITY

_CRITICAL = RiskLevel.CRITICAL
_HIGH = RiskLevel.HIGH
_MEDIUM = RiskLevel.MEDIUM
_LOW = RiskLevel.LOW

KNOWN_VENDORS: dict[str, KnownVendor] = {
    # Cloud providers
    "AWS": _known(
        "AWS", "https://aws.amazon.com", _INFRA, _CRITICAL,
        ["production data", "customer data", "source code"], True,
        "https://aws.amazon.com/compliance/soc/",
    ),
    "Google Cloud (GCP)": _known(
        "Google Cloud (GCP)", "https://cloud.google.com", _INFRA, _CRITICAL,
        ["production data", "customer data"], True,
        "https://cloud.google.com/security/compliance/soc-2",
    ),
    "Microsoft Azure": _known(
        "Microsoft Azure", "https://azure.microsoft.com", _INFRA, _CRITICAL,
        ["production data", "customer data"], True,
        "https://servicetrust.microsoft.com",
    ),
    "DigitalOcean": _known(
        "DigitalOcean", "https://www.digitalocean.com", _INFRA, _CRITICAL,
        ["production data", "customer data"], True,
        "https://www.digitalocean.com/trust/certification-reports",
    ),
    "Vercel": _known(
        "Vercel", "https://vercel.com", _INFRA, _HIGH,
        ["source code", "environment variables"], True,
        "https://vercel.com/security",
    ),
    "Heroku": _known(
        "Heroku", "https://www.heroku.com", _INFRA, _HIGH,
        ["production data", "source code"], True,
        "https://www.heroku.com/policy/security",
    ),
    # Source code management
    "GitHub": _known(
        "GitHub", "https://github.com", _INFRA, _CRITICAL,
        ["source code", "secrets (if not managed separately)"], False,
        "https://github.com/security",
    ),
    "GitLab": _known(
        "GitLab", "https://gitlab.com", _INFRA, _CRITICAL,
        ["source code", "CI/CD secrets"], False,
        "https://about.gitlab.com/security/",
    ),
    "Bitbucket": _known(
        "Bitbucket", "https://bitbucket.org", _INFRA, _CRITICAL,
        ["source code"], False,
        "https://www.atlassian.com/trust/compliance/resources",
    ),
    "Azure DevOps": _known(
        "Azure DevOps", "https://dev.azure.com", _INFRA, _CRITICAL,
        ["source code", "CI/CD pipelines"], False,
        "https://servicetrust.microsoft.com",
    ),
    # Identity
    "Okta": _known(
        "Okta", "https://www.okta.com", _IDENTITY, _CRITICAL,
        ["user identities", "authentication logs", "all system access"], True,
        "https://trust.okta.com",
    ),
    "Google Workspace": _known(
        "Google Workspace", "https://workspace.google.com", _IDENTITY, _CRITICAL,
        ["email", "documents", "user identities", "internal communications"], False,
        "https://workspace.google.com/security",
    ),
    "Azure AD": _known(
        "Azure AD (Entra ID)", "https://azure.microsoft.com/en-us/products/active-directory", _IDENTITY, _CRITICAL,
        ["user identities", "authentication logs", "all system access"], True,
        "https://servicetrust.microsoft.com",
    ),
    "Auth0": _known(
        "Auth0", "https://auth0.com", _IDENTITY, _CRITICAL,
        ["user identities", "authentication data"], True,
        "https://auth0.com/security",
    ),
    "OneLogin": _known(
        "OneLogin", "https://www.onelogin.com", _IDENTITY, _CRITICAL,
        ["user identities", "authentication logs"], True,
        "https://www.onelogin.com/security",
    ),
    # Data and payments
    "Stripe": _known(
        "Stripe", "https://stripe.com", VendorCategory.PAYMENT, _HIGH,
        ["financial data", "payment card data", "PII"], False,
        "https://stripe.com/docs/security",
    ),
    "MongoDB": _known(
        "MongoDB Atlas", "https://www.mongodb.com/atlas", _INFRA, _CRITICAL,
        ["customer data", "production data"], True,
        "https://www.mongodb.com/cloud/trust",
    ),
    # Collaboration and business tools
    "Slack": _known(
        "Slack", "https://slack.com", _COMMS, _MEDIUM,
        ["internal communications", "potentially sensitive business data"], False,
        "https://slack.com/trust",
    ),
    "Intercom": _known(
        "Intercom", "https://www.intercom.com", _COMMS, _HIGH,
        ["customer PII", "support conversations"], False,
        "https://www.intercom.com/security",
    ),
    "Zendesk": _known(
        "Zendesk", "https://www.zendesk.com", _COMMS, _HIGH,
        ["customer PII", "support tickets"], False,
        "https://www.zendesk.com/trust-center",
    ),
    "HubSpot": _known(
        "HubSpot", "https://www.hubspot.com", _OPS, _HIGH,
        ["customer PII", "contact data", "marketing data"], False,
        "https://legal.hubspot.com/security",
    ),
    "Salesforce": _known(
        "Salesforce", "https://www.salesforce.com", _OPS, _HIGH,
        ["customer PII", "sales data", "contact data"], False,
        "https://trust.salesforce.com",
    ),
    "Datadog": _known(
        "Datadog", "https://www.datadoghq.com", _SECURITY, _HIGH,
        ["system logs", "metrics", "potentially sensitive log data"], True,
        "https://www.datadoghq.com/security/",
    ),
    "PagerDuty": _known(
        "PagerDuty", "https://www.pagerduty.com", _SECURITY, _MEDIUM,
        ["incident data", "on-call schedules"], False,
        "https://www.pagerduty.com/security",
    ),
    "Notion": _known(
        "Notion", "https://www.notion.so", VendorCategory.PROJECT_MANAGEMENT, _MEDIUM,
        ["internal documentation", "potentially sensitive business data"], False,
        "https://www.notion.so/security",
    ),
    "Zoom": _known(
        "Zoom", "https://zoom.us", _COMMS, _LOW,
        ["meeting recordings (if enabled)", "contact info"], False,
        "https://explore.zoom.us/en/trust",
    ),
}

# Days until the next vendor review, by risk tier
REVIEW_INTERVAL_DAYS: dict[RiskLevel, int] = {
    RiskLevel.CRITICAL: 365,
    RiskLevel.HIGH: 365,
    RiskLevel.MEDIUM: 730,
    RiskLevel.LOW: 1095,
}


@dataclass(frozen=True)
class VendorSource:
    """Names catalog keys for one intake answer."""

    keys: Callable[[AssessmentContext], tuple[str, ...]]
    when: Predicate = always

    def build(self, ctx: AssessmentContext) -> tuple[str, ...]:
        return self.keys(ctx)


VENDOR_SOURCES: tuple[VendorSource, ...] = (
    VendorSource(lambda ctx: tuple(p.value for p in ctx.intake.technical_infrastructure.cloud_providers)),
    VendorSource(lambda ctx: (ctx.intake.technical_infrastructure.source_code_management.value,)),
    VendorSource(
        lambda ctx: ("Stripe",),
        when=lambda ctx: ctx.intake.data_handling.handles_payment_data,
    ),
    VendorSource(
        lambda ctx: ("MongoDB",),
        when=lambda ctx: DatabaseType.MONGODB in ctx.intake.technical_infrastructure.database_types,
    ),
    # Always listed
    VendorSource(lambda ctx: ("Slack",)),
)


def vendor_id(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "-", name.lower())


def next_review_date(tier: RiskLevel, today: Optional[date] = None) -> date:
    """Date the next review of a vendor in this tier falls due."""
    return (today or date.today()) + timedelta(days=REVIEW_INTERVAL_DAYS[tier])


def make_vendor(known: KnownVendor, today: Optional[date] = None) -> Vendor:
    return Vendor(
        id=vendor_id(known.name),
        name=known.name,
        website=known.website,
        category=known.category,
        risk_tier=known.risk_tier,
        data_access=known.data_access,
        has_production_access=known.has_production_access,
        next_review_due=next_review_date(known.risk_tier, today),
        has_soc2_report=known.has_soc2_report,
        soc2_report_url=known.soc2_report_url,
        is_auto_detected=True,
    )


def auto_populate_vendors(intake: IntakeForm, today: Optional[date] = None) -> list[Vendor]:
    """Build the starting vendor inventory implied by an intake.

    Args:
        intake: A validated questionnaire.
        today: Base date for review due dates; defaults to the local date.
    """
    ctx = AssessmentContext.from_intake(intake)
    today = today or date.today()

    vendors: dict[str, Vendor] = {}
    for keys in apply_rules(VENDOR_SOURCES, ctx):
        for key in keys:
            known = KNOWN_VENDORS.get(key)
            if known is not None and key not in vendors:
                vendors[key] = make_vendor(known, today)
    return list(vendors.values())


def known_vendor_info(name: str) -> Optional[KnownVendor]:
    return KNOWN_VENDORS.get(name)


def is_known_vendor(name: str) -> bool:
    return name in KNOWN_VENDORS
