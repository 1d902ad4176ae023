"""Required policy library.

Ten baseline policies are always listed. Data-sensitivity flags append
conditional policies, which are never pre-satisfied.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models.intake import DataResidency
from ..models.roadmap import PolicyItem
from .context import AssessmentContext, Predicate, Text, always, apply_rules


@dataclass(frozen=True)
class PolicyRule:
    id: str
    name: str
    exists: Predicate
    when: Predicate = always
    conditional: Text | None = None

    def build(self, ctx: AssessmentContext) -> PolicyItem:
        if self.conditional is not None:
            return PolicyItem(
                id=self.id,
                name=self.name,
                exists=False,
                required=True,
                conditional=ctx.text(self.conditional),
            )
        return PolicyItem(id=self.id, name=self.name, exists=self.exists(ctx), required=True)


def _has_policies(ctx: AssessmentContext) -> bool:
    return ctx.intake.security_posture.has_security_policies


def _never(ctx: AssessmentContext) -> bool:
    return False


def _operates_in_eu(ctx: AssessmentContext) -> bool:
    return DataResidency.EU in ctx.intake.data_handling.data_residency_requirements


def _privacy_reason(ctx: AssessmentContext) -> str:
    if _operates_in_eu(ctx):
        return "Required because you operate in the EU (GDPR)"
    return "Required because you handle customer PII"


BASELINE_POLICIES: tuple[PolicyRule, ...] = (
    PolicyRule("isp", "Information Security Policy", _has_policies),
    PolicyRule("acp", "Access Control Policy", _has_policies),
    PolicyRule(
        "irp", "Incident Response Policy",
        lambda ctx: ctx.intake.security_posture.has_incident_response_plan,
    ),
    PolicyRule(
        "cmp", "Change Management Policy",
        lambda ctx: ctx.intake.technical_infrastructure.has_ci_cd and _has_policies(ctx),
    ),
    PolicyRule(
        "vmp", "Vendor Management Policy",
        lambda ctx: ctx.intake.vendor_management.has_vendor_assessment,
    ),
    PolicyRule("rap", "Risk Assessment Policy", _has_policies),
    PolicyRule(
        "bcp", "Business Continuity & Disaster Recovery Policy",
        lambda ctx: ctx.intake.business_continuity.has_disaster_recovery_plan,
    ),
    PolicyRule(
        "dcp", "Data Classification Policy",
        lambda ctx: ctx.intake.data_handling.has_data_classification,
    ),
    PolicyRule("aup", "Acceptable Use Policy", _has_policies),
    PolicyRule(
        "pap", "Password & Authentication Policy",
        lambda ctx: _has_policies(ctx) and ctx.intake.access_control.has_mfa,
    ),
)

CONDITIONAL_POLICIES: tuple[PolicyRule, ...] = (
    PolicyRule(
        "hipaa", "HIPAA-Aligned Data Handling Policy", _never,
        when=lambda ctx: ctx.intake.data_handling.handles_phi,
        conditional="Required because you handle Protected Health Information (PHI)",
    ),
    PolicyRule(
        "pci", "Cardholder Data Security Policy", _never,
        when=lambda ctx: ctx.intake.data_handling.handles_payment_data,
        conditional="Required because you handle payment card data",
    ),
    PolicyRule(
        "gdpr", "Data Subject Rights & Privacy Policy", _never,
        when=lambda ctx: _operates_in_eu(ctx) or ctx.intake.data_handling.handles_customer_pii,
        conditional=_privacy_reason,
    ),
)


def build_policies(ctx: AssessmentContext) -> list[PolicyItem]:
    return apply_rules(BASELINE_POLICIES + CONDITIONAL_POLICIES, ctx)


def missing_required_policies(policies: list[PolicyItem]) -> list[PolicyItem]:
    """Required policies that still need to be written."""
    return [p for p in policies if p.required and not p.exists]
