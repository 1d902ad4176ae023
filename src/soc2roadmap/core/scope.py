"""Audit scope decision: criteria, in-scope systems and cost expectations."""

from __future__ import annotations

from ..models.intake import SourceCodeManagement, SsoProvider, TrustCriterion
from ..models.roadmap import ScopeDecision
from .context import AssessmentContext
from .templates import AUDIT_COST

FALLBACK_SYSTEMS = ("All production systems",)

# Sentence fragments, appended in this order when their condition holds.
JUSTIFICATION_FRAGMENTS = (
    (lambda ctx: True,
     "{company} is a {employee_count}-person {industry} company."),
    (lambda ctx: ctx.intake.data_handling.handles_phi,
     "PHI handling requires Privacy and Confidentiality criteria coverage."),
    (lambda ctx: ctx.intake.data_handling.handles_payment_data,
     "Payment data handling adds PCI DSS considerations alongside SOC 2 controls."),
    (lambda ctx: ctx.intake.data_handling.handles_customer_pii and TrustCriterion.PRIVACY in ctx.criteria,
     "Customer PII processing supports the Privacy criteria inclusion."),
)


def systems_in_scope(ctx: AssessmentContext) -> tuple[str, ...]:
    infra = ctx.intake.technical_infrastructure
    sso = ctx.intake.access_control.sso_provider

    candidates = [c.value for c in ctx.clouds]
    if infra.source_code_management != SourceCodeManagement.UNSPECIFIED:
        candidates.append(infra.source_code_management.value)
    if sso != SsoProvider.NONE:
        candidates.append(sso.value)

    systems: list[str] = []
    for name in candidates:
        if name not in systems:
            systems.append(name)
    return tuple(systems) or FALLBACK_SYSTEMS


def build_scope(ctx: AssessmentContext) -> ScopeDecision:
    justification = " ".join(
        ctx.text(fragment) for applies, fragment in JUSTIFICATION_FRAGMENTS if applies(ctx)
    )
    return ScopeDecision(
        type=ctx.intake.soc2_type,
        criteria=ctx.criteria,
        justification=justification,
        systems_in_scope=systems_in_scope(ctx),
        estimated_audit_cost=AUDIT_COST[ctx.intake.soc2_type],
    )
