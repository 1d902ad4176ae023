"""Maturity score, risk classification and timeline estimate."""

from __future__ import annotations

from ..models.intake import EmployeeCount, IntakeForm, MfaCoverage, ReportType, TrustCriterion
from ..models.roadmap import RiskLevel
from .context import effective_criteria

MAX_SCORE = 100

# Bucket maxima: access 34, posture 30, infra 10, data 12, continuity 13,
# vendors 9. They add up to 108; the total is clamped to MAX_SCORE.
POINTS: dict[str, int] = {
    "sso": 8,
    "mfa_all_users": 10,
    "mfa_partial": 5,
    "rbac": 6,
    "access_reviews": 5,
    "privileged_access": 5,
    "security_policies": 8,
    "incident_response": 7,
    "vulnerability_management": 6,
    "penetration_testing": 5,
    "security_awareness": 4,
    "monitoring": 6,
    "ci_cd": 4,
    "data_classification": 4,
    "encryption_at_rest": 4,
    "encryption_in_transit": 4,
    "backups": 5,
    "disaster_recovery": 5,
    "bcp_testing": 3,
    "vendor_assessment": 4,
    "dpas": 3,
    "vendor_inventory": 2,
}

RISK_THRESHOLDS: list[tuple[int, RiskLevel]] = [
    (30, RiskLevel.CRITICAL),
    (50, RiskLevel.HIGH),
    (70, RiskLevel.MEDIUM),
]

BASE_WEEKS = {ReportType.TYPE1: 8, ReportType.TYPE2: 20}
MIN_WEEKS = {ReportType.TYPE1: 6, ReportType.TYPE2: 12}
LARGE_ORGS = {EmployeeCount.M, EmployeeCount.L, EmployeeCount.XL}


def calc_maturity_score(intake: IntakeForm) -> int:
    """Weighted point sum over the yes/no answers, clamped to 0-100."""
    ac = intake.access_control
    sp = intake.security_posture
    ti = intake.technical_infrastructure
    dh = intake.data_handling
    bc = intake.business_continuity
    vm = intake.vendor_management

    awarded = [
        ("sso", ac.has_sso),
        ("rbac", ac.has_rbac),
        ("access_reviews", ac.has_access_reviews),
        ("privileged_access", ac.has_privileged_access_management),
        ("security_policies", sp.has_security_policies),
        ("incident_response", sp.has_incident_response_plan),
        ("vulnerability_management", sp.has_vulnerability_management),
        ("penetration_testing", sp.has_penetration_testing),
        ("security_awareness", sp.has_security_awareness),
        ("monitoring", ti.has_monitoring),
        ("ci_cd", ti.has_ci_cd),
        ("data_classification", dh.has_data_classification),
        ("encryption_at_rest", dh.has_encryption_at_rest),
        ("encryption_in_transit", dh.has_encryption_in_transit),
        ("backups", bc.has_backup_strategy),
        ("disaster_recovery", bc.has_disaster_recovery_plan),
        ("bcp_testing", bc.has_bcp_testing),
        ("vendor_assessment", vm.has_vendor_assessment),
        ("dpas", vm.has_data_processing_agreements),
        ("vendor_inventory", vm.has_vendor_inventory),
    ]
    score = sum(POINTS[key] for key, answered_yes in awarded if answered_yes)

    if ac.has_mfa:
        score += POINTS["mfa_all_users"] if ac.mfa_coverage == MfaCoverage.ALL_USERS else POINTS["mfa_partial"]

    return max(0, min(score, MAX_SCORE))


def score_to_risk_level(score: int) -> RiskLevel:
    for threshold, level in RISK_THRESHOLDS:
        if score < threshold:
            return level
    return RiskLevel.LOW


def calc_timeline(intake: IntakeForm, maturity_score: int) -> int:
    """Weeks until audit-ready, never below the report-type floor."""
    weeks = BASE_WEEKS[intake.soc2_type]

    if maturity_score < 30:
        weeks += 8
    elif maturity_score < 50:
        weeks += 4
    elif maturity_score >= 70:
        weeks -= 4

    # Regulated data widens audit scope
    if intake.data_handling.handles_phi or intake.data_handling.handles_payment_data:
        weeks += 4

    extra_criteria = [c for c in effective_criteria(intake) if c != TrustCriterion.SECURITY]
    weeks += 2 * len(extra_criteria)

    if not intake.security_posture.has_security_team:
        weeks += 4
    if intake.company_info.employee_count in LARGE_ORGS:
        weeks += 2

    return max(weeks, MIN_WEEKS[intake.soc2_type])
