"""Tests for core/risks.py."""

from __future__ import annotations

from soc2roadmap.core.context import AssessmentContext
from soc2roadmap.core.risks import MAX_RISKS, build_risks, link_risks_to_sprints, sort_by_severity
from soc2roadmap.models.roadmap import SEVERITY_ORDER, RiskItem, RiskLevel, Sprint, SprintTheme


def _risks(intake):
    return build_risks(AssessmentContext.from_intake(intake))


def _risk(id_, severity, sprint_reference=None):
    return RiskItem(
        id=id_, title=id_, description="", severity=severity,
        remediation="", sprint_reference=sprint_reference,
    )


def _sprint(number, theme):
    return Sprint(number=number, name=theme.value, weeks="", focus="", theme=theme, tasks=())


class TestBuildRisks:
    def test_weak_intake_sorted_by_severity(self, weak_intake):
        risks = _risks(weak_intake)
        assert [r.id for r in risks] == ["risk-policies", "risk-mfa", "risk-monitoring", "risk-irp"]
        assert risks[0].severity == RiskLevel.CRITICAL
        assert all(r.severity == RiskLevel.HIGH for r in risks[1:])

    def test_strong_intake_has_no_risks(self, strong_intake):
        assert _risks(strong_intake) == []

    def test_capped_at_five(self, make_intake):
        intake = make_intake({
            "soc2Type": "type2",
            "trustServiceCriteria": ["security", "availability"],
            "dataHandling": {"handlesPHI": True},
            "vendorManagement": {"criticalVendorCount": "50+"},
        })
        risks = _risks(intake)
        assert len(risks) == MAX_RISKS
        assert [r.id for r in risks] == [
            "risk-mfa", "risk-monitoring", "risk-policies", "risk-irp", "risk-availability",
        ]
        orders = [SEVERITY_ORDER[r.severity] for r in risks]
        assert orders == sorted(orders)

    def test_mfa_risk_names_sensitive_data(self, make_intake):
        risk = _risks(make_intake({"dataHandling": {"handlesPHI": True, "handlesCustomerPII": True}}))[0]
        assert risk.id == "risk-mfa"
        assert risk.severity == RiskLevel.CRITICAL
        assert "Acme Corp handles PHI" in risk.description

    def test_mfa_remediation_names_sso_provider(self, make_intake):
        intake = make_intake({"accessControl": {"hasSSO": True, "ssoProvider": "Google Workspace"}})
        risk = next(r for r in _risks(intake) if r.id == "risk-mfa")
        assert "Google Workspace admin console" in risk.remediation

    def test_mfa_remediation_generic_without_named_sso(self, make_intake):
        intake = make_intake({"accessControl": {"hasSSO": True, "ssoProvider": "Other"}})
        risk = next(r for r in _risks(intake) if r.id == "risk-mfa")
        assert "authenticator app" in risk.remediation

    def test_monitoring_risk_critical_for_type2(self, make_intake):
        risks = _risks(make_intake({"soc2Type": "type2"}))
        monitoring = next(r for r in risks if r.id == "risk-monitoring")
        assert monitoring.severity == RiskLevel.CRITICAL
        assert "Type 2" in monitoring.title

    def test_vendor_risk_only_at_scale(self, make_intake):
        small = _risks(make_intake({"vendorManagement": {"criticalVendorCount": "6-15"}}))
        assert "risk-vendors" not in [r.id for r in small]

        large = make_intake({
            "securityPosture": {"hasSecurityPolicies": True, "hasIncidentResponsePlan": True},
            "vendorManagement": {"criticalVendorCount": "31-50"},
        })
        vendors = next(r for r in _risks(large) if r.id == "risk-vendors")
        assert "31-50 vendors" in vendors.description

    def test_availability_risk_with_weak_backups(self, make_intake):
        intake = make_intake({
            "trustServiceCriteria": ["availability"],
            "businessContinuity": {
                "hasBackupStrategy": True,
                "backupFrequency": "Weekly",
                "rtoRequirement": "1-4 hours",
            },
        })
        risk = next(r for r in _risks(intake) if r.id == "risk-availability")
        assert "(Weekly)" in risk.description
        assert "RTO of 1-4 hours" in risk.description
        assert "RPO of your target" in risk.description

    def test_no_availability_risk_with_daily_backups(self, make_intake):
        intake = make_intake({
            "trustServiceCriteria": ["availability"],
            "businessContinuity": {"hasBackupStrategy": True, "backupFrequency": "Daily"},
        })
        assert "risk-availability" not in [r.id for r in _risks(intake)]


class TestSortBySeverity:
    def test_stable_within_severity(self):
        risks = [
            _risk("a", RiskLevel.HIGH),
            _risk("b", RiskLevel.CRITICAL),
            _risk("c", RiskLevel.HIGH),
            _risk("d", RiskLevel.MEDIUM),
            _risk("e", RiskLevel.CRITICAL),
        ]
        assert [r.id for r in sort_by_severity(risks)] == ["b", "e", "a", "c", "d"]


class TestLinkRisksToSprints:
    def test_hints_resolve_to_emitted_sprint_numbers(self):
        sprints = [
            _sprint(1, SprintTheme.FOUNDATION),
            _sprint(2, SprintTheme.POLICY),
            _sprint(3, SprintTheme.CONTINUITY),
            _sprint(4, SprintTheme.AUDIT_PREP),
        ]
        risks = [
            _risk("foundation", RiskLevel.CRITICAL, sprint_reference=1),
            _risk("policy", RiskLevel.MEDIUM, sprint_reference=3),
            _risk("continuity", RiskLevel.HIGH, sprint_reference=4),
        ]
        linked = link_risks_to_sprints(risks, sprints)
        assert [r.sprint_reference for r in linked] == [1, 2, 3]

    def test_omitted_theme_clears_reference(self):
        sprints = [_sprint(1, SprintTheme.FOUNDATION), _sprint(2, SprintTheme.AUDIT_PREP)]
        linked = link_risks_to_sprints([_risk("irp", RiskLevel.HIGH, sprint_reference=2)], sprints)
        assert linked[0].sprint_reference is None

    def test_input_items_untouched(self):
        risk = _risk("irp", RiskLevel.HIGH, sprint_reference=2)
        link_risks_to_sprints([risk], [_sprint(1, SprintTheme.AUDIT_PREP)])
        assert risk.sprint_reference == 2
