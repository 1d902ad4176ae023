"""Tests for core/scoring.py."""

from __future__ import annotations

import pytest

from soc2roadmap.core.scoring import MAX_SCORE, calc_maturity_score, calc_timeline, score_to_risk_level
from soc2roadmap.models.roadmap import RiskLevel


class TestMaturityScore:
    def test_nothing_in_place_scores_zero(self, weak_intake):
        assert calc_maturity_score(weak_intake) == 0

    def test_everything_in_place_is_clamped(self, strong_intake):
        assert calc_maturity_score(strong_intake) == MAX_SCORE

    def test_sso_counts_without_mfa(self, make_intake):
        intake = make_intake({"accessControl": {"hasSSO": True, "ssoProvider": "Okta"}})
        assert calc_maturity_score(intake) == 8

    def test_mfa_all_users_beats_partial(self, make_intake):
        full = make_intake({"accessControl": {"hasMFA": True, "mfaCoverage": "All users"}})
        partial = make_intake({"accessControl": {"hasMFA": True, "mfaCoverage": "Admin/privileged users only"}})
        assert calc_maturity_score(full) == 10
        assert calc_maturity_score(partial) == 5

    def test_coverage_ignored_without_mfa(self, make_intake):
        intake = make_intake({"accessControl": {"hasMFA": False, "mfaCoverage": "All users"}})
        assert calc_maturity_score(intake) == 0

    def test_additive(self, make_intake):
        intake = make_intake({
            "securityPosture": {"hasSecurityPolicies": True, "hasIncidentResponsePlan": True},
            "technicalInfrastructure": {"hasMonitoring": True},
        })
        assert calc_maturity_score(intake) == 8 + 7 + 6


class TestRiskLevel:
    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, RiskLevel.CRITICAL),
            (29, RiskLevel.CRITICAL),
            (30, RiskLevel.HIGH),
            (49, RiskLevel.HIGH),
            (50, RiskLevel.MEDIUM),
            (69, RiskLevel.MEDIUM),
            (70, RiskLevel.LOW),
            (100, RiskLevel.LOW),
        ],
    )
    def test_thresholds(self, score, expected):
        assert score_to_risk_level(score) == expected


class TestTimeline:
    def test_weak_type1(self, weak_intake):
        # base 8, immature +8, no security team +4
        assert calc_timeline(weak_intake, 0) == 20

    def test_strong_type2(self, strong_intake):
        # base 20, mature -4, availability +2, 51-200 staff +2
        assert calc_timeline(strong_intake, 100) == 20

    def test_type1_floor(self, make_intake):
        intake = make_intake({
            "securityPosture": {"hasSecurityTeam": True},
        })
        assert calc_timeline(intake, 90) == 6

    def test_type2_floor(self, make_intake):
        intake = make_intake({
            "soc2Type": "type2",
            "securityPosture": {"hasSecurityTeam": True},
        })
        assert calc_timeline(intake, 90) == 16
        assert calc_timeline(intake, 90) >= 12

    def test_regulated_data_adds_time(self, make_intake):
        phi = make_intake({"dataHandling": {"handlesPHI": True}})
        payment = make_intake({"dataHandling": {"handlesPaymentData": True}})
        pii = make_intake({"dataHandling": {"handlesCustomerPII": True}})
        assert calc_timeline(phi, 0) == 24
        assert calc_timeline(payment, 0) == 24
        assert calc_timeline(pii, 0) == 20

    def test_extra_criteria_add_two_weeks_each(self, make_intake):
        intake = make_intake({"trustServiceCriteria": ["availability", "privacy"]})
        assert calc_timeline(intake, 0) == 24

    def test_security_not_counted_twice(self, make_intake):
        intake = make_intake({"trustServiceCriteria": ["security", "security"]})
        assert calc_timeline(intake, 0) == 20

    def test_maturity_bands(self, weak_intake):
        assert calc_timeline(weak_intake, 29) == 20
        assert calc_timeline(weak_intake, 30) == 16
        assert calc_timeline(weak_intake, 50) == 12
        assert calc_timeline(weak_intake, 70) == 8
