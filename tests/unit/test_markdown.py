"""Tests for formatters/markdown.py."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from soc2roadmap.core.engine import generate_roadmap
from soc2roadmap.formatters.markdown import generate_roadmap_report


@pytest.fixture
def roadmap(weak_intake):
    return generate_roadmap(weak_intake, now=datetime(2026, 2, 1, 8, 0, tzinfo=timezone.utc))


class TestGenerateRoadmapReport:
    def test_header(self, roadmap):
        report = generate_roadmap_report(roadmap, company="Acme Corp")
        assert report.startswith("# SOC 2 Readiness Roadmap")
        assert "**Company:** Acme Corp" in report
        assert "**Report:** Type 1" in report
        assert "**Maturity score:** 0/100" in report
        assert "**Risk level:** CRITICAL" in report
        assert "**Recommended timeline:** 20 weeks" in report

    def test_summary_table(self, roadmap):
        report = generate_roadmap_report(roadmap, completed=["s1-mfa", "bogus"])
        assert "| Gaps | 10 |" in report
        assert "| Missing policies | 10 of 10 |" in report
        assert "| Evidence items | 7 |" in report
        assert "(1 done) |" in report

    def test_sprint_checkboxes(self, roadmap):
        report = generate_roadmap_report(roadmap, completed=["s1-mfa"])
        assert "### Sprint 1: Foundation & Critical Controls (Weeks 1–2)" in report
        assert "- [x] **Enforce MFA for All Users** `s1-mfa`" in report
        assert "- [ ] **Write Information Security Policy** `s1-policy`" in report

    def test_risks_reference_sprints(self, roadmap):
        report = generate_roadmap_report(roadmap)
        assert "## Top Risks" in report
        assert "### No Formal Security Policies [CRITICAL]" in report
        assert "**Addressed in:** Sprint 2" in report

    def test_optional_sections(self, roadmap):
        full = generate_roadmap_report(roadmap)
        assert "## Gap Analysis" in full
        assert "## Policies" in full
        assert "## Evidence" in full

        trimmed = generate_roadmap_report(
            roadmap, include_gaps=False, include_policies=False, include_evidence=False
        )
        assert "## Gap Analysis" not in trimmed
        assert "## Policies" not in trimmed
        assert "## Evidence" not in trimmed
        assert "## Sprint Plan" in trimmed

    def test_conditional_policy_reason(self, make_intake):
        roadmap = generate_roadmap(make_intake({"dataHandling": {"handlesPaymentData": True}}))
        report = generate_roadmap_report(roadmap)
        assert "- **Cardholder Data Security Policy**: needed (Required because you handle payment card data)" in report

    def test_evidence_window(self, strong_intake):
        report = generate_roadmap_report(generate_roadmap(strong_intake))
        assert "| 90 days |" in report
        assert "| point-in-time |" in report

    def test_no_risks_section_when_empty(self, strong_intake):
        report = generate_roadmap_report(generate_roadmap(strong_intake))
        assert "## Top Risks" not in report

    def test_footer_timestamp(self, roadmap):
        report = generate_roadmap_report(roadmap)
        assert report.rstrip().endswith("at 2026-02-01 08:00:00*")
