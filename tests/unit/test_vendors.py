"""Tests for core/vendors.py."""

from __future__ import annotations

from datetime import date

from soc2roadmap.core.vendors import (
    KNOWN_VENDORS,
    auto_populate_vendors,
    is_known_vendor,
    known_vendor_info,
    next_review_date,
    vendor_id,
)
from soc2roadmap.models.roadmap import RiskLevel
from soc2roadmap.models.vendor import AssessmentStatus, Vendor, VendorCategory

TODAY = date(2026, 2, 1)


class TestNextReviewDate:
    def test_interval_by_tier(self):
        assert next_review_date(RiskLevel.CRITICAL, TODAY) == date(2027, 2, 1)
        assert next_review_date(RiskLevel.HIGH, TODAY) == date(2027, 2, 1)
        assert next_review_date(RiskLevel.MEDIUM, TODAY) == date(2028, 2, 1)
        assert next_review_date(RiskLevel.LOW, TODAY) == date(2029, 1, 31)

    def test_defaults_to_today(self):
        assert next_review_date(RiskLevel.CRITICAL) > date.today()


class TestVendorId:
    def test_non_alphanumerics_become_dashes(self):
        assert vendor_id("Google Cloud (GCP)") == "google-cloud--gcp-"
        assert vendor_id("MongoDB Atlas") == "mongodb-atlas"


class TestAutoPopulateVendors:
    def test_weak_intake_only_slack(self, weak_intake):
        vendors = auto_populate_vendors(weak_intake, today=TODAY)
        assert [v.name for v in vendors] == ["Slack"]
        slack = vendors[0]
        assert slack.id == "slack"
        assert slack.category == VendorCategory.COMMUNICATION
        assert slack.risk_tier == RiskLevel.MEDIUM
        assert slack.next_review_due == date(2028, 2, 1)

    def test_clouds_then_scm(self, strong_intake):
        vendors = auto_populate_vendors(strong_intake, today=TODAY)
        assert [v.name for v in vendors] == ["AWS", "GitHub", "Slack"]

    def test_new_entries_are_unassessed(self, strong_intake):
        for vendor in auto_populate_vendors(strong_intake, today=TODAY):
            assert vendor.assessment_status == AssessmentStatus.NOT_STARTED
            assert vendor.last_reviewed is None
            assert vendor.has_dpa is None
            assert vendor.has_baa is None
            assert vendor.is_auto_detected is True
            assert vendor.confirmed_by_user is False
            assert vendor.assessment_history == ()

    def test_catalog_details_copied(self, strong_intake):
        aws = auto_populate_vendors(strong_intake, today=TODAY)[0]
        assert aws.risk_tier == RiskLevel.CRITICAL
        assert aws.has_production_access is True
        assert aws.has_soc2_report is True
        assert aws.soc2_report_url == "https://aws.amazon.com/compliance/soc/"
        assert "customer data" in aws.data_access

    def test_payment_data_adds_stripe(self, make_intake):
        intake = make_intake({"dataHandling": {"handlesPaymentData": True}})
        names = [v.name for v in auto_populate_vendors(intake, today=TODAY)]
        assert names == ["Stripe", "Slack"]

    def test_mongodb_adds_atlas(self, make_intake):
        intake = make_intake({"technicalInfrastructure": {"databaseTypes": ["PostgreSQL", "MongoDB"]}})
        vendors = auto_populate_vendors(intake, today=TODAY)
        assert [v.id for v in vendors] == ["mongodb-atlas", "slack"]

    def test_unlisted_answers_skipped(self, make_intake):
        intake = make_intake({
            "technicalInfrastructure": {
                "cloudProviders": ["Other", "None/On-premise only"],
                "sourceCodeManagement": "Other",
            },
        })
        assert [v.name for v in auto_populate_vendors(intake, today=TODAY)] == ["Slack"]

    def test_each_vendor_listed_once(self, make_intake):
        intake = make_intake({
            "technicalInfrastructure": {
                "cloudProviders": ["Microsoft Azure", "Vercel"],
                "sourceCodeManagement": "Azure DevOps",
                "databaseTypes": ["MongoDB"],
            },
            "dataHandling": {"handlesPaymentData": True},
        })
        vendors = auto_populate_vendors(intake, today=TODAY)
        assert [v.name for v in vendors] == [
            "Microsoft Azure", "Vercel", "Azure DevOps", "Stripe", "MongoDB Atlas", "Slack",
        ]
        assert len({v.id for v in vendors}) == len(vendors)

    def test_deterministic_for_fixed_day(self, strong_intake):
        assert auto_populate_vendors(strong_intake, today=TODAY) == auto_populate_vendors(strong_intake, today=TODAY)

    def test_camel_case_document(self, weak_intake):
        data = auto_populate_vendors(weak_intake, today=TODAY)[0].model_dump(mode="json", by_alias=True)
        assert data["riskTier"] == "medium"
        assert data["nextReviewDue"] == "2028-02-01"
        assert data["hasDPA"] is None
        assert data["assessmentStatus"] == "not-started"
        assert Vendor.model_validate(data).next_review_due == date(2028, 2, 1)


class TestCatalogLookup:
    def test_known(self):
        assert is_known_vendor("Okta")
        assert known_vendor_info("Azure AD").name == "Azure AD (Entra ID)"

    def test_unknown(self):
        assert not is_known_vendor("Acme Internal Tool")
        assert known_vendor_info("Acme Internal Tool") is None

    def test_catalog_has_report_links(self):
        assert len(KNOWN_VENDORS) == 26
        assert all(v.soc2_report_url.startswith("https://") for v in KNOWN_VENDORS.values())
