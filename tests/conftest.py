"""Shared fixtures for SOC 2 roadmap tests."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Callable, Optional

import pytest

from soc2roadmap.core.config import deep_merge
from soc2roadmap.models.intake import IntakeForm

# A small Type 1 company that has done nothing yet. Keys use the camelCase
# the questionnaire UI submits.
WEAK_INTAKE: dict = {
    "companyInfo": {
        "companyName": "Acme Corp",
        "industry": "Software/SaaS",
        "employeeCount": "1-10",
        "yearFounded": "2023",
        "website": "https://acme.example",
    },
    "technicalInfrastructure": {
        "cloudProviders": [],
        "hostingType": "Fully cloud-hosted",
        "hasProductionDatabase": True,
        "databaseTypes": ["PostgreSQL"],
        "usesContainers": False,
        "hasCI_CD": False,
        "sourceCodeManagement": "Unspecified",
        "hasMonitoring": False,
    },
    "dataHandling": {
        "handlesCustomerPII": False,
        "handlesPHI": False,
        "handlesPaymentData": False,
        "dataResidencyRequirements": [],
        "hasDataClassification": False,
        "hasEncryptionAtRest": False,
        "hasEncryptionInTransit": False,
    },
    "securityPosture": {
        "hasSecurityTeam": False,
        "securityTeamSize": "No dedicated security personnel",
        "hasSecurityPolicies": False,
        "hasIncidentResponsePlan": False,
        "hasVulnerabilityManagement": False,
        "hasPenetrationTesting": False,
        "hasSecurityAwareness": False,
        "currentCompliances": [],
    },
    "accessControl": {
        "hasSSO": False,
        "ssoProvider": "None",
        "hasMFA": False,
        "mfaCoverage": "Not implemented",
        "hasRBAC": False,
        "hasPrivilegedAccessManagement": False,
        "hasAccessReviews": False,
        "accessReviewFrequency": "Never/Ad-hoc",
    },
    "vendorManagement": {
        "criticalVendorCount": "0-5",
        "hasVendorAssessment": False,
        "hasVendorInventory": False,
        "hasDataProcessingAgreements": False,
    },
    "businessContinuity": {
        "hasBackupStrategy": False,
        "backupFrequency": None,
        "hasDisasterRecoveryPlan": False,
        "hasBCPTesting": False,
        "rtoRequirement": None,
        "rpoRequirement": None,
    },
    "soc2Type": "type1",
    "trustServiceCriteria": ["security"],
    "wantsSprintPlan": True,
}

# Every capability in place, Type 2 with Availability.
STRONG_OVERRIDES: dict = {
    "companyInfo": {"companyName": "Globex", "employeeCount": "51-200"},
    "technicalInfrastructure": {
        "cloudProviders": ["AWS"],
        "usesContainers": True,
        "hasCI_CD": True,
        "sourceCodeManagement": "GitHub",
        "hasMonitoring": True,
    },
    "dataHandling": {
        "hasDataClassification": True,
        "hasEncryptionAtRest": True,
        "hasEncryptionInTransit": True,
    },
    "securityPosture": {
        "hasSecurityTeam": True,
        "securityTeamSize": "2-5 people",
        "hasSecurityPolicies": True,
        "hasIncidentResponsePlan": True,
        "hasVulnerabilityManagement": True,
        "hasPenetrationTesting": True,
        "hasSecurityAwareness": True,
    },
    "accessControl": {
        "hasSSO": True,
        "ssoProvider": "Okta",
        "hasMFA": True,
        "mfaCoverage": "All users",
        "hasRBAC": True,
        "hasPrivilegedAccessManagement": True,
        "hasAccessReviews": True,
        "accessReviewFrequency": "Quarterly",
    },
    "vendorManagement": {
        "criticalVendorCount": "16-30",
        "hasVendorAssessment": True,
        "hasVendorInventory": True,
        "hasDataProcessingAgreements": True,
    },
    "businessContinuity": {
        "hasBackupStrategy": True,
        "backupFrequency": "Daily",
        "hasDisasterRecoveryPlan": True,
        "hasBCPTesting": True,
        "rtoRequirement": "1-4 hours",
        "rpoRequirement": "Less than 1 hour",
    },
    "soc2Type": "type2",
    "trustServiceCriteria": ["security", "availability"],
}


@pytest.fixture
def make_intake_data() -> Callable[..., dict]:
    """Build an intake dict from the weak baseline plus nested overrides."""

    def _make(overrides: Optional[dict] = None) -> dict:
        data = copy.deepcopy(WEAK_INTAKE)
        if overrides:
            data = deep_merge(data, copy.deepcopy(overrides))
        return data

    return _make


@pytest.fixture
def make_intake(make_intake_data: Callable[..., dict]) -> Callable[..., IntakeForm]:
    """Build a validated IntakeForm from nested overrides."""

    def _make(overrides: Optional[dict] = None) -> IntakeForm:
        return IntakeForm.model_validate(make_intake_data(overrides))

    return _make


@pytest.fixture
def weak_intake(make_intake: Callable[..., IntakeForm]) -> IntakeForm:
    return make_intake()


@pytest.fixture
def strong_intake(make_intake: Callable[..., IntakeForm]) -> IntakeForm:
    return make_intake(STRONG_OVERRIDES)


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create an empty project directory."""
    project = tmp_path / "test-project"
    project.mkdir()
    return project


@pytest.fixture
def initialized_project(tmp_project: Path) -> Path:
    """Create a project with .soc2-roadmap initialized."""
    state = tmp_project / ".soc2-roadmap"
    state.mkdir()
    (state / "roadmaps").mkdir()

    config = state / "config.yaml"
    config.write_text(
        'project:\n  name: "test-project"\n\noutput:\n  format: markdown\n',
        encoding="utf-8",
    )
    return tmp_project
