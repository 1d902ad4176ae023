"""Vendor inventory data models."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field

from .roadmap import RiskLevel, RoadmapModel


class VendorCategory(str, Enum):
    INFRASTRUCTURE = "Infrastructure"
    PAYMENT = "Payment"
    IDENTITY = "Identity"
    COMMUNICATION = "Communication"
    ANALYTICS = "Analytics"
    PROJECT_MANAGEMENT = "Project Management"
    SECURITY = "Security"
    HR = "HR"
    BUSINESS_OPS = "Business Ops"


class AssessmentStatus(str, Enum):
    ASSESSED = "assessed"
    NEEDS_REVIEW = "needs-review"
    NOT_STARTED = "not-started"


class AssessmentRecord(RoadmapModel):
    reviewed_on: date = Field(alias="date")
    status: AssessmentStatus
    reviewer: str
    notes: str = ""


class Vendor(RoadmapModel):
    """One third party in the vendor inventory.

    Unknown answers (no DPA on file yet, SOC 2 report not checked) are None.
    """

    id: str
    name: str
    website: str
    category: VendorCategory
    risk_tier: RiskLevel
    data_access: tuple[str, ...] = ()
    has_production_access: bool
    assessment_status: AssessmentStatus = AssessmentStatus.NOT_STARTED
    last_reviewed: Optional[date] = None
    next_review_due: Optional[date] = None
    has_soc2_report: Optional[bool] = None
    soc2_report_url: Optional[str] = None
    has_dpa: Optional[bool] = Field(default=None, alias="hasDPA")
    has_baa: Optional[bool] = Field(default=None, alias="hasBAA")
    notes: str = ""
    is_auto_detected: bool = False
    confirmed_by_user: bool = False
    assessment_history: tuple[AssessmentRecord, ...] = ()
