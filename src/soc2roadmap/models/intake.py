"""Intake questionnaire data models.

Every option set the questionnaire offers is a closed enumeration. Free-form
tool names are mapped onto these enums, with an explicit "other" or "none"
variant, before the engine sees them.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReportType(str, Enum):
    TYPE1 = "type1"
    TYPE2 = "type2"


class TrustCriterion(str, Enum):
    SECURITY = "security"
    AVAILABILITY = "availability"
    PROCESSING_INTEGRITY = "processing_integrity"
    CONFIDENTIALITY = "confidentiality"
    PRIVACY = "privacy"


class Industry(str, Enum):
    SOFTWARE = "Software/SaaS"
    FINANCIAL_SERVICES = "Financial Services"
    HEALTHCARE = "Healthcare"
    ECOMMERCE = "E-commerce"
    EDUCATION = "Education"
    MANUFACTURING = "Manufacturing"
    PROFESSIONAL_SERVICES = "Professional Services"
    MEDIA = "Media/Entertainment"
    OTHER = "Other"


class EmployeeCount(str, Enum):
    XS = "1-10"
    S = "11-50"
    M = "51-200"
    L = "201-500"
    XL = "500+"


class CloudProvider(str, Enum):
    AWS = "AWS"
    GCP = "Google Cloud (GCP)"
    AZURE = "Microsoft Azure"
    DIGITALOCEAN = "DigitalOcean"
    HEROKU = "Heroku"
    VERCEL = "Vercel"
    OTHER = "Other"
    NONE = "None/On-premise only"


class HostingType(str, Enum):
    CLOUD = "Fully cloud-hosted"
    HYBRID = "Hybrid (cloud + on-premise)"
    ON_PREMISE = "Fully on-premise"
    MANAGED = "Managed hosting provider"


class DatabaseType(str, Enum):
    POSTGRESQL = "PostgreSQL"
    MYSQL = "MySQL"
    MONGODB = "MongoDB"
    REDIS = "Redis"
    ELASTICSEARCH = "Elasticsearch"
    DYNAMODB = "DynamoDB"
    SQL_SERVER = "SQL Server"
    OTHER = "Other"


class SourceCodeManagement(str, Enum):
    GITHUB = "GitHub"
    GITLAB = "GitLab"
    BITBUCKET = "Bitbucket"
    AZURE_DEVOPS = "Azure DevOps"
    OTHER = "Other"
    UNSPECIFIED = "Unspecified"


class SsoProvider(str, Enum):
    OKTA = "Okta"
    AZURE_AD = "Azure AD"
    GOOGLE_WORKSPACE = "Google Workspace"
    ONELOGIN = "OneLogin"
    AUTH0 = "Auth0"
    OTHER = "Other"
    NONE = "None"


class MfaCoverage(str, Enum):
    ALL_USERS = "All users"
    ADMINS_ONLY = "Admin/privileged users only"
    SOME_USERS = "Some users"
    NOT_IMPLEMENTED = "Not implemented"


class SecurityTeamSize(str, Enum):
    NONE = "No dedicated security personnel"
    PART_TIME = "1 person (part-time)"
    FULL_TIME = "1 person (full-time)"
    SMALL_TEAM = "2-5 people"
    LARGE_TEAM = "5+ people"


class DataResidency(str, Enum):
    US = "United States"
    EU = "European Union (GDPR)"
    CANADA = "Canada"
    AUSTRALIA = "Australia"
    UK = "United Kingdom"
    NONE = "No specific requirements"


class ExistingCompliance(str, Enum):
    ISO_27001 = "ISO 27001"
    HIPAA = "HIPAA"
    PCI_DSS = "PCI DSS"
    GDPR = "GDPR"
    CCPA = "CCPA"
    FEDRAMP = "FedRAMP"
    NONE = "None"


class BackupFrequency(str, Enum):
    CONTINUOUS = "Real-time/Continuous"
    HOURLY = "Hourly"
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    NONE = "No regular backups"


class AccessReviewFrequency(str, Enum):
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    SEMI_ANNUALLY = "Semi-annually"
    ANNUALLY = "Annually"
    AD_HOC = "Never/Ad-hoc"


class RecoveryObjective(str, Enum):
    UNDER_1H = "Less than 1 hour"
    H1_4 = "1-4 hours"
    H4_24 = "4-24 hours"
    D1_3 = "1-3 days"
    OVER_3D = "3+ days"
    NOT_DEFINED = "Not defined"


class VendorCount(str, Enum):
    V0_5 = "0-5"
    V6_15 = "6-15"
    V16_30 = "16-30"
    V31_50 = "31-50"
    V50_PLUS = "50+"


class IntakeModel(BaseModel):
    """Base for intake groups: immutable, accepts snake_case or camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class CompanyInfo(IntakeModel):
    company_name: str = Field(min_length=1)
    industry: Industry
    employee_count: EmployeeCount
    year_founded: str = ""
    website: str = ""


class TechnicalInfrastructure(IntakeModel):
    cloud_providers: tuple[CloudProvider, ...] = ()
    hosting_type: HostingType
    has_production_database: bool
    database_types: tuple[DatabaseType, ...] = ()
    uses_containers: bool
    has_ci_cd: bool = Field(alias="hasCI_CD")
    source_code_management: SourceCodeManagement = SourceCodeManagement.UNSPECIFIED
    has_monitoring: bool


class DataHandling(IntakeModel):
    handles_customer_pii: bool = Field(alias="handlesCustomerPII")
    handles_phi: bool = Field(alias="handlesPHI")
    handles_payment_data: bool
    data_residency_requirements: tuple[DataResidency, ...] = ()
    has_data_classification: bool
    has_encryption_at_rest: bool
    has_encryption_in_transit: bool


class SecurityPosture(IntakeModel):
    has_security_team: bool
    security_team_size: SecurityTeamSize = SecurityTeamSize.NONE
    has_security_policies: bool
    has_incident_response_plan: bool
    has_vulnerability_management: bool
    has_penetration_testing: bool
    has_security_awareness: bool
    current_compliances: tuple[ExistingCompliance, ...] = ()


class AccessControl(IntakeModel):
    has_sso: bool = Field(alias="hasSSO")
    sso_provider: SsoProvider = SsoProvider.NONE
    has_mfa: bool = Field(alias="hasMFA")
    mfa_coverage: MfaCoverage = MfaCoverage.NOT_IMPLEMENTED
    has_rbac: bool = Field(alias="hasRBAC")
    has_privileged_access_management: bool
    has_access_reviews: bool
    access_review_frequency: AccessReviewFrequency = AccessReviewFrequency.AD_HOC


class VendorManagement(IntakeModel):
    critical_vendor_count: VendorCount
    has_vendor_assessment: bool
    has_vendor_inventory: bool
    has_data_processing_agreements: bool


class BusinessContinuity(IntakeModel):
    has_backup_strategy: bool
    backup_frequency: Optional[BackupFrequency] = None
    has_disaster_recovery_plan: bool
    has_bcp_testing: bool = Field(alias="hasBCPTesting")
    rto_requirement: Optional[RecoveryObjective] = None
    rpo_requirement: Optional[RecoveryObjective] = None


class IntakeForm(IntakeModel):
    """A fully populated readiness questionnaire."""

    company_info: CompanyInfo
    technical_infrastructure: TechnicalInfrastructure
    data_handling: DataHandling
    security_posture: SecurityPosture
    access_control: AccessControl
    vendor_management: VendorManagement
    business_continuity: BusinessContinuity
    target_completion_date: Optional[date] = None
    soc2_type: ReportType
    trust_service_criteria: tuple[TrustCriterion, ...] = Field(min_length=1)
    wants_sprint_plan: bool = True
