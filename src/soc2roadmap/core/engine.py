"""Roadmap engine entry point.

Runs the scoring, gap, policy, evidence, risk, sprint and scope steps in a
fixed order. The engine is pure: it reads one intake and the built-in
catalogs and returns a fresh roadmap. Callers own validation, persistence and
task-completion state.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from ..models.intake import IntakeForm
from ..models.roadmap import ComplianceRoadmap
from .context import AssessmentContext
from .evidence import build_evidence
from .gaps import build_gaps
from .policies import build_policies, missing_required_policies
from .risks import build_risks, link_risks_to_sprints
from .scope import build_scope
from .scoring import calc_maturity_score, calc_timeline, score_to_risk_level
from .sprints import build_sprints


def generate_roadmap(intake: IntakeForm, now: Optional[datetime] = None) -> ComplianceRoadmap:
    """Build the complete readiness roadmap for one intake.

    Args:
        intake: A validated questionnaire.
        now: Generation timestamp; defaults to the current UTC time. Pass a
            fixed value to get byte-identical output for identical input.
    """
    ctx = AssessmentContext.from_intake(intake)

    maturity_score = calc_maturity_score(intake)
    risk_level = score_to_risk_level(maturity_score)
    timeline = calc_timeline(intake, maturity_score)

    gaps = build_gaps(ctx)
    policies = build_policies(ctx)
    evidence = build_evidence(ctx)
    sprints = build_sprints(ctx, missing_required_policies(policies), timeline)
    risks = link_risks_to_sprints(build_risks(ctx), sprints)
    scope = build_scope(ctx)

    return ComplianceRoadmap(
        maturity_score=maturity_score,
        risk_level=risk_level,
        recommended_timeline=timeline,
        sprints=tuple(sprints),
        gaps=tuple(gaps),
        policies=tuple(policies),
        evidence=tuple(evidence),
        risks=tuple(risks),
        scope=scope,
        generated_at=now or datetime.now(timezone.utc),
    )
