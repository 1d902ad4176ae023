"""Assessment context and the generic rule fold shared by every catalog.

Each catalog (gaps, policies, evidence, risks, sprint tasks) is an ordered
tuple of frozen rule records. A rule has a ``when`` predicate and a
``build`` method; ``apply_rules`` keeps the catalog order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Protocol, TypeVar, Union

from ..models.intake import CloudProvider, IntakeForm, ReportType, SsoProvider, TrustCriterion
from .templates import build_template_vars, named_clouds, render

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

Predicate = Callable[["AssessmentContext"], bool]
Text = Union[str, Callable[["AssessmentContext"], str]]


def effective_criteria(intake: IntakeForm) -> tuple[TrustCriterion, ...]:
    """Selected criteria with Security always present (and listed first)."""
    criteria: list[TrustCriterion] = [TrustCriterion.SECURITY]
    for criterion in intake.trust_service_criteria:
        if criterion not in criteria:
            criteria.append(criterion)
    return tuple(criteria)


@dataclass(frozen=True)
class AssessmentContext:
    """Read-only view of one intake plus the facts rules keep asking about."""

    intake: IntakeForm
    criteria: tuple[TrustCriterion, ...]
    variables: Mapping[str, str]

    @classmethod
    def from_intake(cls, intake: IntakeForm) -> "AssessmentContext":
        return cls(
            intake=intake,
            criteria=effective_criteria(intake),
            variables=MappingProxyType(build_template_vars(intake)),
        )

    @property
    def is_type2(self) -> bool:
        return self.intake.soc2_type == ReportType.TYPE2

    @property
    def has_availability(self) -> bool:
        return TrustCriterion.AVAILABILITY in self.criteria

    @property
    def has_privacy(self) -> bool:
        return TrustCriterion.PRIVACY in self.criteria

    @property
    def clouds(self) -> list[CloudProvider]:
        return named_clouds(self.intake)

    def uses_cloud(self, provider: CloudProvider) -> bool:
        return provider in self.intake.technical_infrastructure.cloud_providers

    @property
    def has_named_sso(self) -> bool:
        return self.intake.access_control.sso_provider not in (SsoProvider.NONE, SsoProvider.OTHER)

    @property
    def handles_sensitive_data(self) -> bool:
        dh = self.intake.data_handling
        return dh.handles_customer_pii or dh.handles_phi or dh.handles_payment_data

    def resolve(self, value):
        """Evaluate a value that may be a callable of the context."""
        return value(self) if callable(value) else value

    def text(self, value: Text) -> str:
        """Resolve and render a template against this context."""
        return render(self.resolve(value), self.variables)


class Rule(Protocol[T_co]):
    def when(self, ctx: AssessmentContext) -> bool: ...

    def build(self, ctx: AssessmentContext) -> T_co: ...


def always(ctx: AssessmentContext) -> bool:
    return True


def apply_rules(rules: Iterable[Rule[T]], ctx: AssessmentContext) -> list[T]:
    """Evaluate a catalog in order, building an item for every matching rule."""
    return [rule.build(ctx) for rule in rules if rule.when(ctx)]
