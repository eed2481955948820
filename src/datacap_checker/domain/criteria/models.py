# criteria/models.py

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Criteria:
    """
    Thresholds applied to one allocation tier.
    """

    # Share of the client total a single provider may hold
    max_provider_deal_percentage: float = 0.25
    # Share of a provider's deals that may be duplicate data
    max_duplication_percentage: float = 0.20
    # Data stored with this many providers or fewer counts as low replica
    low_replica_threshold: int = 3
    # Share of deals allowed to be low replica
    max_percentage_for_low_replica: float = 0.25


class FindingKind(Enum):
    """
    Closed set of outcomes the evaluator can report.
    """

    PROVIDER_OVER_CONCENTRATION = "provider_over_concentration"
    PROVIDER_OVER_DUPLICATION = "provider_over_duplication"
    PROVIDER_NO_LOCATION = "provider_no_location"
    SINGLE_REGION = "single_region"
    LOW_REPLICA_OVERAGE = "low_replica_overage"
    RETRIEVABILITY_ZERO = "retrievability_zero"
    RETRIEVABILITY_LOW = "retrievability_low"
    RETRIEVABILITY_BELOW_THRESHOLD = "retrievability_below_threshold"
    CID_SHARING_OBSERVED = "cid_sharing_observed"
    HEALTHY = "healthy"


class Severity(Enum):
    WARNING = "warning"
    OK = "ok"


class Category(Enum):
    """
    Report section a finding belongs to.
    """

    PROVIDER = "provider"
    REPLICATION = "replication"
    RETRIEVABILITY = "retrievability"
    CID_SHARING = "cid_sharing"


@dataclass(frozen=True)
class Finding:
    """
    A single evaluated outcome.

    ``value`` is the number quoted in the rendered message: a fraction for
    percentage rules, the weighted average for the threshold rule, and the
    row count for CID sharing.
    """

    kind: FindingKind
    severity: Severity
    category: Category
    subject: str | None = None
    value: float = 0.0


@dataclass(frozen=True)
class Evaluation:
    """
    Findings for one run together with the tier they were evaluated against.
    """

    criteria: Criteria
    number_of_allocations: int
    early_allocation: bool
    findings: tuple[Finding, ...]

    def by_kind(self, kind: FindingKind) -> tuple[Finding, ...]:
        return tuple(finding for finding in self.findings if finding.kind is kind)

    def by_category(self, category: Category) -> tuple[Finding, ...]:
        return tuple(
            finding for finding in self.findings if finding.category is category
        )

    def is_healthy(self, category: Category) -> bool:
        return any(
            finding.kind is FindingKind.HEALTHY
            for finding in self.by_category(category)
        )
