# criteria/evaluate.py

import logging
from collections.abc import Sequence

from ..distribution import CidSharing, ProviderDistribution, ReplicationDistribution
from ..retrievability import RetrievabilitySummary
from .models import Category, Criteria, Evaluation, Finding, FindingKind, Severity

logger = logging.getLogger(__name__)

# success rates below this count as low
LOW_RETRIEVABILITY_RATE = 0.75

DEFAULT_RETRIEVABILITY_THRESHOLD = 0.2


def select_tier(
    tiers: Sequence[Criteria],
    number_of_allocations: int,
) -> tuple[Criteria, bool]:
    """
    Select the criteria tier for a client's allocation count.

    The n-th allocation uses the n-th tier; clients with more allocations
    than configured tiers stay on the last tier.

    Args:
        tiers: Configured tiers, strictest last.
        number_of_allocations: Allocations granted so far (at least 1).

    Returns:
        tuple[Criteria, bool]: The tier and whether the run is an early
            allocation (fewer allocations than tiers).

    Raises:
        ValueError: If no tiers are configured or the count is below 1.
    """
    if not tiers:
        raise ValueError("At least one criteria tier is required")
    if number_of_allocations < 1:
        raise ValueError("Tier selection needs at least one allocation")

    index = min(len(tiers), number_of_allocations) - 1
    return tiers[index], len(tiers) > number_of_allocations


def evaluate(
    tier: Criteria,
    providers: Sequence[ProviderDistribution],
    replicas: Sequence[ReplicationDistribution],
    retrievability: RetrievabilitySummary,
    sharing: Sequence[CidSharing] = (),
    *,
    retrievability_threshold: float = DEFAULT_RETRIEVABILITY_THRESHOLD,
) -> tuple[Finding, ...]:
    """
    Evaluate the aggregated distributions against a tier.

    Every rule runs independently. Findings are ordered provider rules,
    single region, low replica, retrievability, CID sharing, then the health
    findings of the provider and replication categories.

    Returns:
        tuple[Finding, ...]: Ordered findings.
    """
    provider_findings = (
        provider_rule_findings(tier, providers) + single_region_findings(providers)
    )
    replica_findings = low_replica_findings(tier, replicas)

    findings = (
        provider_findings
        + replica_findings
        + retrievability_findings(retrievability, retrievability_threshold)
        + cid_sharing_findings(sharing)
    )

    if not provider_findings:
        findings += (_healthy(Category.PROVIDER),)
    if not replica_findings:
        findings += (_healthy(Category.REPLICATION),)

    return findings


def build_evaluation(
    tiers: Sequence[Criteria],
    number_of_allocations: int,
    providers: Sequence[ProviderDistribution],
    replicas: Sequence[ReplicationDistribution],
    retrievability: RetrievabilitySummary,
    sharing: Sequence[CidSharing] = (),
    *,
    retrievability_threshold: float = DEFAULT_RETRIEVABILITY_THRESHOLD,
) -> Evaluation:
    """
    Select the tier for the allocation count and evaluate against it.

    Returns:
        Evaluation: The tier, early-allocation flag and findings.
    """
    tier, early_allocation = select_tier(tiers, number_of_allocations)
    findings = evaluate(
        tier,
        providers,
        replicas,
        retrievability,
        sharing,
        retrievability_threshold=retrievability_threshold,
    )
    return Evaluation(
        criteria=tier,
        number_of_allocations=number_of_allocations,
        early_allocation=early_allocation,
        findings=findings,
    )


def provider_rule_findings(
    tier: Criteria,
    providers: Sequence[ProviderDistribution],
) -> tuple[Finding, ...]:
    """
    Concentration, duplication and missing-location checks, provider by
    provider.

    Returns:
        tuple[Finding, ...]: Warnings in provider order.
    """
    findings: list[Finding] = []
    for provider in providers:
        if provider.percentage > tier.max_provider_deal_percentage:
            logger.info(
                "Provider %s exceeds max percentage: %.4f",
                provider.provider,
                provider.percentage,
            )
            findings.append(
                _warning(
                    FindingKind.PROVIDER_OVER_CONCENTRATION,
                    Category.PROVIDER,
                    provider.provider,
                    provider.percentage,
                ),
            )
        if provider.duplication_percentage > tier.max_duplication_percentage:
            logger.info(
                "Provider %s exceeds max duplication percentage: %.4f",
                provider.provider,
                provider.duplication_percentage,
            )
            findings.append(
                _warning(
                    FindingKind.PROVIDER_OVER_DUPLICATION,
                    Category.PROVIDER,
                    provider.provider,
                    provider.duplication_percentage,
                ),
            )
        if not provider.country:
            logger.info("Provider %s does not have IP location", provider.provider)
            findings.append(
                _warning(
                    FindingKind.PROVIDER_NO_LOCATION,
                    Category.PROVIDER,
                    provider.provider,
                ),
            )
    return tuple(findings)


def single_region_findings(
    providers: Sequence[ProviderDistribution],
) -> tuple[Finding, ...]:
    """
    Warn when every provider renders to the same location.

    Returns:
        tuple[Finding, ...]: One SINGLE_REGION warning, or nothing.
    """
    regions = {provider.rendered_location for provider in providers}
    if len(regions) > 1:
        return ()

    logger.info("Client has data stored in only one region")
    return (
        _warning(FindingKind.SINGLE_REGION, Category.PROVIDER, value=len(regions)),
    )


def low_replica_findings(
    tier: Criteria,
    replicas: Sequence[ReplicationDistribution],
) -> tuple[Finding, ...]:
    """
    Warn when too much data is stored with too few providers.

    Returns:
        tuple[Finding, ...]: One LOW_REPLICA_OVERAGE warning, or nothing.
    """
    low_replica_percentage = sum(
        replica.percentage
        for replica in replicas
        if replica.num_of_replicas <= tier.low_replica_threshold
    )
    if low_replica_percentage <= tier.max_percentage_for_low_replica:
        return ()

    logger.info(
        "Low replica percentage exceeds max percentage: %.4f",
        low_replica_percentage,
    )
    return (
        _warning(
            FindingKind.LOW_REPLICA_OVERAGE,
            Category.REPLICATION,
            value=low_replica_percentage,
        ),
    )


def retrievability_findings(
    retrievability: RetrievabilitySummary,
    threshold: float,
) -> tuple[Finding, ...]:
    """
    Zero-rate, low-rate and weighted-average checks.

    Nothing is reported when no provider has retrieval statistics.

    Returns:
        tuple[Finding, ...]: Up to three warnings.
    """
    entries = retrievability.per_provider
    if not entries:
        return ()

    findings: list[Finding] = []

    zero_fraction = sum(1 for e in entries if e.success_rate == 0) / len(entries)
    if zero_fraction > 0:
        findings.append(
            _warning(
                FindingKind.RETRIEVABILITY_ZERO,
                Category.RETRIEVABILITY,
                value=zero_fraction,
            ),
        )

    low_fraction = sum(
        1 for e in entries if e.success_rate < LOW_RETRIEVABILITY_RATE
    ) / len(entries)
    if low_fraction > 0:
        findings.append(
            _warning(
                FindingKind.RETRIEVABILITY_LOW,
                Category.RETRIEVABILITY,
                value=low_fraction,
            ),
        )

    if retrievability.weighted_average < threshold:
        findings.append(
            _warning(
                FindingKind.RETRIEVABILITY_BELOW_THRESHOLD,
                Category.RETRIEVABILITY,
                value=retrievability.weighted_average,
            ),
        )

    return tuple(findings)


def cid_sharing_findings(sharing: Sequence[CidSharing]) -> tuple[Finding, ...]:
    """
    Warn when any other client shares unique content with the group.

    Returns:
        tuple[Finding, ...]: One CID_SHARING_OBSERVED warning, or nothing.
    """
    if not sharing:
        return ()

    for row in sharing:
        logger.info("CID is shared with another client %s", row.other_client)

    return (
        _warning(
            FindingKind.CID_SHARING_OBSERVED,
            Category.CID_SHARING,
            value=len(sharing),
        ),
    )


def _warning(
    kind: FindingKind,
    category: Category,
    subject: str | None = None,
    value: float = 0.0,
) -> Finding:
    return Finding(kind, Severity.WARNING, category, subject, float(value))


def _healthy(category: Category) -> Finding:
    return Finding(FindingKind.HEALTHY, Severity.OK, category)
