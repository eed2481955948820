# criteria/__init__.py

from .evaluate import (
    DEFAULT_RETRIEVABILITY_THRESHOLD,
    build_evaluation,
    cid_sharing_findings,
    evaluate,
    low_replica_findings,
    provider_rule_findings,
    retrievability_findings,
    select_tier,
    single_region_findings,
)
from .models import Category, Criteria, Evaluation, Finding, FindingKind, Severity

__all__ = [
    "DEFAULT_RETRIEVABILITY_THRESHOLD",
    "Category",
    "Criteria",
    "Evaluation",
    "Finding",
    "FindingKind",
    "Severity",
    "build_evaluation",
    "cid_sharing_findings",
    "evaluate",
    "low_replica_findings",
    "provider_rule_findings",
    "retrievability_findings",
    "select_tier",
    "single_region_findings",
]
