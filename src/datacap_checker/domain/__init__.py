# domain/__init__.py

from .application import ApplicationInfo, ApplicationInfoResolver
from .check import (
    CheckSettings,
    ClientChecker,
    ResolutionNotFound,
    check_client,
    default_settings,
    get_all_client_generated_reports,
    get_latest_client_generated_report,
)
from .criteria import Criteria, Evaluation, Finding, FindingKind, evaluate, select_tier
from .distribution import DistributionAggregator
from .retrievability import RetrievabilityAggregator

__all__ = [
    "ApplicationInfo",
    "ApplicationInfoResolver",
    "CheckSettings",
    "ClientChecker",
    "Criteria",
    "DistributionAggregator",
    "Evaluation",
    "Finding",
    "FindingKind",
    "ResolutionNotFound",
    "RetrievabilityAggregator",
    "check_client",
    "default_settings",
    "evaluate",
    "get_all_client_generated_reports",
    "get_latest_client_generated_report",
    "select_tier",
]
