# retrievability/__init__.py

from .aggregate import (
    RetrievabilityAggregator,
    join_retrievability,
    retrieval_window,
    weighted_average,
)
from .models import Retrievability, RetrievabilitySummary

__all__ = [
    "Retrievability",
    "RetrievabilityAggregator",
    "RetrievabilitySummary",
    "join_retrievability",
    "retrieval_window",
    "weighted_average",
]
