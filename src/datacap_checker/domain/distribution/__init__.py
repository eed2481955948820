# distribution/__init__.py

from .aggregate import (
    DistributionAggregator,
    current_epoch,
    normalise_provider_rows,
    normalise_replica_rows,
)
from .location import LocationResolver
from .models import (
    CidSharing,
    DistributionBundle,
    Location,
    ProviderDistribution,
    ReplicationDistribution,
)

__all__ = [
    "CidSharing",
    "DistributionAggregator",
    "DistributionBundle",
    "Location",
    "LocationResolver",
    "ProviderDistribution",
    "ReplicationDistribution",
    "current_epoch",
    "normalise_provider_rows",
    "normalise_replica_rows",
]
