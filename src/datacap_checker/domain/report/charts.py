# report/charts.py

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from ..distribution import ProviderDistribution, ReplicationDistribution
from .formatters import format_bytes

LOW_REPLICA_COLOUR = "rgba(255, 99, 132)"
HEALTHY_REPLICA_COLOUR = "rgba(75, 192, 192)"


@dataclass(frozen=True)
class GeoMapEntry:
    """
    One provider plotted on the provider distribution map.
    """

    longitude: float
    latitude: float
    value: float
    label: str


@dataclass(frozen=True)
class BarChartEntry:
    """
    One bar of the replication chart.
    """

    x_value: int
    y_value: float
    bar_label: str
    label: str
    colour: str


class ChartRenderer(Protocol):
    """
    Turns chart entries into PNG bytes.
    """

    def provider_map(self, entries: Sequence[GeoMapEntry]) -> bytes: ...

    def replication_chart(self, entries: Sequence[BarChartEntry]) -> bytes: ...


def geo_map_entries(
    providers: Sequence[ProviderDistribution],
) -> tuple[GeoMapEntry, ...]:
    """
    Map points for providers with known coordinates, sized by deal share.
    """
    return tuple(
        GeoMapEntry(
            longitude=provider.location.longitude,
            latitude=provider.location.latitude,
            value=provider.percentage,
            label=provider.provider,
        )
        for provider in providers
        if provider.location is not None
        and provider.location.longitude is not None
        and provider.location.latitude is not None
    )


def replication_bar_entries(
    replicas: Sequence[ReplicationDistribution],
    low_replica_threshold: int,
) -> tuple[BarChartEntry, ...]:
    """
    Unique data per replica count; bars at or below the threshold are
    coloured as low replica.
    """
    return tuple(
        BarChartEntry(
            x_value=replica.num_of_replicas,
            y_value=replica.unique_data_size,
            bar_label=format_bytes(replica.unique_data_size),
            label=str(replica.num_of_replicas),
            colour=(
                LOW_REPLICA_COLOUR
                if replica.num_of_replicas <= low_replica_threshold
                else HEALTHY_REPLICA_COLOUR
            ),
        )
        for replica in replicas
    )
