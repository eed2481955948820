# distribution/models.py

from dataclasses import dataclass

from ..application import ApplicationInfo


@dataclass(frozen=True)
class Location:
    """
    Geographic location and hosting organisation of a provider.
    """

    city: str | None = None
    region: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    org_name: str = "Unknown"

    @property
    def rendered(self) -> str:
        """
        "city, region, country" with empty parts dropped, or "Unknown".
        """
        parts = [part for part in (self.city, self.region, self.country) if part]
        return ", ".join(parts) if parts else "Unknown"


@dataclass(frozen=True)
class ProviderDistribution:
    """
    One storage provider's share of the client group's deals.
    """

    provider: str
    total_deal_size: float
    unique_data_size: float
    duplication_percentage: float
    percentage: float
    location: Location | None = None
    is_new: bool = False

    @property
    def country(self) -> str | None:
        return self.location.country if self.location else None

    @property
    def org_name(self) -> str:
        return self.location.org_name if self.location else "Unknown"

    @property
    def rendered_location(self) -> str:
        return self.location.rendered if self.location else "Unknown"


@dataclass(frozen=True)
class ReplicationDistribution:
    """
    Deal totals for data stored with a given number of providers.
    """

    num_of_replicas: int
    total_deal_size: float
    unique_data_size: float
    percentage: float


@dataclass(frozen=True)
class CidSharing:
    """
    Another client whose deals resolve to the same unique content.

    ``application`` is None when the other client could not be resolved;
    ``approvers`` is None when its approval thread is unknown.
    """

    other_client: str
    total_deal_size: float
    unique_cid_count: int
    application: ApplicationInfo | None = None
    approvers: tuple[tuple[str, int], ...] | None = None


@dataclass(frozen=True)
class DistributionBundle:
    """
    The three distribution datasets of a client group.
    """

    providers: tuple[ProviderDistribution, ...]
    replicas: tuple[ReplicationDistribution, ...]
    sharing: tuple[CidSharing, ...]
