# retrievability/models.py

from dataclasses import dataclass


@dataclass(frozen=True)
class Retrievability:
    """
    Retrieval success rate of one of the client's providers, weighted by the
    client's deal size with that provider.
    """

    provider_id: str
    success_rate: float
    total_deal_size: float


@dataclass(frozen=True)
class RetrievabilitySummary:
    """
    Joined per-provider retrievability and its deal-size-weighted average.
    """

    per_provider: tuple[Retrievability, ...] = ()
    weighted_average: float = 0.0

    def rate_for(self, provider_id: str) -> float | None:
        """
        Success rate of a provider, or None when it has no statistic.
        """
        for entry in self.per_provider:
            if entry.provider_id == provider_id:
                return entry.success_rate
        return None
