# retrievability/aggregate.py

import datetime
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence

from datacap_checker.adapters._utils import RetryExhaustedError
from datacap_checker.adapters.spark import fetch_success_rates
from datacap_checker.schemas import SuccessRateFeedData

from ..distribution import ProviderDistribution
from .models import Retrievability, RetrievabilitySummary

logger = logging.getLogger(__name__)

SuccessRateLookup = Callable[
    [datetime.date, datetime.date],
    Awaitable[list[SuccessRateFeedData]],
]


class RetrievabilityAggregator:
    """
    Score the client's providers by network retrieval success.

    Retrievability is advisory: any upstream failure yields an empty summary.
    """

    __slots__ = ("_lookup", "_today")

    def __init__(
        self,
        *,
        lookup: SuccessRateLookup | None = None,
        today: Callable[[], datetime.date] | None = None,
    ) -> None:
        self._lookup = lookup or fetch_success_rates
        self._today = today or (lambda: datetime.datetime.now(datetime.UTC).date())

    async def aggregate(
        self,
        providers: Sequence[ProviderDistribution],
        window_days: int,
    ) -> RetrievabilitySummary:
        """
        Fetch statistics for the trailing window and join them to providers.

        Returns:
            RetrievabilitySummary: Joined rows and weighted average.
        """
        rates = await self.fetch_success_rates(window_days)
        return join_retrievability(providers, rates)

    async def fetch_success_rates(self, window_days: int) -> list[SuccessRateFeedData]:
        """
        Fetch network-wide success rates for the trailing ``window_days``.

        Returns:
            list[SuccessRateFeedData]: Statistics, or an empty list on failure.
        """
        date_from, date_to = retrieval_window(self._today(), window_days)
        try:
            return await self._lookup(date_from, date_to)
        except (RetryExhaustedError, ValueError) as error:
            logger.error("Failed to fetch retrievability data: %s", error, exc_info=True)
            return []


def retrieval_window(
    today: datetime.date,
    window_days: int,
) -> tuple[datetime.date, datetime.date]:
    """
    Date range ending today and starting ``window_days`` earlier.

    Returns:
        tuple[datetime.date, datetime.date]: (from, to), both inclusive.
    """
    return today - datetime.timedelta(days=window_days), today


def join_retrievability(
    providers: Iterable[ProviderDistribution],
    rates: Iterable[SuccessRateFeedData],
) -> RetrievabilitySummary:
    """
    Inner-join success rates onto providers by provider id.

    Providers without a statistic are left out.

    Returns:
        RetrievabilitySummary: Joined rows in provider order and their
            weighted average; empty with a zero average when nothing joins
            or the joined deal sizes sum to zero.
    """
    by_miner = {}
    for rate in rates:
        by_miner.setdefault(rate.miner_id, rate.success_rate)

    joined = tuple(
        Retrievability(
            provider_id=provider.provider,
            success_rate=by_miner[provider.provider],
            total_deal_size=provider.total_deal_size,
        )
        for provider in providers
        if provider.provider in by_miner
    )
    if not joined or sum(entry.total_deal_size for entry in joined) == 0:
        return RetrievabilitySummary()

    return RetrievabilitySummary(
        per_provider=joined,
        weighted_average=weighted_average(joined),
    )


def weighted_average(entries: Iterable[Retrievability]) -> float:
    """
    Deal-size-weighted mean success rate.

    Returns:
        float: Σ(rate × size) / Σ(size), or 0 when either sum is zero.
    """
    total_size = 0.0
    weighted_sum = 0.0
    for entry in entries:
        total_size += entry.total_deal_size
        weighted_sum += entry.success_rate * entry.total_deal_size

    if weighted_sum == 0 or total_size == 0:
        return 0.0
    return weighted_sum / total_size
