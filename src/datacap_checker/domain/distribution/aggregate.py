# distribution/aggregate.py

import asyncio
import logging
import sqlite3
import time
from collections.abc import Awaitable, Callable, Iterable, Sequence
from decimal import Decimal
from typing import TypeVar

from datacap_checker.adapters._utils import RetryExhaustedError, retry_async
from datacap_checker.storage import (
    load_cid_sharing_rows,
    load_first_clients,
    load_provider_distribution_rows,
    load_replica_distribution_rows,
)

from .._utils._protocols import TicketSystem
from ..application import ApplicationInfoResolver
from .location import LocationResolver
from .models import (
    CidSharing,
    DistributionBundle,
    Location,
    ProviderDistribution,
    ReplicationDistribution,
)

logger = logging.getLogger(__name__)

# network genesis, seconds since the unix epoch
GENESIS_TIMESTAMP = 1598306400
EPOCH_DURATION_SECONDS = 30

_QUERY_ATTEMPTS = 3

T = TypeVar("T")


def current_epoch(now: float | None = None) -> int:
    """
    Number of whole 30-second epochs elapsed since network genesis.

    Returns:
        int: The chain epoch at ``now`` (defaults to the current time).
    """
    timestamp = time.time() if now is None else now
    return int((timestamp - GENESIS_TIMESTAMP) // EPOCH_DURATION_SECONDS)


class DistributionAggregator:
    """
    Collect and normalise the provider, replication and CID sharing
    distributions of a client group.

    Each dataset is fetched independently with its own retry budget; a dataset
    that cannot be read degrades to empty without affecting the others.
    """

    __slots__ = ("_clock", "_locations", "_resolver", "_tickets")

    def __init__(
        self,
        *,
        resolver: ApplicationInfoResolver,
        tickets: TicketSystem | None = None,
        locations: LocationResolver | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._resolver = resolver
        self._tickets = tickets
        self._locations = locations or LocationResolver()
        self._clock = clock

    async def aggregate(self, client_ids: Sequence[str]) -> DistributionBundle:
        """
        Fetch all three distributions concurrently.

        A dataset that fails for any reason is logged and left empty.

        Returns:
            DistributionBundle: Providers, replicas and sharing rows.
        """
        providers, replicas, sharing = await asyncio.gather(
            _or_empty(self.provider_distribution(client_ids), "provider distribution"),
            _or_empty(
                self.replication_distribution(client_ids),
                "replication distribution",
            ),
            _or_empty(self.cid_sharing(client_ids), "cid sharing"),
        )
        return DistributionBundle(providers=providers, replicas=replicas, sharing=sharing)

    async def provider_distribution(
        self,
        client_ids: Sequence[str],
    ) -> tuple[ProviderDistribution, ...]:
        """
        Storage provider distribution with locations and first-client flags.

        Returns:
            tuple[ProviderDistribution, ...]: Providers ordered by hosting
                organisation, then by total deal size descending. Empty when
                the group has no active deals.
        """
        logger.info("Getting storage provider distribution for %s", list(client_ids))
        rows = await _load_with_retry(
            load_provider_distribution_rows,
            client_ids,
            description="provider distribution query",
        )
        providers = normalise_provider_rows(rows)
        if not providers:
            return ()

        first_clients = await _load_with_retry(
            load_first_clients,
            [provider.provider for provider in providers],
            description="first client query",
            fallback={},
        )

        located: list[ProviderDistribution] = []
        for provider in providers:
            location = await self._locations.resolve(provider.provider)
            located.append(
                _with_location(
                    provider,
                    location,
                    is_new=first_clients.get(provider.provider) in client_ids,
                ),
            )

        return tuple(sorted(located, key=lambda provider: provider.org_name))

    async def replication_distribution(
        self,
        client_ids: Sequence[str],
    ) -> tuple[ReplicationDistribution, ...]:
        """
        Deal totals grouped by replica count.

        Returns:
            tuple[ReplicationDistribution, ...]: Entries ordered by replica
                count.
        """
        logger.info(
            "Getting replication distribution for %s at epoch %d",
            list(client_ids),
            current_epoch(self._clock()),
        )
        rows = await _load_with_retry(
            load_replica_distribution_rows,
            client_ids,
            description="replica distribution query",
        )
        return normalise_replica_rows(rows)

    async def cid_sharing(self, client_ids: Sequence[str]) -> tuple[CidSharing, ...]:
        """
        Other clients sharing unique content with the group, each enriched
        with its application info and approvers when resolvable.

        Returns:
            tuple[CidSharing, ...]: Rows in storage order.
        """
        logger.info("Getting cid sharing for %s", list(client_ids))
        rows = await _load_with_retry(
            load_cid_sharing_rows,
            client_ids,
            description="cid sharing query",
        )
        return tuple(
            [
                await self._enrich_sharing(other_client, total, count)
                for other_client, total, count in rows
            ],
        )

    async def _enrich_sharing(
        self,
        other_client: str,
        total_deal_size: str,
        unique_cid_count: int,
    ) -> CidSharing:
        """
        Attach the other client's application and approvers to a sharing row.

        Returns:
            CidSharing: The enriched row; unresolvable parts are left None.
        """
        try:
            application = await self._resolver.resolve(other_client)
        except Exception as error:
            logger.warning("Could not resolve other client %s: %s", other_client, error)
            application = None

        approvers = None
        if application is not None and self._tickets is not None:
            approvers = await _fetch_approvers(self._tickets, application.issue_reference)

        return CidSharing(
            other_client=other_client,
            total_deal_size=float(Decimal(total_deal_size)),
            unique_cid_count=int(unique_cid_count),
            application=application,
            approvers=approvers,
        )


def normalise_provider_rows(
    rows: Iterable[tuple[str, str, str]],
) -> list[ProviderDistribution]:
    """
    Merge per-client provider rows and compute shares of the group total.

    Sizes are summed as Decimals before conversion to float. When the grand
    total is zero the result is empty.

    Returns:
        list[ProviderDistribution]: One entry per provider, ordered by total
            deal size descending.
    """
    totals: dict[str, list[Decimal]] = {}
    for provider, total_deal_size, unique_data_size in rows:
        sums = totals.setdefault(provider, [Decimal(0), Decimal(0)])
        sums[0] += Decimal(total_deal_size)
        sums[1] += Decimal(unique_data_size)

    grand_total = sum((total for total, _ in totals.values()), Decimal(0))
    if grand_total == 0:
        return []

    providers = [
        ProviderDistribution(
            provider=provider,
            total_deal_size=float(total),
            unique_data_size=float(unique),
            duplication_percentage=float((total - unique) / total) if total else 0.0,
            percentage=float(total / grand_total),
        )
        for provider, (total, unique) in totals.items()
    ]
    return sorted(providers, key=lambda provider: provider.total_deal_size, reverse=True)


def normalise_replica_rows(
    rows: Iterable[tuple[int, str, str]],
) -> tuple[ReplicationDistribution, ...]:
    """
    Merge per-client replica rows and compute shares of the group total.

    Returns:
        tuple[ReplicationDistribution, ...]: One entry per replica count,
            ascending. Empty when the grand total is zero.
    """
    totals: dict[int, list[Decimal]] = {}
    for num_of_replicas, total_deal_size, unique_data_size in rows:
        sums = totals.setdefault(int(num_of_replicas), [Decimal(0), Decimal(0)])
        sums[0] += Decimal(total_deal_size)
        sums[1] += Decimal(unique_data_size)

    grand_total = sum((total for total, _ in totals.values()), Decimal(0))
    if grand_total == 0:
        return ()

    return tuple(
        ReplicationDistribution(
            num_of_replicas=num_of_replicas,
            total_deal_size=float(total),
            unique_data_size=float(unique),
            percentage=float(total / grand_total),
        )
        for num_of_replicas, (total, unique) in sorted(totals.items())
    )


def _with_location(
    provider: ProviderDistribution,
    location: Location | None,
    *,
    is_new: bool,
) -> ProviderDistribution:
    return ProviderDistribution(
        provider=provider.provider,
        total_deal_size=provider.total_deal_size,
        unique_data_size=provider.unique_data_size,
        duplication_percentage=provider.duplication_percentage,
        percentage=provider.percentage,
        location=location,
        is_new=is_new,
    )


async def _load_with_retry(
    loader: Callable[[Sequence[str]], T],
    keys: Sequence[str],
    *,
    description: str,
    fallback: T | None = None,
) -> T:
    """
    Run a blocking storage loader in a worker thread with retries.

    Returns:
        T: The loader result, or ``fallback`` (an empty list when not given)
            once the retry budget is spent.
    """
    try:
        return await retry_async(
            lambda: asyncio.to_thread(loader, keys),
            attempts=_QUERY_ATTEMPTS,
            description=description,
            retry_on=(sqlite3.Error,),
        )
    except RetryExhaustedError as error:
        logger.error("%s degraded to empty result: %s", description, error, exc_info=True)
        return [] if fallback is None else fallback


async def _fetch_approvers(
    tickets: TicketSystem,
    issue_reference: str | None,
) -> tuple[tuple[str, int], ...] | None:
    """
    Read the approvers of an application issue.

    Returns:
        tuple[tuple[str, int], ...] | None: (login, count) pairs, or None when
            the issue reference is missing, not numeric, or unreadable.
    """
    if issue_reference is None or not issue_reference.isdigit():
        return None

    try:
        return tuple(await tickets.fetch_approvers(int(issue_reference)))
    except Exception as error:
        logger.warning("Could not read approvers of issue #%s: %s", issue_reference, error)
        return None


async def _or_empty(operation: Awaitable[tuple[T, ...]], description: str) -> tuple[T, ...]:
    """
    Await one dataset, degrading to empty when it fails.

    Returns:
        tuple[T, ...]: The dataset, or an empty tuple on failure.
    """
    try:
        return await operation
    except Exception as error:
        logger.error(
            "Failed to build %s: %s",
            description,
            error,
            exc_info=True,
        )
        return ()
