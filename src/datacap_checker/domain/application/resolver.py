# application/resolver.py

import logging
from collections.abc import Awaitable, Callable

from datacap_checker.adapters.datacapstats import fetch_verified_clients
from datacap_checker.schemas import VerifiedClientFeedData
from datacap_checker.storage import Cache, MemoryCache

from .models import ApplicationInfo

logger = logging.getLogger(__name__)

_NOT_FOUND_SENTINEL = ""

RecordLookup = Callable[[str], Awaitable[list[VerifiedClientFeedData]]]


class ApplicationInfoResolver:
    """
    Resolve client addresses to their allocation metadata.

    Results, including misses, are kept in the injected cache so an address is
    looked up upstream at most once while its entry lives. Lookup failures are
    not cached and propagate to the caller.
    """

    __slots__ = ("_cache", "_lookup")

    def __init__(
        self,
        *,
        lookup: RecordLookup | None = None,
        cache: Cache | None = None,
    ) -> None:
        """
        Args:
            lookup: Coroutine returning registry rows for an address; defaults
                to the DataCap registry API.
            cache: Cache for resolved results; defaults to a bounded
                MemoryCache.
        """
        self._lookup = lookup or fetch_verified_clients
        self._cache = cache if cache is not None else MemoryCache()

    async def resolve(self, address: str) -> ApplicationInfo | None:
        """
        Resolve an address to its ApplicationInfo.

        Returns:
            ApplicationInfo | None: The metadata, or None when the registry
                has no record for the address.

        Raises:
            RetryExhaustedError: If the registry could not be reached.
        """
        if self._cache.has(address):
            return _resolve_cached_value(self._cache.get(address))

        logger.info("Finding application info for client %s", address)
        records = await self._lookup(address)

        info = _build_application_info(address, records)
        self._cache.set(address, info if info is not None else _NOT_FOUND_SENTINEL)
        return info

    def invalidate(self, address: str) -> None:
        """
        Drop any cached result for ``address``.
        """
        self._cache.invalidate(address)


def select_primary_record(
    records: list[VerifiedClientFeedData],
) -> VerifiedClientFeedData | None:
    """
    Pick the record with the largest initial allowance.

    Ties keep the first record encountered.

    Returns:
        VerifiedClientFeedData | None: The primary record, or None if empty.
    """
    if not records:
        return None

    return max(records, key=lambda record: record.initial_allowance)


def _build_application_info(
    address: str,
    records: list[VerifiedClientFeedData],
) -> ApplicationInfo | None:
    """
    Build ApplicationInfo from the primary registry record.

    Returns:
        ApplicationInfo | None: The metadata, or None if there are no records.
    """
    primary = select_primary_record(records)
    if primary is None:
        return None

    url = primary.audit_trails[0] if primary.audit_trails else None

    return ApplicationInfo(
        client_address=address,
        organization_name=(primary.name or "") + (primary.org_name or ""),
        verifier=primary.verifier_name or "",
        url=url,
        issue_reference=url.rstrip("/").split("/")[-1] if url else None,
        number_of_allocations=len(primary.audit_trails),
    )


def _resolve_cached_value(cached: object) -> ApplicationInfo | None:
    """
    Interpret a cached value, treating the sentinel as not found.

    Returns:
        ApplicationInfo | None: The cached metadata, or None for a cached miss.
    """
    if cached == _NOT_FOUND_SENTINEL:
        return None
    return cached
