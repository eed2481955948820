# check/check.py

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime

from datacap_checker.adapters._utils import RetryExhaustedError
from datacap_checker.adapters.datacapstats import DatacapStatsConfig
from datacap_checker.adapters.github import LocalArtifactStore
from datacap_checker.adapters.glif import GlifResponseError, lookup_ids
from datacap_checker.schemas import CheckReport, FindingOutput, GeneratedReportRecord
from datacap_checker.storage import (
    get_data_store_path,
    load_generated_reports,
    load_latest_generated_report,
)

from .._utils._protocols import ArtifactStore, TicketSystem
from ..application import ApplicationInfo, ApplicationInfoResolver
from ..criteria import Evaluation, Finding, build_evaluation
from ..distribution import DistributionAggregator, DistributionBundle
from ..report import (
    ChartRenderer,
    ReportImages,
    ReportMetadata,
    ReportTables,
    error_document,
    geo_map_entries,
    publish_report,
    replication_bar_entries,
    synthesize,
)
from ..retrievability import RetrievabilityAggregator, join_retrievability
from .errors import ResolutionNotFound
from .models import CheckSettings, default_settings

logger = logging.getLogger(__name__)

NO_CLIENT_ADDRESS = "No client address found for this issue."
NO_PREVIOUS_ALLOCATION = "There is no previous allocation for this issue."
NO_CLIENT_ID = "No client ID found for this issue."
NO_ACTIVE_DEALS = "No active deals found for this client."

AddressLookup = Callable[[Sequence[str]], Awaitable[list[str]]]


def no_application_info_message() -> str:
    return (
        "No application info found for this issue on "
        f"{DatacapStatsConfig().clients_page_url}."
    )


class ClientChecker:
    """
    Run the DataCap and CID check for a client address.

    Collaborators are injected so each stage can be replaced; anything left
    out falls back to the public upstream services and a local artifact
    directory under the data store.
    """

    __slots__ = (
        "_aggregator",
        "_charts",
        "_clock",
        "_lookup_ids",
        "_resolver",
        "_retrievability",
        "_settings",
        "_store",
        "_tickets",
    )

    def __init__(
        self,
        *,
        resolver: ApplicationInfoResolver | None = None,
        address_lookup: AddressLookup | None = None,
        aggregator: DistributionAggregator | None = None,
        retrievability: RetrievabilityAggregator | None = None,
        tickets: TicketSystem | None = None,
        store: ArtifactStore | None = None,
        charts: ChartRenderer | None = None,
        settings: CheckSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._resolver = resolver or ApplicationInfoResolver()
        self._lookup_ids = address_lookup or lookup_ids
        self._tickets = tickets
        self._aggregator = aggregator or DistributionAggregator(
            resolver=self._resolver,
            tickets=tickets,
        )
        self._retrievability = retrievability or RetrievabilityAggregator()
        self._store = store or _default_store()
        self._charts = charts
        self._settings = settings or default_settings()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def check(
        self,
        address: str | None,
        *,
        other_addresses: Sequence[str] = (),
        issue_number: int | None = None,
        repository: str | None = None,
    ) -> CheckReport:
        """
        Check a client and publish its report.

        Terminal failures (unknown client, no allocations, unresolvable ids,
        no active deals) produce an error document in ``summary`` rather
        than raising.

        Args:
            address: Client address under review.
            other_addresses: Related addresses whose deals are combined into
                the report.
            issue_number: Application issue the report is posted to; defaults
                to the issue referenced by the client's application.
            repository: "owner/repo" of that issue, used for artifact paths.

        Returns:
            CheckReport: The summary, full report and findings of the run.
        """
        generated_at = self._clock()
        try:
            return await self._check(
                address,
                other_addresses=other_addresses,
                issue_number=issue_number,
                repository=repository,
                generated_at=generated_at,
            )
        except ResolutionNotFound as error:
            logger.warning("Check of %s ended early: %s", address, error)
            return _error_report(address, generated_at, str(error))

    async def _check(
        self,
        address: str | None,
        *,
        other_addresses: Sequence[str],
        issue_number: int | None,
        repository: str | None,
        generated_at: datetime,
    ) -> CheckReport:
        if not address or not address.startswith("f"):
            raise ResolutionNotFound(NO_CLIENT_ADDRESS)

        application = await self._resolve_application(address)
        logger.info("Retrieved application info for %s: %s", address, application)

        if application.number_of_allocations == 0:
            raise ResolutionNotFound(NO_PREVIOUS_ALLOCATION)

        group = address_group(address, other_addresses)
        logger.info("Retrieved address group %s", group)
        client_ids = await self._resolve_ids(group)

        settings = self._settings
        bundle, rates = await asyncio.gather(
            self._aggregator.aggregate(client_ids),
            self._retrievability.fetch_success_rates(
                settings.retrievability_window_days,
            ),
        )
        if not bundle.providers:
            raise ResolutionNotFound(NO_ACTIVE_DEALS)

        retrievability = join_retrievability(bundle.providers, rates)
        evaluation = build_evaluation(
            settings.tiers,
            application.number_of_allocations,
            bundle.providers,
            bundle.replicas,
            retrievability,
            bundle.sharing,
            retrievability_threshold=settings.retrievability_threshold,
        )

        issue = issue_number if issue_number is not None else _issue_number(application)
        prefix = artifact_prefix(address, issue, repository)
        stamp = int(generated_at.timestamp() * 1000)

        images = await self._upload_charts(bundle, evaluation, prefix, stamp)
        metadata = ReportMetadata(
            application=application,
            client_id=client_ids[group.index(address)],
            generated_at=generated_at,
            approvers=await self._approvers(issue),
            other_addresses=await self._other_applications(group, address),
            retrievability_window_days=settings.retrievability_window_days,
        )
        report = synthesize(
            evaluation,
            ReportTables(distributions=bundle, retrievability=retrievability),
            images,
            metadata,
        )
        published = await publish_report(
            report,
            store=self._store,
            client_address=application.client_address,
            path=f"{prefix}/{stamp}.md",
            commit_message=f"Upload report for {_subject(address, issue, repository)}",
        )

        return CheckReport(
            client_address=address,
            generated_at=generated_at.isoformat(),
            summary=published.summary,
            full=published.full,
            report_url=published.url,
            early_allocation=evaluation.early_allocation,
            findings=tuple(_finding_output(finding) for finding in evaluation.findings),
        )

    async def _resolve_application(self, address: str) -> ApplicationInfo:
        try:
            application = await self._resolver.resolve(address)
        except RetryExhaustedError as error:
            logger.error("Application lookup for %s failed: %s", address, error)
            application = None

        if application is None:
            raise ResolutionNotFound(no_application_info_message())
        return application

    async def _resolve_ids(self, group: Sequence[str]) -> list[str]:
        try:
            return await self._lookup_ids(group)
        except (RetryExhaustedError, GlifResponseError) as error:
            logger.error("Client id lookup for %s failed: %s", list(group), error)
            raise ResolutionNotFound(NO_CLIENT_ID) from error

    async def _approvers(
        self,
        issue_number: int | None,
    ) -> tuple[tuple[str, int], ...] | None:
        if issue_number is None or self._tickets is None:
            return None
        try:
            return tuple(await self._tickets.fetch_approvers(issue_number))
        except RetryExhaustedError as error:
            logger.warning("Could not read approvers of issue #%s: %s", issue_number, error)
            return None

    async def _other_applications(
        self,
        group: Sequence[str],
        address: str,
    ) -> tuple[tuple[str, ApplicationInfo | None], ...]:
        others = []
        for other in group:
            if other == address:
                continue
            try:
                application = await self._resolver.resolve(other)
            except RetryExhaustedError as error:
                logger.warning("Could not resolve other address %s: %s", other, error)
                application = None
            others.append((other, application))
        return tuple(others)

    async def _upload_charts(
        self,
        bundle: DistributionBundle,
        evaluation: Evaluation,
        prefix: str,
        stamp: int,
    ) -> ReportImages:
        """
        Render and upload both charts when a renderer is configured.

        Returns:
            ReportImages: Download URLs, empty when not rendered or uploaded.
        """
        if self._charts is None:
            return ReportImages()

        provider_image = self._charts.provider_map(geo_map_entries(bundle.providers))
        replication_image = self._charts.replication_chart(
            replication_bar_entries(
                bundle.replicas,
                evaluation.criteria.low_replica_threshold,
            ),
        )

        provider_url, _ = await self._store.upload(
            f"{prefix}/{stamp}-providers.png",
            provider_image,
            "Upload provider distribution image",
        )
        replication_url, _ = await self._store.upload(
            f"{prefix}/{stamp}-replication.png",
            replication_image,
            "Upload replication distribution image",
        )
        return ReportImages(
            provider_distribution_url=provider_url,
            replication_distribution_url=replication_url,
        )


async def check_client(
    address: str | None,
    *,
    other_addresses: Sequence[str] = (),
    settings: CheckSettings | None = None,
    **collaborators: object,
) -> CheckReport:
    """
    Check a client with a one-off ClientChecker.

    Keyword arguments other than ``settings`` are passed to ClientChecker.

    Returns:
        CheckReport: The result of the run.
    """
    checker = ClientChecker(settings=settings, **collaborators)
    return await checker.check(address, other_addresses=other_addresses)


async def get_latest_client_generated_report(
    address: str,
    *,
    resolver: ApplicationInfoResolver | None = None,
) -> GeneratedReportRecord | None:
    """
    Newest report pointer recorded for a client.

    Returns:
        GeneratedReportRecord | None: The pointer, or None when the client has
            no reports yet.

    Raises:
        ResolutionNotFound: If the address has no application record.
    """
    application = await _require_application(address, resolver)
    return await asyncio.to_thread(
        load_latest_generated_report,
        application.client_address,
    )


async def get_all_client_generated_reports(
    address: str,
    *,
    resolver: ApplicationInfoResolver | None = None,
) -> list[GeneratedReportRecord]:
    """
    Every report pointer recorded for a client, newest first.

    Raises:
        ResolutionNotFound: If the address has no application record.
    """
    application = await _require_application(address, resolver)
    return await asyncio.to_thread(load_generated_reports, application.client_address)


def address_group(address: str, other_addresses: Sequence[str]) -> list[str]:
    """
    The other addresses followed by ``address``, without duplicates.
    """
    group = list(dict.fromkeys(other_addresses))
    if address not in group:
        group.append(address)
    return group


def artifact_prefix(
    address: str,
    issue_number: int | None,
    repository: str | None,
) -> str:
    """
    Directory under which a run's artifacts are stored.
    """
    if issue_number is not None and repository:
        return f"{repository}/issues/{issue_number}"
    return f"clients/{address}"


def _subject(address: str, issue_number: int | None, repository: str | None) -> str:
    if issue_number is not None and repository:
        return f"issue #{issue_number} of {repository}"
    return f"client {address}"


def _issue_number(application: ApplicationInfo) -> int | None:
    reference = application.issue_reference
    return int(reference) if reference and reference.isdigit() else None


def _finding_output(finding: Finding) -> FindingOutput:
    return FindingOutput(
        kind=finding.kind.value,
        severity=finding.severity.value,
        category=finding.category.value,
        subject=finding.subject,
        value=finding.value,
    )


def _error_report(address: str | None, generated_at: datetime, message: str) -> CheckReport:
    return CheckReport(
        client_address=address,
        generated_at=generated_at.isoformat(),
        summary=error_document(message),
        full=None,
        report_url=None,
        early_allocation=False,
        findings=(),
    )


def _default_store() -> LocalArtifactStore:
    root = (get_data_store_path() / "reports").resolve()
    return LocalArtifactStore(root, base_url=root.as_uri() + "/")


async def _require_application(
    address: str,
    resolver: ApplicationInfoResolver | None,
) -> ApplicationInfo:
    application = await (resolver or ApplicationInfoResolver()).resolve(address)
    if application is None:
        raise ResolutionNotFound(no_application_info_message())
    return application
