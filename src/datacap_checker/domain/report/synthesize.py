# report/synthesize.py

import asyncio
import logging
import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from datacap_checker.storage import save_generated_report

from .._utils._protocols import ArtifactStore
from ..application import ApplicationInfo
from ..criteria import Category, Criteria, Evaluation, Finding, FindingKind
from ..distribution import CidSharing, DistributionBundle, ProviderDistribution
from ..retrievability import RetrievabilitySummary
from .builder import ReportBuilder
from .formatters import (
    CHECK_MARK,
    WARNING,
    format_bytes,
    format_percentage,
    generate_link,
    gfm_table,
    linkify_address,
    linkify_application,
    ordinal,
    provider_link,
    render_approvers,
    wrap_in_code,
)

logger = logging.getLogger(__name__)

REPORT_HEADING = "## DataCap and CID Checker Report"

MANUAL_TRIGGER_FOOTNOTE = (
    "[^1]: To manually trigger this report, add a comment with text "
    "`checker:manualTrigger`"
)
OTHER_ADDRESSES_FOOTNOTE = (
    "[^2]: Deals from those addresses are combined into this report as they "
    "are specified with `checker:manualTrigger`"
)
SHARING_FOOTNOTE = (
    "[^3]: To manually trigger this report with deals from other related "
    "addresses, add a comment with text "
    "`checker:manualTrigger <other_address_1> <other_address_2> ...`"
)

_TOP_SHARING_ROWS = 3


@dataclass(frozen=True)
class ReportMetadata:
    """
    Descriptive context printed at the top of the full report.

    ``other_addresses`` pairs each additional grouped address with its
    resolved application, if any.
    """

    application: ApplicationInfo
    client_id: str
    generated_at: datetime
    approvers: tuple[tuple[str, int], ...] | None = None
    other_addresses: tuple[tuple[str, ApplicationInfo | None], ...] = ()
    retrievability_window_days: int = 7


@dataclass(frozen=True)
class ReportTables:
    distributions: DistributionBundle
    retrievability: RetrievabilitySummary


@dataclass(frozen=True)
class ReportImages:
    provider_distribution_url: str = ""
    replication_distribution_url: str = ""


@dataclass(frozen=True)
class SynthesizedReport:
    summary: str
    full: str


@dataclass(frozen=True)
class PublishedReport:
    """
    Summary with its trailing link, and where the full report now lives.
    """

    summary: str
    full: str
    url: str


def error_document(message: str) -> str:
    """
    Short markdown document posted when a check cannot complete.
    """
    return "\n".join(
        (f"{REPORT_HEADING}[^1]", message, "", MANUAL_TRIGGER_FOOTNOTE, ""),
    )


def synthesize(
    evaluation: Evaluation,
    tables: ReportTables,
    images: ReportImages,
    metadata: ReportMetadata,
) -> SynthesizedReport:
    """
    Render the evaluation and its tables into the summary and full documents.

    Headline findings go to both documents in evaluation order; explanatory
    text, per-provider warnings, tables and images go to the full document
    only.

    Args:
        evaluation: Findings and the tier they were evaluated against.
        tables: Distributions and retrievability backing the tables.
        images: URLs of the uploaded chart images, empty when not rendered.
        metadata: Application details and report timestamp.

    Returns:
        SynthesizedReport: The summary and full markdown documents.
    """
    timestamp = metadata.generated_at.isoformat(sep=" ", timespec="seconds")
    builder = ReportBuilder(
        summary_title=f"{REPORT_HEADING} Summary[^1]",
        full_title=f"{REPORT_HEADING}[^1] ({timestamp})",
    )

    _add_metadata(builder, metadata)
    _add_other_addresses(builder, metadata.other_addresses)
    _add_provider_section(builder, evaluation, tables, images, metadata)
    _add_replication_section(builder, evaluation, tables, images)
    _add_sharing_section(builder, evaluation, tables.distributions.sharing)
    _add_footnotes(builder)

    return SynthesizedReport(
        summary=builder.render_summary(),
        full=builder.render_full(),
    )


async def publish_report(
    report: SynthesizedReport,
    *,
    store: ArtifactStore,
    client_address: str,
    path: str,
    commit_message: str,
) -> PublishedReport:
    """
    Upload the full report, link it from the summary and record the pointer.

    A failed pointer write is logged and does not affect the returned
    documents.

    Args:
        report: The synthesized documents.
        store: Destination for the full report.
        client_address: Client the report pointer is recorded under.
        path: Artifact path of the full report.
        commit_message: Message used when the store is a repository.

    Returns:
        PublishedReport: The linked summary, the full report and its URL.
    """
    _, view_url = await store.upload(path, report.full.encode(), commit_message)
    logger.info("Report content uploaded to %s", view_url)

    try:
        await asyncio.to_thread(save_generated_report, client_address, view_url)
    except (sqlite3.Error, OSError):
        logger.error(
            "Failed to insert generated report for %s",
            client_address,
            exc_info=True,
        )

    summary = "\n".join(
        (
            report.summary,
            "### Full report",
            f"Click {generate_link('here', view_url)} to view the CID Checker report.",
        ),
    )
    return PublishedReport(summary=summary, full=report.full, url=view_url)


def _add_metadata(builder: ReportBuilder, metadata: ReportMetadata) -> None:
    application = metadata.application
    issue = application.issue_reference or "N/A"
    issue_link = (
        generate_link(f"#{issue}", application.url)
        if application.url
        else wrap_in_code(f"#{issue}")
    )

    builder.add_detail(
        f" - Allocator: {wrap_in_code(application.verifier)}",
        f" - Organization: {wrap_in_code(application.organization_name)}",
        f" - Client: {wrap_in_code(application.client_address)}",
        f" - Client ID: {wrap_in_code(metadata.client_id)}",
        f" - Github Issue: {issue_link}",
        "### Approvers",
        render_approvers(metadata.approvers),
        "",
    )


def _add_other_addresses(
    builder: ReportBuilder,
    other_addresses: Sequence[tuple[str, ApplicationInfo | None]],
) -> None:
    if other_addresses:
        builder.add_shared("### Other Addresses[^2]")
        for address, application in other_addresses:
            builder.add_shared(
                f" - {linkify_address(address)} - {linkify_application(application)}",
                "",
            )
    builder.add_detail("")


def _add_provider_section(
    builder: ReportBuilder,
    evaluation: Evaluation,
    tables: ReportTables,
    images: ReportImages,
    metadata: ReportMetadata,
) -> None:
    criteria = evaluation.criteria

    builder.add_shared("### Storage Provider Distribution")
    builder.add_detail(
        "The below table shows the distribution of storage providers that have "
        "stored data for this client.",
        "",
        "If this is the first time a provider takes verified deal, it will be "
        "marked as `new`.",
        "",
        "For most of the datacap application, below restrictions should apply.",
    )
    _add_relaxed_notice(builder, evaluation)
    builder.add_detail(
        " - Storage provider should not exceed "
        f"{format_percentage(criteria.max_provider_deal_percentage, 0)} "
        "of total datacap.",
        " - Storage provider should not be storing duplicate data for more than "
        f"{format_percentage(criteria.max_duplication_percentage, 0)}.",
        " - Storage provider should have published its public IP address.",
        " - All storage providers should be located in different regions.",
        "",
    )

    for finding in evaluation.findings:
        line = _provider_detail_line(finding)
        if line is not None:
            builder.add_detail(line, "")

    for line in _provider_headlines(evaluation.findings, criteria):
        builder.add_shared(line, "")

    for finding in evaluation.by_category(Category.RETRIEVABILITY):
        builder.add_shared(_retrievability_line(finding), "")

    builder.add_detail(
        _provider_table(
            tables.distributions.providers,
            tables.retrievability,
            metadata.retrievability_window_days,
        ),
    )
    builder.add_shared("")
    if images.provider_distribution_url:
        builder.add_detail(f'<img src="{images.provider_distribution_url}"/>', "")


def _add_replication_section(
    builder: ReportBuilder,
    evaluation: Evaluation,
    tables: ReportTables,
    images: ReportImages,
) -> None:
    criteria = evaluation.criteria

    builder.add_shared("### Deal Data Replication")
    builder.add_detail(
        "The below table shows how each many unique data are replicated across "
        "storage providers.",
        "",
    )
    if criteria.max_percentage_for_low_replica < 1:
        _add_relaxed_notice(builder, evaluation)
        builder.add_detail(
            "- No more than "
            f"{format_percentage(criteria.max_percentage_for_low_replica, 0)} "
            "of unique data are stored with less than "
            f"{criteria.low_replica_threshold + 1} providers.",
        )
    builder.add_detail("")

    for finding in evaluation.by_category(Category.REPLICATION):
        if finding.kind is FindingKind.LOW_REPLICA_OVERAGE:
            builder.add_shared(
                f"{WARNING} {format_percentage(finding.value)} of deals are for "
                "data replicated across less than "
                f"{criteria.low_replica_threshold + 1} storage providers.",
                "",
            )
        else:
            builder.add_shared(f"{CHECK_MARK} Data replication looks healthy.", "")

    builder.add_detail(
        gfm_table(
            [
                {
                    "unique": format_bytes(replica.unique_data_size),
                    "total": format_bytes(replica.total_deal_size),
                    "replicas": replica.num_of_replicas,
                    "percentage": format_percentage(replica.percentage),
                }
                for replica in tables.distributions.replicas
            ],
            [
                ("unique", "Unique Data Size", "r"),
                ("total", "Total Deals Made", "r"),
                ("replicas", "Number of Providers", "r"),
                ("percentage", "Deal Percentage", "r"),
            ],
        ),
        "",
    )
    if images.replication_distribution_url:
        builder.add_detail(f'<img src="{images.replication_distribution_url}"/>')
    builder.add_shared("")


def _add_sharing_section(
    builder: ReportBuilder,
    evaluation: Evaluation,
    sharing: Sequence[CidSharing],
) -> None:
    builder.add_shared("### Deal Data Shared with other Clients[^3]")
    builder.add_detail(
        "The below table shows how many unique data are shared with other clients.",
        "Usually different applications owns different data and should not "
        "resolve to the same CID.",
        "",
        "However, this could be possible if all below clients use same software "
        "to prepare for the exact same dataset or they belong to a series of LDN "
        "applications for the same dataset.",
        "",
    )

    if not evaluation.by_kind(FindingKind.CID_SHARING_OBSERVED):
        builder.add_shared(f"{CHECK_MARK} No CID sharing has been observed.")
        return

    builder.add_shared(f"{WARNING} CID sharing has been observed.", "")
    builder.add_detail(
        gfm_table(
            [
                {
                    "client": linkify_address(row.other_client),
                    "application": linkify_application(row.application),
                    "total": format_bytes(row.total_deal_size),
                    "cids": f"{row.unique_cid_count:,}",
                    "approvers": render_approvers(row.approvers),
                }
                for row in sharing
            ],
            [
                ("client", "Other Client", "l"),
                ("application", "Application", "l"),
                ("total", "Total Deals Affected", "r"),
                ("cids", "Unique CIDs", "r"),
                ("approvers", "Approvers", "l"),
            ],
        ),
        "",
    )

    builder.add_shared("Top 3 clients by deals affected:")
    for row in sharing[:_TOP_SHARING_ROWS]:
        builder.add_shared(
            f"- {format_bytes(row.total_deal_size)} - "
            f"{linkify_address(row.other_client)} - "
            f"{linkify_application(row.application)}",
        )


def _add_footnotes(builder: ReportBuilder) -> None:
    builder.add_shared(
        "",
        MANUAL_TRIGGER_FOOTNOTE,
        "",
        OTHER_ADDRESSES_FOOTNOTE,
        "",
        SHARING_FOOTNOTE,
        "",
    )


def _add_relaxed_notice(builder: ReportBuilder, evaluation: Evaluation) -> None:
    if evaluation.early_allocation:
        builder.add_detail(
            "",
            f"**Since this is the {ordinal(evaluation.number_of_allocations + 1)} "
            "allocation, the following restrictions have been relaxed:**",
        )


def _provider_detail_line(finding: Finding) -> str | None:
    """
    Per-provider warning text, or None for findings without a provider.
    """
    if finding.subject is None:
        return None

    link = provider_link(finding.subject)
    match finding.kind:
        case FindingKind.PROVIDER_OVER_CONCENTRATION:
            return (
                f"{WARNING} {link} has sealed {format_percentage(finding.value)} "
                "of total datacap."
            )
        case FindingKind.PROVIDER_OVER_DUPLICATION:
            return (
                f"{WARNING} {format_percentage(finding.value)} of total deal sealed "
                f"by {link} are duplicate data."
            )
        case FindingKind.PROVIDER_NO_LOCATION:
            return f"{WARNING} {link} has unknown IP location."
        case _:
            return None


def _provider_headlines(
    findings: Sequence[Finding],
    criteria: Criteria,
) -> list[str]:
    """
    Aggregated provider warnings followed by the region and health lines.
    """
    concentrated = [f for f in findings if f.kind is FindingKind.PROVIDER_OVER_CONCENTRATION]
    duplicated = [f for f in findings if f.kind is FindingKind.PROVIDER_OVER_DUPLICATION]
    unlocated = [f for f in findings if f.kind is FindingKind.PROVIDER_NO_LOCATION]

    lines = []
    if concentrated:
        lines.append(
            f"{WARNING} {len(concentrated)} storage providers sealed more than "
            f"{format_percentage(criteria.max_provider_deal_percentage, 0)} "
            "of total datacap - " + _provider_values(concentrated),
        )
    if duplicated:
        lines.append(
            f"{WARNING} {len(duplicated)} storage providers sealed too much "
            "duplicate data - " + _provider_values(duplicated),
        )
    if unlocated:
        lines.append(
            f"{WARNING} {len(unlocated)} storage providers have unknown IP "
            "location - " + ", ".join(f" {provider_link(f.subject)}" for f in unlocated),
        )

    for finding in findings:
        if finding.kind is FindingKind.SINGLE_REGION:
            lines.append(f"{WARNING} All storage providers are located in the same region.")
        elif finding.kind is FindingKind.HEALTHY and finding.category is Category.PROVIDER:
            lines.append(f"{CHECK_MARK} Storage provider distribution looks healthy.")
    return lines


def _provider_values(findings: Sequence[Finding]) -> str:
    return ", ".join(
        f" {provider_link(finding.subject)}: {format_percentage(finding.value)}"
        for finding in findings
    )


def _retrievability_line(finding: Finding) -> str:
    match finding.kind:
        case FindingKind.RETRIEVABILITY_ZERO:
            return (
                f"{WARNING} {format_percentage(finding.value)} of Storage Providers "
                "have retrieval success rate equal to zero."
            )
        case FindingKind.RETRIEVABILITY_LOW:
            return (
                f"{WARNING} {format_percentage(finding.value)} of Storage Providers "
                "have retrieval success rate less than 75%."
            )
        case _:
            return (
                f"{WARNING} The average retrieval success rate is "
                f"{format_percentage(finding.value)}"
            )


def _provider_table(
    providers: Sequence[ProviderDistribution],
    retrievability: RetrievabilitySummary,
    window_days: int,
) -> str:
    rows = []
    for provider in providers:
        rate = retrievability.rate_for(provider.provider)
        rows.append(
            {
                "provider": provider_link(provider.provider)
                + (f"{wrap_in_code('new')} " if provider.is_new else ""),
                "location": f"{provider.rendered_location}<br/>"
                f"{wrap_in_code(provider.org_name)}",
                "total": format_bytes(provider.total_deal_size),
                "percentage": format_percentage(provider.percentage),
                "unique": format_bytes(provider.unique_data_size),
                "duplicate": format_percentage(provider.duplication_percentage),
                "retrievability": "-" if rate is None else format_percentage(rate),
            },
        )

    return gfm_table(
        rows,
        [
            ("provider", "Provider", "l"),
            ("location", "Location", "r"),
            ("total", "Total Deals Sealed", "r"),
            ("percentage", "Percentage", "r"),
            ("unique", "Unique Data", "r"),
            ("duplicate", "Duplicate Deals", "r"),
            ("retrievability", f"Mean Spark Retrieval Success Rate {window_days}d", "r"),
        ],
    )
