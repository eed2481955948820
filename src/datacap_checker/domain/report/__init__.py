# report/__init__.py

from .builder import ReportBuilder
from .charts import (
    BarChartEntry,
    ChartRenderer,
    GeoMapEntry,
    geo_map_entries,
    replication_bar_entries,
)
from .synthesize import (
    PublishedReport,
    ReportImages,
    ReportMetadata,
    ReportTables,
    SynthesizedReport,
    error_document,
    publish_report,
    synthesize,
)

__all__ = [
    "BarChartEntry",
    "ChartRenderer",
    "GeoMapEntry",
    "PublishedReport",
    "ReportBuilder",
    "ReportImages",
    "ReportMetadata",
    "ReportTables",
    "SynthesizedReport",
    "error_document",
    "geo_map_entries",
    "publish_report",
    "replication_bar_entries",
    "synthesize",
]
