# datacap_checker/__init__.py

from .domain import (
    check_client,
    get_all_client_generated_reports,
    get_latest_client_generated_report,
)
from .schemas import CheckReport, GeneratedReportRecord

__all__ = [
    "check_client",
    "get_all_client_generated_reports",
    "get_latest_client_generated_report",
    "CheckReport",
    "GeneratedReportRecord",
]
