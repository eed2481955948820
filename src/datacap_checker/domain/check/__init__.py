# check/__init__.py

from .check import (
    NO_ACTIVE_DEALS,
    NO_CLIENT_ADDRESS,
    NO_CLIENT_ID,
    NO_PREVIOUS_ALLOCATION,
    ClientChecker,
    address_group,
    artifact_prefix,
    check_client,
    get_all_client_generated_reports,
    get_latest_client_generated_report,
    no_application_info_message,
)
from .errors import ResolutionNotFound
from .models import CheckSettings, default_settings

__all__ = [
    "NO_ACTIVE_DEALS",
    "NO_CLIENT_ADDRESS",
    "NO_CLIENT_ID",
    "NO_PREVIOUS_ALLOCATION",
    "CheckSettings",
    "ClientChecker",
    "ResolutionNotFound",
    "address_group",
    "artifact_prefix",
    "check_client",
    "default_settings",
    "get_all_client_generated_reports",
    "get_latest_client_generated_report",
    "no_application_info_message",
]
