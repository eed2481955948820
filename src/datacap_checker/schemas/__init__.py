# schemas/__init__.py

from .feeds import (
    CommentFeedData,
    IssueFeedData,
    IpInfoFeedData,
    MinerInfoFeedData,
    SuccessRateFeedData,
    VerifiedClientFeedData,
)
from .report import (
    AllocatorGeneratedReportRecord,
    CheckReport,
    FindingOutput,
    GeneratedReportRecord,
)

__all__ = [
    # report
    "AllocatorGeneratedReportRecord",
    "CheckReport",
    "FindingOutput",
    "GeneratedReportRecord",
    # feeds
    "CommentFeedData",
    "IssueFeedData",
    "IpInfoFeedData",
    "MinerInfoFeedData",
    "SuccessRateFeedData",
    "VerifiedClientFeedData",
]
