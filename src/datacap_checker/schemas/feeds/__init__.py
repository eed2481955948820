# feeds/__init__.py

from .ip_info_feed_data import IpInfoFeedData
from .issue_feed_data import CommentFeedData, IssueFeedData
from .miner_info_feed_data import MinerInfoFeedData
from .success_rate_feed_data import SuccessRateFeedData
from .verified_client_feed_data import VerifiedClientFeedData

__all__ = [
    "CommentFeedData",
    "IssueFeedData",
    "IpInfoFeedData",
    "MinerInfoFeedData",
    "SuccessRateFeedData",
    "VerifiedClientFeedData",
]
