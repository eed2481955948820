# _utils/__init__.py

from ._client import make_client
from .backoff import backoff_delays
from .retry import RetryExhaustedError, retry_async

__all__ = [
    "RetryExhaustedError",
    "backoff_delays",
    "make_client",
    "retry_async",
]
