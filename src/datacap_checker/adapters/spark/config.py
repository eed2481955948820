# spark/config.py

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SparkConfig:
    """
    Immutable configuration for the Spark retrieval statistics API.
    """

    # per-miner retrieval success rate summary over a date range
    success_rate_url: str = (
        "https://stats.filspark.com/miners/retrieval-success-rate/summary"
    )

    max_attempts: int = 3
