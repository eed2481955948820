# check/models.py

from dataclasses import dataclass

from ..criteria import DEFAULT_RETRIEVABILITY_THRESHOLD, Criteria


@dataclass(frozen=True)
class CheckSettings:
    """
    Thresholds applied by a checker run.

    ``tiers`` are indexed by allocation count: a client on its n-th allocation
    is held to the n-th tier, or the last one once it has more allocations
    than tiers.
    """

    tiers: tuple[Criteria, ...] = (Criteria(),)
    retrievability_threshold: float = DEFAULT_RETRIEVABILITY_THRESHOLD
    retrievability_window_days: int = 7


def default_settings() -> CheckSettings:
    return CheckSettings()
