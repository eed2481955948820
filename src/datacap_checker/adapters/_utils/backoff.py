# _utils/backoff.py

import random
from collections.abc import Iterator


def backoff_delays(
    *,
    base: float = 0.5,
    cap: float = 16.0,
    jitter: float = 0.10,
    attempts: int = 3,
) -> Iterator[float]:
    """
    Pauses between retries: ``base``, ``2 * base``, ``4 * base`` and so on,
    never above ``cap``.

    Every pause is scaled by a random factor drawn from
    ``[1 - jitter, 1 + jitter]`` and floored at zero.

    Returns:
        Iterator[float]: One pause in seconds per retry.
    """
    for attempt in range(attempts):
        ceiling = min(cap, base * 2**attempt)
        yield max(0.0, ceiling * random.uniform(1 - jitter, 1 + jitter))
