# _utils/_client.py

import httpx

_DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=10.0)

_DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "datacap-checker",
}


def make_client(
    *,
    headers: dict[str, str] | None = None,
    timeout: httpx.Timeout | None = None,
) -> httpx.AsyncClient:
    """
    Create an AsyncClient with the shared defaults used by every adapter.

    Adapter-specific headers (for example an Authorization header) are merged
    over the defaults.

    Returns:
        httpx.AsyncClient: A new, unopened client.
    """
    return httpx.AsyncClient(
        headers={**_DEFAULT_HEADERS, **(headers or {})},
        timeout=timeout or _DEFAULT_TIMEOUT,
        follow_redirects=True,
    )
