# github/api.py

import logging
from collections import Counter
from collections.abc import Callable

import httpx

from datacap_checker.schemas import CommentFeedData, IssueFeedData
from datacap_checker.storage import Cache, MemoryCache

from .._utils import make_client, retry_async
from .config import GithubConfig

logger = logging.getLogger(__name__)

_APPROVAL_PREFIXES = ("## Request Approved", "## Request Proposed")


class GithubTickets:
    """
    Read access to application issues and their comment threads.

    Comment threads are cached per ``owner/repo/number`` through an injected
    cache so repeated approver lookups across a report cost one listing.
    """

    __slots__ = ("_client_factory", "_comments_cache", "_config")

    def __init__(
        self,
        config: GithubConfig,
        *,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
        comments_cache: Cache | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or (
            lambda: make_client(headers=config.headers())
        )
        self._comments_cache = (
            comments_cache if comments_cache is not None else MemoryCache()
        )

    @property
    def config(self) -> GithubConfig:
        return self._config

    async def fetch_issue(self, number: int) -> IssueFeedData:
        """
        Fetch a single issue of the application repository.

        Returns:
            IssueFeedData: The issue number, title, body and URL.

        Raises:
            RetryExhaustedError: If the issue could not be fetched.
        """
        url = f"{self._config.api_url}/repos/{self._config.full_name}/issues/{number}"

        async def _request(client: httpx.AsyncClient) -> dict:
            response = await client.get(url)
            response.raise_for_status()
            return response.json()

        async with self._client_factory() as client:
            payload = await retry_async(
                lambda: _request(client),
                attempts=self._config.max_attempts,
                description=f"issue #{number}",
                retry_on=(httpx.HTTPError,),
            )

        return IssueFeedData.model_validate(payload)

    async def fetch_comments(self, issue_number: int) -> list[CommentFeedData]:
        """
        List every comment of an issue, following pagination.

        A missing issue (404) yields an empty list rather than an error.

        Returns:
            list[CommentFeedData]: Comments in thread order.

        Raises:
            RetryExhaustedError: If a page could not be fetched.
        """
        key = f"{self._config.full_name}/{issue_number}"
        if self._comments_cache.has(key):
            return self._comments_cache.get(key)

        comments: list[CommentFeedData] = []
        async with self._client_factory() as client:
            page = 1
            while True:
                batch = await self._fetch_comment_page(client, issue_number, page)
                if batch is None:
                    break
                comments.extend(CommentFeedData.model_validate(item) for item in batch)
                if len(batch) < self._config.page_size:
                    break
                page += 1

        self._comments_cache.set(key, comments)
        return comments

    async def fetch_approvers(self, issue_number: int) -> list[tuple[str, int]]:
        """
        Count approval and proposal comments per author on an issue.

        Returns:
            list[tuple[str, int]]: (login, count) pairs sorted by login.
                Comments without an author count under "Unknown".
        """
        comments = await self.fetch_comments(issue_number)
        return count_approvers(comments)

    async def _fetch_comment_page(
        self,
        client: httpx.AsyncClient,
        issue_number: int,
        page: int,
    ) -> list[dict] | None:
        """
        Fetch one page of comments.

        Returns:
            list[dict] | None: Raw comment objects, or None if the issue does
                not exist.
        """
        url = (
            f"{self._config.api_url}/repos/{self._config.full_name}"
            f"/issues/{issue_number}/comments"
        )
        params = {"per_page": self._config.page_size, "page": page}
        logger.info("Getting comments for issue #%d (page %d)", issue_number, page)

        async def _request() -> list[dict] | None:
            response = await client.get(url, params=params)
            if response.status_code == httpx.codes.NOT_FOUND:
                return None
            response.raise_for_status()
            return response.json()

        return await retry_async(
            _request,
            attempts=self._config.max_attempts,
            description=f"comments of issue #{issue_number}",
            retry_on=(httpx.HTTPError,),
        )


def count_approvers(comments: list[CommentFeedData]) -> list[tuple[str, int]]:
    """
    Count comments that start with an approval or proposal heading.

    Returns:
        list[tuple[str, int]]: (login, count) pairs sorted by login.
    """
    counts = Counter(
        comment.login or "Unknown"
        for comment in comments
        if comment.body.startswith(_APPROVAL_PREFIXES)
    )
    return sorted(counts.items())
