# github/upload.py

import base64
import logging
from collections.abc import Callable
from pathlib import Path

import httpx

from .._utils import RetryExhaustedError, make_client, retry_async
from .config import GithubConfig

logger = logging.getLogger(__name__)


class GithubArtifactStore:
    """
    Publish report artifacts by committing them to a GitHub repository.
    """

    __slots__ = ("_client_factory", "_config")

    def __init__(
        self,
        config: GithubConfig,
        *,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or (
            lambda: make_client(headers=config.headers())
        )

    async def upload(
        self,
        path: str,
        content: bytes,
        commit_message: str,
    ) -> tuple[str, str]:
        """
        Create ``path`` in the upload repository with ``content``.

        Upload failures are logged and reported as empty URLs so a report can
        still be produced.

        Returns:
            tuple[str, str]: (download_url, html_url), or ("", "") on failure.
        """
        owner = self._config.upload_owner or self._config.owner
        repo = self._config.upload_repo or self._config.repo
        url = f"{self._config.api_url}/repos/{owner}/{repo}/contents/{path}"

        body: dict[str, object] = {
            "message": commit_message,
            "content": base64.b64encode(content).decode("ascii"),
            "committer": {
                "name": self._config.committer_name,
                "email": self._config.committer_email,
            },
        }
        if self._config.branch:
            body["branch"] = self._config.branch

        logger.info("Uploading file %s to %s/%s", path, owner, repo)

        async def _request(client: httpx.AsyncClient) -> dict:
            response = await client.put(url, json=body)
            response.raise_for_status()
            return response.json()

        try:
            async with self._client_factory() as client:
                payload = await retry_async(
                    lambda: _request(client),
                    attempts=self._config.max_attempts,
                    description=f"upload of {path}",
                    retry_on=(httpx.HTTPError,),
                )
        except RetryExhaustedError as error:
            logger.error("Error uploading file %s: %s", path, error)
            return "", ""

        content_info = payload.get("content") or {}
        logger.info("Uploaded file %s", path)
        return content_info.get("download_url") or "", content_info.get("html_url") or ""


class LocalArtifactStore:
    """
    Publish report artifacts into a local directory served under a base URL.
    """

    __slots__ = ("_base_url", "_root")

    def __init__(self, root: Path, base_url: str) -> None:
        self._root = root
        self._base_url = base_url

    async def upload(
        self,
        path: str,
        content: bytes,
        commit_message: str,
    ) -> tuple[str, str]:
        """
        Write ``content`` to ``root/path``.

        Returns:
            tuple[str, str]: The public URL twice, or ("", "") on failure.
        """
        destination = self._root / path
        logger.info("Writing file %s (%s)", destination, commit_message)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(content)
        except OSError as error:
            logger.error("Error writing file %s: %s", destination, error)
            return "", ""

        url = self._base_url + path
        return url, url
