# github/test_upload.py

import base64
import json

import httpx
import pytest

from datacap_checker.adapters.github import (
    GithubArtifactStore,
    GithubConfig,
    LocalArtifactStore,
)

pytestmark = pytest.mark.unit

_CONFIG = GithubConfig(
    owner="apps",
    repo="applications",
    upload_owner="reports",
    upload_repo="artifacts",
    branch="main",
    token="t",
)


def _client_factory(handler):
    return lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_github_upload_returns_download_and_html_urls() -> None:
    """
    ARRANGE: contents API answering with both URLs
    ACT:     upload
    ASSERT:  returns (download_url, html_url)
    """

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            201,
            json={
                "content": {
                    "download_url": "https://raw.example/report.md",
                    "html_url": "https://github.example/report.md",
                },
            },
        )

    store = GithubArtifactStore(_CONFIG, client_factory=_client_factory(handler))

    actual = await store.upload("a/b/report.md", b"# Report", "Upload report")

    assert actual == ("https://raw.example/report.md", "https://github.example/report.md")


async def test_github_upload_targets_upload_repository() -> None:
    """
    ARRANGE: handler recording the request
    ACT:     upload
    ASSERT:  PUT goes to the upload repository with base64 content and branch
    """
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"content": {}})

    store = GithubArtifactStore(_CONFIG, client_factory=_client_factory(handler))

    await store.upload("x/report.md", b"hello", "msg")

    body = json.loads(seen[0].content)
    assert seen[0].method == "PUT"
    assert seen[0].url.path == "/repos/reports/artifacts/contents/x/report.md"
    assert base64.b64decode(body["content"]) == b"hello"
    assert body["branch"] == "main"


async def test_github_upload_failure_returns_empty_urls() -> None:
    """
    ARRANGE: contents API always failing
    ACT:     upload
    ASSERT:  returns ("", "") instead of raising
    """

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "error"})

    store = GithubArtifactStore(_CONFIG, client_factory=_client_factory(handler))

    actual = await store.upload("x/report.md", b"hello", "msg")

    assert actual == ("", "")


async def test_local_upload_writes_file(tmp_path) -> None:
    """
    ARRANGE: local store rooted at a temporary directory
    ACT:     upload nested path
    ASSERT:  file exists with the uploaded bytes
    """
    store = LocalArtifactStore(tmp_path, "https://files.example/")

    await store.upload("clients/f1abc/1.md", b"content", "msg")

    assert (tmp_path / "clients/f1abc/1.md").read_bytes() == b"content"


async def test_local_upload_returns_base_url_twice(tmp_path) -> None:
    """
    ARRANGE: local store with a base URL
    ACT:     upload
    ASSERT:  both URLs are base URL plus path
    """
    store = LocalArtifactStore(tmp_path, "https://files.example/")

    actual = await store.upload("r.md", b"x", "msg")

    assert actual == ("https://files.example/r.md", "https://files.example/r.md")


async def test_local_upload_failure_returns_empty_urls(tmp_path) -> None:
    """
    ARRANGE: store root that is a regular file
    ACT:     upload beneath it
    ASSERT:  returns ("", "")
    """
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = LocalArtifactStore(blocker, "https://files.example/")

    actual = await store.upload("nested/r.md", b"x", "msg")

    assert actual == ("", "")
