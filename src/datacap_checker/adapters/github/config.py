# github/config.py

import os
from dataclasses import dataclass, field


def _token_from_env() -> str:
    return os.getenv("GITHUB_TOKEN", "")


@dataclass(frozen=True, slots=True)
class GithubConfig:
    """
    Immutable configuration for the GitHub repositories the checker talks to.

    ``owner``/``repo`` identify the application repository whose issues and
    comments are read. Uploaded artifacts go to ``upload_owner``/``upload_repo``
    on ``branch`` when set.
    """

    owner: str
    repo: str

    upload_owner: str | None = None
    upload_repo: str | None = None
    branch: str | None = None

    committer_name: str = "datacap-checker"
    committer_email: str = "datacap-checker@users.noreply.github.com"

    api_url: str = "https://api.github.com"

    token: str = field(default_factory=_token_from_env, repr=False)

    # comments requested per page; a shorter page ends pagination
    page_size: int = 100

    max_attempts: int = 3

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def headers(self) -> dict[str, str]:
        """
        Request headers for the GitHub REST API.

        Returns:
            dict[str, str]: Accept header plus Authorization when a token is
                configured.
        """
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers
