# feeds/issue_feed_data.py

from pydantic import BaseModel, ConfigDict, model_validator


class IssueFeedData(BaseModel):
    """
    The parts of a GitHub issue the checker reads.
    """

    number: int
    title: str = ""
    body: str = ""
    html_url: str | None = None

    @model_validator(mode="before")
    def _normalise_fields(self: dict[str, object]) -> dict[str, object]:
        return {
            "number": self.get("number"),
            "title": self.get("title") or "",
            # GitHub returns null for issues created without a body
            "body": self.get("body") or "",
            "html_url": self.get("html_url"),
        }

    model_config = ConfigDict(extra="ignore", strict=False)


class CommentFeedData(BaseModel):
    """
    A single issue comment reduced to its text and author login.
    """

    body: str = ""
    login: str | None = None

    @model_validator(mode="before")
    def _normalise_fields(self: dict[str, object]) -> dict[str, object]:
        return {
            "body": self.get("body") or "",
            "login": (self.get("user") or {}).get("login"),
        }

    model_config = ConfigDict(extra="ignore", strict=False)
