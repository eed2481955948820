# _utils/_protocols.py

from typing import Protocol


class TicketSystem(Protocol):
    """
    Issue tracker holding client applications and their review threads.
    """

    async def fetch_approvers(self, issue_number: int) -> list[tuple[str, int]]: ...


class ArtifactStore(Protocol):
    """
    Destination for published report artifacts.
    """

    async def upload(
        self,
        path: str,
        content: bytes,
        commit_message: str,
    ) -> tuple[str, str]: ...
