# github/__init__.py

from .api import GithubTickets
from .config import GithubConfig
from .upload import GithubArtifactStore, LocalArtifactStore

__all__ = [
    "GithubArtifactStore",
    "GithubConfig",
    "GithubTickets",
    "LocalArtifactStore",
]
