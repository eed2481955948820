# feeds/miner_info_feed_data.py

from pydantic import BaseModel, ConfigDict, model_validator


class MinerInfoFeedData(BaseModel):
    """
    Subset of a ``Filecoin.StateMinerInfo`` result used for location lookup.
    """

    peer_id: str | None = None
    # base64-encoded binary multiaddrs
    multiaddrs: list[str] = []

    @model_validator(mode="before")
    def _normalise_fields(self: dict[str, object]) -> dict[str, object]:
        return {
            "peer_id": self.get("PeerId"),
            # lotus returns null rather than an empty list
            "multiaddrs": self.get("Multiaddrs") or [],
        }

    model_config = ConfigDict(extra="ignore", strict=False)
