# feeds/success_rate_feed_data.py

from pydantic import BaseModel, ConfigDict, Field


class SuccessRateFeedData(BaseModel):
    """
    One row of the Spark per-miner retrieval success rate summary.
    """

    miner_id: str
    success_rate: float = Field(ge=0.0, le=1.0)

    model_config = ConfigDict(extra="ignore", strict=False)
