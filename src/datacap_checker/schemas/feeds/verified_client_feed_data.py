# feeds/verified_client_feed_data.py

from pydantic import BaseModel, ConfigDict, model_validator


class VerifiedClientFeedData(BaseModel):
    """
    Represents a single verified-client record from the DataCap registry,
    flattening the nested allowance history into the fields the checker uses.

    Args:
        self (dict[str, object]): Raw payload of one ``getVerifiedClients`` row.

    Returns:
        VerifiedClientFeedData: An instance with normalised fields.
    """

    address: str
    name: str | None = None
    org_name: str | None = None
    verifier_name: str | None = None
    initial_allowance: int = 0
    audit_trails: list[str | None] = []

    @model_validator(mode="before")
    def _normalise_fields(self: dict[str, object]) -> dict[str, object]:
        """
        Normalise a raw registry row into the flat schema.

        The allowance array is reduced to its audit trail links, preserving
        order so the first entry remains the original application.

        Args:
            self (dict[str, object]): Raw registry row.

        Returns:
            dict[str, object]: Flattened field mapping.
        """
        allowances = self.get("allowanceArray") or []
        return {
            "address": self.get("address"),
            "name": self.get("name"),
            "org_name": self.get("orgName"),
            "verifier_name": self.get("verifierName"),
            "initial_allowance": _parse_allowance(self.get("initialAllowance")),
            "audit_trails": [
                (allowance or {}).get("auditTrail") for allowance in allowances
            ],
        }

    model_config = ConfigDict(
        # registry rows carry many unrelated columns
        extra="ignore",
        strict=False,
    )


def _parse_allowance(raw: object) -> int:
    """
    Parse an allowance given as a decimal string or number.

    Returns:
        int: The allowance in bytes, or 0 when absent or malformed.
    """
    if raw is None:
        return 0

    try:
        return int(str(raw))
    except ValueError:
        return 0
