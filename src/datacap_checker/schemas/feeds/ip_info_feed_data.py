# feeds/ip_info_feed_data.py

from pydantic import BaseModel, ConfigDict, model_validator


class IpInfoFeedData(BaseModel):
    """
    Represents an ipinfo.io lookup result for a single IP address.

    The ``loc`` field ("lat,long") is split into numeric coordinates and the
    ``org`` field ("AS1234 Some Org") is reduced to its organisation name.
    """

    ip: str | None = None
    city: str | None = None
    region: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    org_name: str = "Unknown"
    bogon: bool = False

    @model_validator(mode="before")
    def _normalise_fields(self: dict[str, object]) -> dict[str, object]:
        latitude, longitude = _parse_loc(self.get("loc"))
        return {
            "ip": self.get("ip"),
            "city": self.get("city"),
            "region": self.get("region"),
            "country": self.get("country"),
            "latitude": latitude,
            "longitude": longitude,
            "org_name": _parse_org(self.get("org")),
            "bogon": bool(self.get("bogon", False)),
        }

    model_config = ConfigDict(extra="ignore", strict=False)


def _parse_loc(raw: object) -> tuple[float | None, float | None]:
    """
    Split an ipinfo ``loc`` string into latitude and longitude.

    Returns:
        tuple[float | None, float | None]: Coordinates, or (None, None) when
            the value is absent or malformed.
    """
    if not isinstance(raw, str) or "," not in raw:
        return None, None

    lat, _, long = raw.partition(",")
    try:
        return float(lat), float(long)
    except ValueError:
        return None, None


def _parse_org(raw: object) -> str:
    """
    Drop the leading AS number from an ipinfo ``org`` string.

    Returns:
        str: The organisation name, or "Unknown" when absent.
    """
    if not isinstance(raw, str) or not raw:
        return "Unknown"

    return " ".join(raw.split(" ")[1:])
