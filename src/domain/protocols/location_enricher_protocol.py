"""Location enricher protocol (port)."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True, kw_only=True)
class GeoLocation:
    """Where an IP address resolves to.

    Every field is optional: private addresses, unknown addresses and a
    missing database all produce an empty GeoLocation.

    Attributes:
        city: City name.
        country_code: ISO 3166-1 alpha-2 code ("NZ").
    """

    city: str | None = None
    country_code: str | None = None

    @property
    def label(self) -> str | None:
        """"City, CC", just "CC" without a city, or None without a country."""
        if not self.country_code:
            return None
        if self.city:
            return f"{self.city}, {self.country_code}"
        return self.country_code


class LocationEnricherProtocol(Protocol):
    """Resolves client IP addresses to a location.

    Implementations fail open: lookups never raise and return an empty
    GeoLocation when nothing is known.

    Example:
        >>> (await enricher.enrich("203.118.150.50")).label
        'Auckland, NZ'
    """

    async def enrich(self, ip_address: str | None) -> GeoLocation:
        """Resolve an IP address, or return an empty GeoLocation."""
        ...
