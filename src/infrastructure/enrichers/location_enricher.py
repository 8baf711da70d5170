"""Location enricher using MaxMind GeoIP2.

Resolves client IP addresses to a city and country with a local GeoLite2-City
(or GeoIP2-City) database.

Implementation:
    - Fail-open: every error returns an empty GeoLocation
    - Private, loopback and reserved addresses are never looked up
    - The database reader opens lazily on the first public lookup
    - No database path means geolocation is disabled
"""

import ipaddress
from pathlib import Path

import geoip2.database
import geoip2.errors

from src.domain.protocols.location_enricher_protocol import GeoLocation
from src.domain.protocols.logger_protocol import LoggerProtocol


class GeoIPLocationEnricher:
    """Implements LocationEnricherProtocol (structural typing).

    Behavior:
        - Never raises; suspicious-login checks treat an empty result as
          "location unknown"
        - A missing or unreadable database disables lookups after one warning

    Args:
        logger: Logger for lookup and database problems.
        db_path: Path to the .mmdb file, or None to disable geolocation.
    """

    def __init__(self, *, logger: LoggerProtocol, db_path: str | None) -> None:
        self._logger = logger
        self._db_path = db_path
        self._reader: geoip2.database.Reader | None = None
        self._unavailable = db_path is None

    async def enrich(self, ip_address: str | None) -> GeoLocation:
        """Resolve an IP address.

        Args:
            ip_address: Client IPv4 or IPv6 address.

        Returns:
            GeoLocation: Empty for missing, private or unknown addresses, and
                whenever the database is unavailable.
        """
        if not ip_address or not self._is_public(ip_address):
            return GeoLocation()

        reader = self._open_reader()
        if reader is None:
            return GeoLocation()

        try:
            response = reader.city(ip_address)
        except geoip2.errors.AddressNotFoundError:
            self._logger.debug("geoip_address_not_found", ip_address=ip_address)
            return GeoLocation()
        except Exception as e:
            self._logger.warning(
                "geoip_lookup_failed", ip_address=ip_address, error=str(e)
            )
            return GeoLocation()

        return GeoLocation(
            city=response.city.name or None,
            country_code=response.country.iso_code or None,
        )

    def close(self) -> None:
        """Release the database reader."""
        if self._reader is not None:
            self._reader.close()
            self._reader = None

    def _open_reader(self) -> geoip2.database.Reader | None:
        if self._reader is not None or self._unavailable:
            return self._reader

        db_file = Path(str(self._db_path))
        if not db_file.exists():
            self._logger.warning("geoip_database_missing", db_path=self._db_path)
            self._unavailable = True
            return None

        try:
            self._reader = geoip2.database.Reader(str(db_file))
        except Exception as e:
            self._logger.warning(
                "geoip_database_unreadable", db_path=self._db_path, error=str(e)
            )
            self._unavailable = True
            return None

        self._logger.info("geoip_database_loaded", db_path=self._db_path)
        return self._reader

    @staticmethod
    def _is_public(ip_address: str) -> bool:
        try:
            address = ipaddress.ip_address(ip_address)
        except ValueError:
            return False
        return not (
            address.is_private
            or address.is_loopback
            or address.is_reserved
            or address.is_link_local
            or address.is_multicast
        )
