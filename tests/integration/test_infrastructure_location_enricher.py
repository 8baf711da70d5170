"""Integration tests for GeoIPLocationEnricher.

Tests cover:
- City and country from a database lookup, and the "City, CC" label
- Private, loopback and malformed addresses are never looked up
- Missing database path or file: empty result, lookups disabled
- Addresses absent from the database and reader errors fail open

Architecture:
- geoip2.database.Reader is patched; the .mmdb path is a real temp file so
  the existence check runs for real
"""

from unittest.mock import Mock, patch

import geoip2.errors
import pytest

from src.domain.protocols import GeoLocation
from src.infrastructure.enrichers.location_enricher import GeoIPLocationEnricher

READER = "src.infrastructure.enrichers.location_enricher.geoip2.database.Reader"


@pytest.fixture
def db_file(tmp_path):
    path = tmp_path / "GeoLite2-City.mmdb"
    path.write_bytes(b"")
    return path


def city_response(city: str | None, country_code: str | None) -> Mock:
    response = Mock()
    response.city.name = city
    response.country.iso_code = country_code
    return response


@pytest.mark.integration
class TestGeoIPLocationEnricher:
    """Test enrich()."""

    @pytest.mark.asyncio
    async def test_city_and_country(self, db_file, mock_logger):
        with patch(READER) as reader_class:
            reader_class.return_value.city.return_value = city_response(
                "Auckland", "NZ"
            )
            enricher = GeoIPLocationEnricher(logger=mock_logger, db_path=str(db_file))

            location = await enricher.enrich("203.118.150.50")

        assert location == GeoLocation(city="Auckland", country_code="NZ")
        assert location.label == "Auckland, NZ"
        reader_class.assert_called_once_with(str(db_file))

    @pytest.mark.asyncio
    async def test_country_only(self, db_file, mock_logger):
        with patch(READER) as reader_class:
            reader_class.return_value.city.return_value = city_response(None, "AU")
            enricher = GeoIPLocationEnricher(logger=mock_logger, db_path=str(db_file))

            location = await enricher.enrich("1.1.1.1")

        assert location.city is None
        assert location.label == "AU"

    @pytest.mark.asyncio
    async def test_reader_opened_once(self, db_file, mock_logger):
        with patch(READER) as reader_class:
            reader_class.return_value.city.return_value = city_response(
                "Sydney", "AU"
            )
            enricher = GeoIPLocationEnricher(logger=mock_logger, db_path=str(db_file))

            await enricher.enrich("1.1.1.1")
            await enricher.enrich("8.8.8.8")

        assert reader_class.call_count == 1
        assert reader_class.return_value.city.call_count == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "address",
        ["10.0.0.1", "192.168.1.1", "127.0.0.1", "::1", "fe80::1", "not-an-ip", ""],
    )
    async def test_private_or_invalid_not_looked_up(
        self, address, db_file, mock_logger
    ):
        with patch(READER) as reader_class:
            enricher = GeoIPLocationEnricher(logger=mock_logger, db_path=str(db_file))

            location = await enricher.enrich(address)

        assert location == GeoLocation()
        reader_class.assert_not_called()

    @pytest.mark.asyncio
    async def test_disabled_without_path(self, mock_logger):
        with patch(READER) as reader_class:
            enricher = GeoIPLocationEnricher(logger=mock_logger, db_path=None)

            location = await enricher.enrich("8.8.8.8")

        assert location.label is None
        reader_class.assert_not_called()
        mock_logger.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_file_warns_once(self, tmp_path, mock_logger):
        enricher = GeoIPLocationEnricher(
            logger=mock_logger, db_path=str(tmp_path / "absent.mmdb")
        )

        first = await enricher.enrich("8.8.8.8")
        second = await enricher.enrich("1.1.1.1")

        assert first == second == GeoLocation()
        mock_logger.warning.assert_called_once_with(
            "geoip_database_missing", db_path=str(tmp_path / "absent.mmdb")
        )

    @pytest.mark.asyncio
    async def test_unknown_address_fails_open(self, db_file, mock_logger):
        with patch(READER) as reader_class:
            reader_class.return_value.city.side_effect = (
                geoip2.errors.AddressNotFoundError("not in database")
            )
            enricher = GeoIPLocationEnricher(logger=mock_logger, db_path=str(db_file))

            location = await enricher.enrich("100.64.0.1")

        assert location == GeoLocation()
        assert mock_logger.debug.call_args.args[0] == "geoip_address_not_found"

    @pytest.mark.asyncio
    async def test_reader_error_fails_open(self, db_file, mock_logger):
        with patch(READER) as reader_class:
            reader_class.return_value.city.side_effect = ValueError("corrupt")
            enricher = GeoIPLocationEnricher(logger=mock_logger, db_path=str(db_file))

            location = await enricher.enrich("8.8.8.8")

        assert location == GeoLocation()
        assert mock_logger.warning.call_args.args[0] == "geoip_lookup_failed"

    @pytest.mark.asyncio
    async def test_unreadable_database_disables_lookups(self, db_file, mock_logger):
        with patch(READER, side_effect=ValueError("not a maxmind file")) as reader:
            enricher = GeoIPLocationEnricher(logger=mock_logger, db_path=str(db_file))

            await enricher.enrich("8.8.8.8")
            location = await enricher.enrich("1.1.1.1")

        assert location == GeoLocation()
        assert reader.call_count == 1
        assert mock_logger.warning.call_args.args[0] == "geoip_database_unreadable"
