"""Request enrichers (device fingerprinting, IP geolocation)."""

from src.infrastructure.enrichers.device_fingerprinter import (
    UserAgentDeviceFingerprinter,
)
from src.infrastructure.enrichers.location_enricher import GeoIPLocationEnricher

__all__ = ["GeoIPLocationEnricher", "UserAgentDeviceFingerprinter"]
