"""Identity provider adapter (user directory export)."""

from src.infrastructure.providers.identity.api_client import ProviderAPIClient
from src.infrastructure.providers.identity.user_mapper import ProviderUserMapper

__all__ = ["ProviderAPIClient", "ProviderUserMapper"]
