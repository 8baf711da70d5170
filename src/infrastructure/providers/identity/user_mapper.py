"""Identity provider user mapper.

Converts provider user JSON into ProviderUser value objects and sanitizes
them on the way in.

Provider User Structure:
    {
        "id": "user_2abc",
        "email_addresses": [
            {"email_address": "Ana@Example.com",
             "verification": {"status": "verified"}}
        ],
        "first_name": "Ana",
        "last_name": "Ngata",
        "phone_numbers": [{"phone_number": "+6421000000"}],
        "public_metadata": {"role": "staff"},
        "private_metadata": {...},
        "created_at": 1706486400000,
        "last_sign_in_at": 1709164800000
    }

Sanitization:
    - private_metadata is dropped entirely
    - public_metadata values under secret-looking keys are redacted
    - timestamps are milliseconds since the epoch
"""

from datetime import UTC, datetime
from typing import Any

import structlog

from src.domain.entities import redact_secrets
from src.domain.value_objects import ProviderUser, normalize_email

logger = structlog.get_logger(__name__)

VERIFIED_STATUS = "verified"


class ProviderUserMapper:
    """Mapper for provider user records.

    Thread-safe: No mutable state, can be shared across requests.

    Example:
        >>> mapper = ProviderUserMapper()
        >>> user = mapper.map_user({"id": "user_1", "email_addresses": []})
        >>> user.email is None
        True
    """

    def map_user(self, data: dict[str, Any]) -> ProviderUser | None:
        """Map one provider user.

        Args:
            data: User object from the provider API.

        Returns:
            ProviderUser, or None when the record has no id.
        """
        provider_user_id = data.get("id")
        if not isinstance(provider_user_id, str) or not provider_user_id:
            logger.warning("provider_user_missing_id", keys=sorted(data.keys()))
            return None

        primary_email = _first(data.get("email_addresses"))
        raw_email = primary_email.get("email_address")
        verification = primary_email.get("verification") or {}
        phone = _first(data.get("phone_numbers")).get("phone_number")
        public_metadata = data.get("public_metadata")

        return ProviderUser(
            provider_user_id=provider_user_id,
            email=normalize_email(raw_email) if raw_email else None,
            email_verified=verification.get("status") == VERIFIED_STATUS,
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            phone=phone if isinstance(phone, str) else None,
            public_metadata=(
                redact_secrets(public_metadata)
                if isinstance(public_metadata, dict)
                else {}
            ),
            created_at=_from_millis(data.get("created_at")),
            last_sign_in_at=_from_millis(data.get("last_sign_in_at")),
        )

    def map_users(self, data_list: list[Any]) -> list[ProviderUser]:
        """Map a list of users, skipping records that cannot be mapped."""
        users: list[ProviderUser] = []
        for data in data_list:
            if not isinstance(data, dict):
                continue
            user = self.map_user(data)
            if user is not None:
                users.append(user)
        return users


def _first(items: Any) -> dict[str, Any]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def _from_millis(value: Any) -> datetime | None:
    if not isinstance(value, int | float) or isinstance(value, bool):
        return None
    return datetime.fromtimestamp(value / 1000, UTC)
